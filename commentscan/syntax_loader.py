"""YAML / JSON / TOMLテーブルから Syntax をロードするユーティリティ。
フォーマット例:

YAML:
---
block_comment: ["/*", "*/"]
line_comment: "//"
quotes:
  - char: '"'
    name: double-quote string
  - char: "'"
    name: single-quote string

JSON: 上記と同じ構造のオブジェクト。
コメント形式は null で無効化できる。キーを省略した項目は既定値(C風)のまま。
"""
from __future__ import annotations
from pathlib import Path
import json
from typing import Any, Dict

from .errors import SyntaxProfileError
from .syntax import Syntax, QuoteRule, DEFAULT_QUOTES

try:
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None  # YAML未インストール時はJSONのみ

_MISSING = object()

# pyproject.toml の [tool.commentscan] はキャメルケースで書く
_TOML_KEYS = {
    "blockComment": "block_comment",
    "lineComment": "line_comment",
    "quotes": "quotes",
}


def _decode(raw: bytes) -> str:
    # いくつかのエンコーディング候補を試す (PowerShell Set-Content デフォルト UTF-16 対応)
    for enc in ("utf-8", "utf-8-sig", "utf-16", "utf-16-le", "utf-16-be"):
        try:
            text = raw.decode(enc)
        except UnicodeDecodeError:
            continue
        return text.lstrip("\ufeff")
    raise UnicodeDecodeError("unknown", b"", 0, 1, "Unable to decode syntax file with tried encodings")


def _as_bytes(value: Any, what: str) -> bytes:
    if not isinstance(value, str):
        raise SyntaxProfileError(f"{what} must be a string, got {type(value).__name__}")
    return value.encode("utf-8")


def syntax_from_mapping(data: Dict[str, Any]) -> Syntax:
    if not isinstance(data, dict):
        raise SyntaxProfileError("syntax profile must be a mapping")
    unknown = set(data) - {"block_comment", "line_comment", "quotes"}
    if unknown:
        raise SyntaxProfileError(f"unknown syntax keys: {', '.join(sorted(unknown))}")

    block = data.get("block_comment", _MISSING)
    if block is _MISSING:
        block_comment = Syntax.block_comment
    elif block is None:
        block_comment = None
    else:
        if not isinstance(block, (list, tuple)) or len(block) != 2:
            raise SyntaxProfileError("block_comment must be a list of [open, close]")
        block_comment = (_as_bytes(block[0], "block_comment"), _as_bytes(block[1], "block_comment"))

    line = data.get("line_comment", _MISSING)
    if line is _MISSING:
        line_comment = Syntax.line_comment
    elif line is None:
        line_comment = None
    else:
        line_comment = _as_bytes(line, "line_comment")

    raw_quotes = data.get("quotes", _MISSING)
    if raw_quotes is _MISSING:
        quotes = DEFAULT_QUOTES
    else:
        if raw_quotes is None:
            raw_quotes = []
        if not isinstance(raw_quotes, list):
            raise SyntaxProfileError("quotes must be a list")
        items = []
        for item in raw_quotes:
            if isinstance(item, str):
                # 文字だけの簡略記法
                items.append(QuoteRule(_as_bytes(item, "quote"), f"{item} string"))
                continue
            if not isinstance(item, dict) or "char" not in item:
                raise SyntaxProfileError("each quote needs a 'char' entry")
            char = item["char"]
            name = item.get("name") or f"{char} string"
            items.append(QuoteRule(_as_bytes(char, "quote"), str(name)))
        quotes = tuple(items)

    return Syntax(block_comment=block_comment, line_comment=line_comment, quotes=quotes)


def syntax_from_toml_table(table: Dict[str, Any]) -> Syntax:
    data = {_TOML_KEYS[k]: v for k, v in table.items() if k in _TOML_KEYS}
    return syntax_from_mapping(data)


def load_syntax_file(path: str) -> Syntax:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(path)
    text = _decode(p.read_bytes())
    if p.suffix.lower() in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAMLがインストールされていないためYAMLは読み込めません。'pip install PyYAML' を実行してください")
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    return syntax_from_mapping(data)


__all__ = ["load_syntax_file", "syntax_from_mapping", "syntax_from_toml_table"]
