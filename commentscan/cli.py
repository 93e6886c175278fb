from __future__ import annotations
import argparse
import sys
import tomllib
from pathlib import Path
from typing import Any, BinaryIO, Dict

from .diagnostics import (
    Diagnostics,
    EXIT_FAILURE,
    EXIT_USAGE,
    MULTI_FILE_RANGE_MESSAGE,
    NEGATIVE_MESSAGE,
    PROG,
    USAGE_MESSAGE,
)
from .emitter import JsonEmitter
from .errors import FileOpenError, UsageError
from .file_queue import FileQueue
from .scanner import ScanContext, ScanPosition, Scanner
from .syntax import C_STYLE, Syntax
from .syntax_loader import load_syntax_file, syntax_from_toml_table


class _ArgumentParser(argparse.ArgumentParser):
    # argparse 既定のメッセージではなく互換の usage 文言で失敗させる
    def error(self, message: str):
        raise UsageError(USAGE_MESSAGE)


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog=PROG,
        description="C/Java/JS風ソースからコメントを抽出し、JSON配列で出力します",
    )
    p.add_argument("line", type=int, help="開始行番号。0なら全体走査、非0なら標準入力を範囲走査")
    p.add_argument("char_index", type=int, help="開始文字位置(コードポイント単位, 範囲走査時のみ使用)")
    p.add_argument("files", nargs="+", help="走査するファイル(範囲走査時は表示用ラベル1つ)")
    p.add_argument("--config", help="設定ファイル(TOML: pyproject.toml など)の [tool.commentscan] を読み込む")
    p.add_argument("--syntax", metavar="FILE", help="区切り文字プロファイル(YAML/JSON)。--config の指定より優先")
    return p


def _validate(args: argparse.Namespace) -> None:
    if args.line < 0 or args.char_index < 0:
        raise UsageError(NEGATIVE_MESSAGE)
    if args.line != 0 and len(args.files) != 1:
        raise UsageError(MULTI_FILE_RANGE_MESSAGE)


def _load_config(path: str, diagnostics: Diagnostics) -> Dict[str, Any]:
    cfg_path = Path(path)
    if not cfg_path.is_file():
        diagnostics.warn(f"config file not found: {cfg_path}")
        return {}
    try:
        with cfg_path.open("rb") as f:
            cfg = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        diagnostics.warn(f"failed to load config {cfg_path}: {e}")
        return {}
    tool = cfg.get("tool", {}) if isinstance(cfg, dict) else {}
    section = tool.get("commentscan", {}) if isinstance(tool, dict) else {}
    if not isinstance(section, dict):
        diagnostics.warn(f"[tool.commentscan] in {cfg_path} is not a table")
        return {}
    # 相対パスは設定ファイルの場所から解決する
    if "syntax" in section:
        section = dict(section)
        section["syntax"] = str(cfg_path.parent / str(section["syntax"]))
    return section


def resolve_syntax(args: argparse.Namespace, diagnostics: Diagnostics) -> Syntax:
    """CLI > 設定ファイルの syntax パス > 設定ファイルのインライン指定 > 既定(C風) の順。"""
    cfg: Dict[str, Any] = _load_config(args.config, diagnostics) if args.config else {}
    syntax_path = args.syntax or cfg.get("syntax")
    if syntax_path:
        return load_syntax_file(str(syntax_path))
    if any(k in cfg for k in ("blockComment", "lineComment", "quotes")):
        return syntax_from_toml_table(cfg)
    return C_STYLE


def main(
    argv: list[str] | None = None,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    diagnostics = Diagnostics()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        _validate(args)
    except UsageError as e:
        return diagnostics.fatal(str(e), EXIT_USAGE)

    try:
        syntax = resolve_syntax(args, diagnostics)
    except Exception as e:  # 設定/プロファイルの読込失敗はスキャン前に終了
        return diagnostics.fatal(f"{PROG}: failed to load syntax: {e}", EXIT_USAGE)

    out = stdout if stdout is not None else sys.stdout.buffer
    if args.line == 0:
        # 全体走査: ファイルごとに (1, 0) から数え直す
        ctx = ScanContext(
            queue=FileQueue(args.files),
            sink=JsonEmitter(out),
            diagnostics=diagnostics,
        )
    else:
        # 範囲走査: 内容は標準入力、ファイル名はラベルとしてのみ使う
        source = stdin if stdin is not None else sys.stdin.buffer
        ctx = ScanContext(
            queue=FileQueue.from_stream(args.files[0], source),
            sink=JsonEmitter(out),
            diagnostics=diagnostics,
            position=ScanPosition(args.line, args.char_index),
            fixed_origin=True,
        )

    try:
        return Scanner(syntax).run(ctx)
    except FileOpenError as e:
        out.flush()
        return diagnostics.fatal(f"{PROG}: {e}", EXIT_FAILURE)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
