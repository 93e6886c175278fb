"""コメント/リテラルの区切り文字定義と候補マッチャ。

既定は C/Java/JS 風:
- ブロックコメント: /* ... */ (複数行可)
- 行コメント: // (改行の直前まで)
- 文字列: "..." / 文字: '...' (エスケープ可, 生の改行は不可)

マッチャは優先順に並べる。同じ位置で複数が一致した場合は最長一致、
長さが同じなら先に並んでいる方を採用する(maximal munch)。
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import re
from typing import List, Pattern, Tuple

from .errors import SyntaxProfileError


class TokenKind(Enum):
    BLOCK_COMMENT = "block_comment"
    LINE_COMMENT = "line_comment"
    LITERAL = "literal"
    DANGLING_COMMENT = "dangling_comment"
    DANGLING_QUOTE = "dangling_quote"
    NEWLINE = "newline"
    CODE = "code"


@dataclass(frozen=True)
class QuoteRule:
    char: bytes
    name: str  # 診断メッセージ用: "double-quote string" など


@dataclass(frozen=True)
class Matcher:
    kind: TokenKind
    pattern: Pattern[bytes]
    label: str = ""  # 未終端時の診断で使う名前

    def match(self, data: bytes, pos: int):
        return self.pattern.match(data, pos)


DEFAULT_QUOTES: Tuple[QuoteRule, ...] = (
    QuoteRule(b'"', "double-quote string"),
    QuoteRule(b"'", "single-quote string"),
)


@dataclass(frozen=True)
class Syntax:
    block_comment: Tuple[bytes, bytes] | None = (b"/*", b"*/")
    line_comment: bytes | None = b"//"
    quotes: Tuple[QuoteRule, ...] = DEFAULT_QUOTES
    _matchers: Tuple[Matcher, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.block_comment is not None:
            if len(self.block_comment) != 2:
                raise SyntaxProfileError("block_comment must be a pair of [open, close]")
            for seq in self.block_comment:
                _check_delimiter(seq, "block_comment")
        if self.line_comment is not None:
            _check_delimiter(self.line_comment, "line_comment")
        for q in self.quotes:
            if len(q.char) != 1:
                raise SyntaxProfileError(f"quote must be exactly one byte: {q.char!r}")
            if q.char in (b"\n", b"\\"):
                raise SyntaxProfileError(f"quote cannot be a newline or backslash: {q.char!r}")
        object.__setattr__(self, "_matchers", tuple(self._build_matchers()))

    @property
    def matchers(self) -> Tuple[Matcher, ...]:
        return self._matchers

    def _build_matchers(self) -> List[Matcher]:
        matchers: List[Matcher] = []
        if self.block_comment is not None:
            opener, closer = self.block_comment
            matchers.append(Matcher(
                TokenKind.BLOCK_COMMENT,
                re.compile(re.escape(opener) + rb".*?" + re.escape(closer), re.DOTALL),
            ))
        if self.line_comment is not None:
            matchers.append(Matcher(
                TokenKind.LINE_COMMENT,
                re.compile(re.escape(self.line_comment) + rb"[^\n]*"),
            ))
        for q in self.quotes:
            # エスケープ(\x)は改行以外の任意1バイトを取り込む
            qe = re.escape(q.char)
            matchers.append(Matcher(
                TokenKind.LITERAL,
                re.compile(qe + rb"(?:[^" + qe + rb"\\\n]|\\.)*" + qe),
            ))
        if self.block_comment is not None:
            matchers.append(Matcher(
                TokenKind.DANGLING_COMMENT,
                re.compile(re.escape(self.block_comment[0])),
                "comment",
            ))
        for q in self.quotes:
            matchers.append(Matcher(TokenKind.DANGLING_QUOTE, re.compile(re.escape(q.char)), q.name))
        matchers.append(Matcher(TokenKind.NEWLINE, re.compile(rb"\n")))
        # 他のトークンの先頭になり得ないバイト列はまとめて1トークンにする
        starts = sorted({seq[:1] for seq in self._openers()})
        excluded = b"".join(re.escape(s) for s in starts)
        matchers.append(Matcher(TokenKind.CODE, re.compile(rb"[^" + excluded + rb"\n]+|.")))
        return matchers

    def _openers(self) -> List[bytes]:
        openers: List[bytes] = [q.char for q in self.quotes]
        if self.block_comment is not None:
            openers.append(self.block_comment[0])
        if self.line_comment is not None:
            openers.append(self.line_comment)
        return openers


def _check_delimiter(seq: bytes, what: str) -> None:
    if not isinstance(seq, bytes) or not seq:
        raise SyntaxProfileError(f"{what} must be a non-empty byte sequence")
    if b"\n" in seq:
        raise SyntaxProfileError(f"{what} cannot contain a newline")


C_STYLE = Syntax()

__all__ = ["TokenKind", "QuoteRule", "Matcher", "Syntax", "C_STYLE", "DEFAULT_QUOTES"]
