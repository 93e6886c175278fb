"""字句走査エンジン。

- NORMAL 状態: 各位置で候補マッチャを評価し、最長一致のトークンを消費する。
  コメントならレコードを出力、文字列/文字リテラルは読み飛ばす。
- 未終端のコメント開始/引用符を見つけたら診断を出し UNTERMINATED に遷移する。
  UNTERMINATED ではファイル末尾まで何も解釈せずに捨て、次のファイルで NORMAL に戻る。
- char_index は Unicode コードポイント数で数える(UTF-8 継続バイトは数えない)。
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .diagnostics import Diagnostics
from .emitter import CommentRecord, RecordCollector, RecordSink
from .file_queue import FileQueue, SourceStream
from .syntax import C_STYLE, Matcher, Syntax, TokenKind


class ScanState(Enum):
    NORMAL = "normal"
    UNTERMINATED = "unterminated"


class ScanEvent(Enum):
    TOKEN = "token"
    DANGLING = "dangling"
    END_OF_FILE = "end_of_file"


TRANSITIONS: Dict[Tuple[ScanState, ScanEvent], ScanState] = {
    (ScanState.NORMAL, ScanEvent.TOKEN): ScanState.NORMAL,
    (ScanState.NORMAL, ScanEvent.DANGLING): ScanState.UNTERMINATED,
    (ScanState.NORMAL, ScanEvent.END_OF_FILE): ScanState.NORMAL,
    (ScanState.UNTERMINATED, ScanEvent.TOKEN): ScanState.UNTERMINATED,
    (ScanState.UNTERMINATED, ScanEvent.DANGLING): ScanState.UNTERMINATED,
    (ScanState.UNTERMINATED, ScanEvent.END_OF_FILE): ScanState.NORMAL,
}


def codepoint_length(data: bytes) -> int:
    """UTF-8 バイト列のコードポイント数(継続バイト 10xxxxxx を除いた数)。"""
    return sum(1 for b in data if b & 0xC0 != 0x80)


@dataclass
class ScanPosition:
    line: int = 1
    char_index: int = 0

    def reset(self) -> None:
        self.line = 1
        self.char_index = 0


@dataclass
class ScanContext:
    """走査中の可変状態をまとめたもの。Scanner はこれだけを読み書きする。"""
    queue: FileQueue
    sink: RecordSink
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    position: ScanPosition = field(default_factory=ScanPosition)
    # 範囲走査モードでは呼び出し側の開始位置を使い、ファイルごとのリセットをしない
    fixed_origin: bool = False
    filename: Optional[str] = None
    state: ScanState = ScanState.NORMAL

    @property
    def exit_status(self) -> int:
        return self.diagnostics.exit_status

    def transition(self, event: ScanEvent) -> ScanState:
        self.state = TRANSITIONS[(self.state, event)]
        return self.state


class Scanner:
    def __init__(self, syntax: Syntax | None = None):
        self.syntax = syntax or C_STYLE

    def run(self, ctx: ScanContext) -> int:
        """キューが空になるまで走査する。戻り値はラッチされた終了コード。

        FileOpenError はそのまま送出する(開いていたストリームは閉じてから)。
        """
        stream = ctx.queue.advance()
        ctx.sink.begin()
        while stream is not None:
            with stream:
                self._open(ctx, stream)
                self.scan_stream(ctx, stream.read())
            stream = ctx.queue.advance()
        ctx.sink.finish()
        return ctx.exit_status

    def _open(self, ctx: ScanContext, stream: SourceStream) -> None:
        ctx.filename = stream.label
        ctx.state = ScanState.NORMAL
        if not ctx.fixed_origin:
            ctx.position.reset()

    def scan_stream(self, ctx: ScanContext, data: bytes) -> None:
        pos = 0
        end = len(data)
        while pos < end:
            if ctx.state is ScanState.UNTERMINATED:
                # 残りは解釈せずに捨てる
                pos = end
                ctx.transition(ScanEvent.TOKEN)
                break
            matcher, m = self._longest_match(data, pos)
            pos = m.end()
            self._consume(ctx, matcher, m.group(0))
        ctx.transition(ScanEvent.END_OF_FILE)

    def _longest_match(self, data: bytes, pos: int):
        best: Optional[Matcher] = None
        best_m = None
        for matcher in self.syntax.matchers:
            m = matcher.match(data, pos)
            if m is None:
                continue
            if best_m is None or m.end() > best_m.end():
                best, best_m = matcher, m
        # CODE マッチャは任意の1バイト(改行以外)に、NEWLINE は改行に必ず一致する
        assert best is not None and best_m is not None
        return best, best_m

    def _consume(self, ctx: ScanContext, matcher: Matcher, text: bytes) -> None:
        pos = ctx.position
        kind = matcher.kind
        if kind in (TokenKind.BLOCK_COMMENT, TokenKind.LINE_COMMENT):
            record = CommentRecord(ctx.filename, pos.line, pos.char_index, text)
            pos.char_index += codepoint_length(text)
            ctx.sink.emit(record, pos)
            ctx.transition(ScanEvent.TOKEN)
        elif kind in (TokenKind.DANGLING_COMMENT, TokenKind.DANGLING_QUOTE):
            ctx.diagnostics.report(ctx.filename, pos.line, f"unterminated {matcher.label}")
            ctx.transition(ScanEvent.DANGLING)
        elif kind is TokenKind.NEWLINE:
            pos.line += 1
            pos.char_index += 1
            ctx.transition(ScanEvent.TOKEN)
        else:
            # LITERAL / CODE: 改行を含まないので行番号は変わらない
            pos.char_index += codepoint_length(text)
            ctx.transition(ScanEvent.TOKEN)


def scan_bytes(
    data: bytes,
    filename: str | None = None,
    line: int = 1,
    char_index: int = 0,
    syntax: Syntax | None = None,
    diagnostics: Diagnostics | None = None,
) -> List[CommentRecord]:
    """メモリ上のバイト列を1ファイルとして走査し、レコードのリストを返す。"""
    sink = RecordCollector()
    ctx = ScanContext(
        queue=FileQueue(),
        sink=sink,
        diagnostics=diagnostics or Diagnostics(),
        position=ScanPosition(line, char_index),
        filename=filename,
    )
    scanner = Scanner(syntax)
    scanner.scan_stream(ctx, data)
    return sink.records


def scan_files(
    filenames: Iterable[str],
    syntax: Syntax | None = None,
    diagnostics: Diagnostics | None = None,
) -> List[CommentRecord]:
    """ファイル群を順に走査する(全体走査モード)。開けないファイルがあれば FileOpenError。"""
    sink = RecordCollector()
    ctx = ScanContext(queue=FileQueue(filenames), sink=sink, diagnostics=diagnostics or Diagnostics())
    Scanner(syntax).run(ctx)
    return sink.records


__all__ = [
    "ScanState",
    "ScanEvent",
    "TRANSITIONS",
    "ScanPosition",
    "ScanContext",
    "Scanner",
    "codepoint_length",
    "scan_bytes",
    "scan_files",
]
