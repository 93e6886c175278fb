"""診断メッセージの出力と終了コードのラッチ。

メッセージの文言は既存ツールとの互換のため固定。
"""
from __future__ import annotations
import sys
from typing import TextIO

PROG = "commentscan"

USAGE_MESSAGE = f"usage: {PROG} LINE CHAR_INDEX FILE [FILE ...]"
NEGATIVE_MESSAGE = f"{PROG}: LINE and CHAR_INDEX must be non-negative"
MULTI_FILE_RANGE_MESSAGE = f"{PROG}: only one FILE may be given when LINE is nonzero"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class Diagnostics:
    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self.exit_status = EXIT_OK

    @property
    def stream(self) -> TextIO:
        # テストで capsys が差し替えた sys.stderr を拾うため遅延参照
        return self._stream if self._stream is not None else sys.stderr

    def report(self, filename: str | None, line: int, message: str) -> None:
        """`<filename>:<line>: <message>` を出力し、終了コードを非0にする。走査は止めない。"""
        print(f"{filename or ''}:{line}: {message}", file=self.stream)
        self.exit_status = EXIT_FAILURE

    def fatal(self, message: str, status: int = EXIT_FAILURE) -> int:
        print(message, file=self.stream)
        self.exit_status = status
        return status

    def warn(self, message: str) -> None:
        print(f"[warn] {message}", file=self.stream)


__all__ = [
    "Diagnostics",
    "USAGE_MESSAGE",
    "NEGATIVE_MESSAGE",
    "MULTI_FILE_RANGE_MESSAGE",
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_USAGE",
]
