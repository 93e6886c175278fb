"""走査対象ファイルのキュー。

- ファイル名を先頭から順に1つずつ開く(同時に開くのは常に1つだけ)。
- 開けなかった場合は FileOpenError を送出し、実行全体を中断する(スキップしない)。
- 範囲走査モードでは標準入力を「仮想ファイル」1件として扱う。
"""
from __future__ import annotations
import os
from collections import deque
from typing import BinaryIO, Iterable, Optional

from .errors import FileOpenError


class SourceStream:
    """開いた入力ストリームとその表示名。with 文で必ず閉じる。"""

    def __init__(self, label: str | None, handle: BinaryIO, owned: bool = True):
        self.label = label
        self.handle = handle
        self.owned = owned  # 標準入力など借り物のハンドルは閉じない
        self.closed = False

    def read(self) -> bytes:
        return self.handle.read()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.owned:
            self.handle.close()

    def __enter__(self) -> "SourceStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class FileQueue:
    def __init__(self, filenames: Iterable[str | os.PathLike[str]] = ()):
        self._pending: deque = deque(filenames)
        self._virtual: Optional[SourceStream] = None

    @classmethod
    def from_stream(cls, label: str | None, handle: BinaryIO) -> "FileQueue":
        """範囲走査モード用: ラベル付きの既存ストリーム1件だけを持つキュー。"""
        queue = cls()
        queue._virtual = SourceStream(label, handle, owned=False)
        return queue

    def __len__(self) -> int:
        return len(self._pending) + (1 if self._virtual is not None else 0)

    def __bool__(self) -> bool:
        return len(self) > 0

    def advance(self) -> Optional[SourceStream]:
        """次のストリームを開いて返す。空なら None。"""
        if self._virtual is not None:
            stream, self._virtual = self._virtual, None
            return stream
        if not self._pending:
            return None
        name = self._pending.popleft()
        try:
            handle = open(name, "rb")
        except OSError as e:
            raise FileOpenError(os.fspath(name), e.strerror or str(e)) from e
        return SourceStream(os.fspath(name), handle)


__all__ = ["FileQueue", "SourceStream"]
