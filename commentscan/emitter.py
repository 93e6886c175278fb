"""コメントレコードの出力先(シンク)。

JsonEmitter はレコードを見つけた順に JSON 配列として逐次書き出す。

エスケープは最小限: `"` `\\` と BS/FF/LF/CR/TAB を2文字エスケープに、その他の
0x20 未満の制御バイトを \\u00XX に置き換える。0x80 以上のバイトはそのまま通す。
入力が正しい UTF-8 であることを前提としている(不正なバイト列はそのまま出力され、
結果は妥当な JSON にならない)。

どのシンクも、レコードを受け取った後にテキスト中の改行数だけ共有の行カウンタを
進める。レコード自身は開始行を保持し、以降のレコードは補正済みの行番号を使う。
"""
from __future__ import annotations
import os
import re
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, List

_ESCAPES = {
    b'"': b'\\"',
    b"\\": b"\\\\",
    b"\b": b"\\b",
    b"\f": b"\\f",
    b"\n": b"\\n",
    b"\r": b"\\r",
    b"\t": b"\\t",
}
_NEEDS_ESCAPE = re.compile(rb'["\\\x00-\x1f]')


def escape_json_bytes(data: bytes) -> bytes:
    def _sub(m: "re.Match[bytes]") -> bytes:
        ch = m.group(0)
        return _ESCAPES.get(ch) or b"\\u%04x" % ch[0]
    return _NEEDS_ESCAPE.sub(_sub, data)


@dataclass(frozen=True)
class CommentRecord:
    filename: str | None
    line: int
    char_index: int
    text: bytes

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.filename is not None:
            data["filename"] = self.filename
        data["line"] = self.line
        data["char_index"] = self.char_index
        data["text"] = self.text.decode("utf-8", errors="replace")
        return data

    def to_json_bytes(self) -> bytes:
        parts: List[bytes] = []
        if self.filename is not None:
            parts.append(b'"filename":"' + escape_json_bytes(os.fsencode(self.filename)) + b'"')
        parts.append(b'"line":%d' % self.line)
        parts.append(b'"char_index":%d' % self.char_index)
        parts.append(b'"text":"' + escape_json_bytes(self.text) + b'"')
        return b"{" + b",".join(parts) + b"}"


class RecordSink:
    """レコード受け取りの共通処理(行カウンタの事後補正)。"""

    def begin(self) -> None:
        pass

    def finish(self) -> None:
        pass

    def emit(self, record: CommentRecord, position) -> None:
        self._write(record)
        position.line += record.text.count(b"\n")

    def _write(self, record: CommentRecord) -> None:
        raise NotImplementedError


class JsonEmitter(RecordSink):
    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.first = True

    def begin(self) -> None:
        self.stream.write(b"[")

    def finish(self) -> None:
        self.stream.write(b"\n]\n" if not self.first else b"]\n")
        self.stream.flush()

    def _write(self, record: CommentRecord) -> None:
        self.stream.write(b"\n" if self.first else b",\n")
        self.first = False
        self.stream.write(record.to_json_bytes())


class RecordCollector(RecordSink):
    """JSON を書かずに CommentRecord をリストに溜める(ライブラリAPI用)。"""

    def __init__(self):
        self.records: List[CommentRecord] = []

    def _write(self, record: CommentRecord) -> None:
        self.records.append(record)


__all__ = ["CommentRecord", "RecordSink", "JsonEmitter", "RecordCollector", "escape_json_bytes"]
