import io
import pytest
from commentscan import scan_files
from commentscan.diagnostics import Diagnostics
from commentscan.emitter import RecordCollector
from commentscan.errors import FileOpenError
from commentscan.file_queue import FileQueue
from commentscan.scanner import ScanContext, ScanPosition, ScanState, ScanEvent, Scanner, TRANSITIONS


class _TrackingQueue(FileQueue):
    def __init__(self, names):
        super().__init__(names)
        self.opened = []

    def advance(self):
        stream = super().advance()
        if stream is not None:
            self.opened.append(stream)
        return stream


def test_two_files_in_order_with_reset_positions(tmp_path):
    a = tmp_path / "a.c"
    b = tmp_path / "b.c"
    a.write_bytes(b"// from a\nint x;\n")
    b.write_bytes(b"// from b\n")
    records = scan_files([str(a), str(b)])
    assert [(r.filename, r.line, r.char_index) for r in records] == [
        (str(a), 1, 0),
        (str(b), 1, 0),
    ]


def test_empty_queue_is_terminal():
    queue = FileQueue([])
    assert not queue
    assert queue.advance() is None


def test_missing_file_raises(tmp_path):
    queue = FileQueue([str(tmp_path / "nope.c")])
    with pytest.raises(FileOpenError) as info:
        queue.advance()
    assert info.value.filename.endswith("nope.c")


def test_open_failure_aborts_and_closes_previous(tmp_path):
    good = tmp_path / "good.c"
    good.write_bytes(b"/* g */")
    queue = _TrackingQueue([str(good), str(tmp_path / "missing.c")])
    sink = RecordCollector()
    ctx = ScanContext(queue=queue, sink=sink)
    with pytest.raises(FileOpenError):
        Scanner().run(ctx)
    assert [r.text for r in sink.records] == [b"/* g */"]
    assert all(s.closed and s.handle.closed for s in queue.opened)


def test_unterminated_state_resets_for_next_file(tmp_path):
    a = tmp_path / "a.c"
    b = tmp_path / "b.c"
    a.write_bytes(b"/* never closed\n// hidden\n")
    b.write_bytes(b"x // seen\n")
    err = io.StringIO()
    diag = Diagnostics(err)
    records = scan_files([str(a), str(b)], diagnostics=diag)
    assert [(r.filename, r.line, r.char_index, r.text) for r in records] == [
        (str(b), 1, 2, b"// seen"),
    ]
    assert diag.exit_status == 1
    assert err.getvalue() == f"{a}:1: unterminated comment\n"


def test_virtual_stream_is_not_closed_and_origin_kept():
    handle = io.BytesIO(b"\n/*x*/")
    sink = RecordCollector()
    ctx = ScanContext(
        queue=FileQueue.from_stream("label", handle),
        sink=sink,
        position=ScanPosition(5, 10),
        fixed_origin=True,
    )
    assert Scanner().run(ctx) == 0
    assert [(r.filename, r.line, r.char_index) for r in sink.records] == [("label", 6, 11)]
    assert not handle.closed


def test_transition_table_is_exhaustive():
    for state in ScanState:
        for event in ScanEvent:
            assert (state, event) in TRANSITIONS
    assert TRANSITIONS[(ScanState.NORMAL, ScanEvent.DANGLING)] is ScanState.UNTERMINATED
    assert TRANSITIONS[(ScanState.UNTERMINATED, ScanEvent.END_OF_FILE)] is ScanState.NORMAL
