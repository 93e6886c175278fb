import io
from commentscan import scan_bytes
from commentscan.diagnostics import Diagnostics


def test_line_and_block_comment_positions():
    data = b"// hello\n/* world\n*/\n"
    records = scan_bytes(data, filename="f")
    assert [r.to_dict() for r in records] == [
        {"filename": "f", "line": 1, "char_index": 0, "text": "// hello"},
        {"filename": "f", "line": 2, "char_index": 9, "text": "/* world\n*/"},
    ]


def test_ascii_char_index_is_byte_offset():
    data = b"int x = 1; // c"
    (rec,) = scan_bytes(data)
    assert rec.char_index == data.index(b"//") == 11


def test_multibyte_codepoint_counts_once():
    # '€' は UTF-8 で3バイト
    data = "a€b /* c */".encode("utf-8")
    (rec,) = scan_bytes(data)
    assert rec.char_index == 4
    emoji = "😀 // x".encode("utf-8")
    assert scan_bytes(emoji)[0].char_index == 2


def test_line_counter_after_multiline_block():
    records = scan_bytes(b"/* a\nb */ x // c")
    assert [(r.line, r.char_index) for r in records] == [(1, 0), (2, 12)]


def test_range_origin_is_used_as_is():
    (rec,) = scan_bytes(b"/*x*/", filename="f", line=5, char_index=10)
    assert (rec.filename, rec.line, rec.char_index) == ("f", 5, 10)


def test_deterministic():
    data = "// a\n/* б */ 'c' \"d\" // e\n".encode("utf-8")
    assert scan_bytes(data, filename="x") == scan_bytes(data, filename="x")


def test_no_filename_is_omitted_from_dict():
    (rec,) = scan_bytes(b"// x")
    assert "filename" not in rec.to_dict()


def test_line_comment_excludes_newline_but_keeps_cr():
    records = scan_bytes(b"// a\r\n// b")
    assert [r.text for r in records] == [b"// a\r", b"// b"]
    assert [r.line for r in records] == [1, 2]


def test_unterminated_report_goes_to_diagnostics():
    err = io.StringIO()
    diag = Diagnostics(err)
    records = scan_bytes(b"/* abc", filename="f", diagnostics=diag)
    assert records == []
    assert diag.exit_status != 0
    assert err.getvalue() == "f:1: unterminated comment\n"
