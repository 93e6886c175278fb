import io
from commentscan import scan_bytes
from commentscan.diagnostics import Diagnostics


def _texts(data: bytes):
    return [r.text for r in scan_bytes(data)]


def test_comment_markers_inside_strings_are_ignored():
    records = scan_bytes(b'"// not" /* yes */')
    assert [r.text for r in records] == [b"/* yes */"]
    assert records[0].char_index == 9


def test_comment_markers_inside_char_literal_are_ignored():
    assert _texts(b"c = '/'; d = '*'; /* real */") == [b"/* real */"]
    assert _texts(b"s = '/* no */' // yes") == [b"// yes"]


def test_escaped_quote_does_not_end_string():
    records = scan_bytes(b'"a\\"b" // c')
    assert records[0].char_index == 7
    assert _texts(b'"\\\\" // c') == [b"// c"]


def test_quote_inside_other_quote_kind():
    records = scan_bytes(b"'\"' // c")
    assert records[0].char_index == 4


def test_unicode_inside_literal_counts_codepoints():
    records = scan_bytes('"ü" // c'.encode("utf-8"))
    assert records[0].char_index == 4


def test_block_comment_ends_at_first_closer():
    assert _texts(b"/* a */ b */") == [b"/* a */"]
    assert _texts(b"/**/x/***/") == [b"/**/", b"/***/"]


def test_lone_slash_is_plain_code():
    records = scan_bytes(b"a / b // c")
    assert records[0].char_index == 6


def test_line_comment_wins_over_block_opener_inside_it():
    assert _texts(b"// a /* b\nc */") == [b"// a /* b"]


def test_overlapping_opener_is_unterminated():
    err = io.StringIO()
    diag = Diagnostics(err)
    assert scan_bytes(b"/*/ x", diagnostics=diag) == []
    assert err.getvalue() == ":1: unterminated comment\n"


def test_string_with_raw_newline_is_unterminated():
    err = io.StringIO()
    diag = Diagnostics(err)
    records = scan_bytes(b'x\n"abc\n// after', filename="f", diagnostics=diag)
    assert records == []
    assert err.getvalue() == "f:2: unterminated double-quote string\n"
    assert diag.exit_status == 1


def test_comments_before_unterminated_are_kept():
    err = io.StringIO()
    diag = Diagnostics(err)
    records = scan_bytes(b"// ok\n'x", filename="f", diagnostics=diag)
    assert [r.text for r in records] == [b"// ok"]
    assert err.getvalue() == "f:2: unterminated single-quote string\n"


def test_unterminated_line_accounts_for_earlier_block_newlines():
    err = io.StringIO()
    diag = Diagnostics(err)
    scan_bytes(b"/*\n\n*/ \"", filename="f", diagnostics=diag)
    assert err.getvalue() == "f:3: unterminated double-quote string\n"
