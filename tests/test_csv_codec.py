"""Tests for the CSV row parser, record assembly, header gate and serializer."""

from __future__ import annotations

import pytest

from core.constants import MAX_TEXT_CHARS
from core.csv_codec import (
    RowParser,
    escape_field,
    parse,
    parse_line,
    serialize,
    serialize_row,
)
from core.errors import (
    EmptyFileError,
    FileSizeError,
    HeaderError,
    ParseTimeoutError,
    UnterminatedQuoteError,
)

HEADER = "folder,title,prompt,context"


def _fields(result):
    return [list(row.fields) for row in result.rows]


# -----------------------------------------------------------------------
# parse_line
# -----------------------------------------------------------------------


@pytest.mark.parametrize(
    "line, expected",
    [
        ("a,b,c,d", ["a", "b", "c", "d"]),
        ('a,"b,c",d', ["a", "b,c", "d"]),
        ('a,"b""c",d', ["a", 'b"c', "d"]),
        ("a,,c,", ["a", "", "c", ""]),
        ('a,"b\nc",d', ["a", "b\nc", "d"]),
        ('"a,b","c""d""","e,f"', ["a,b", 'c"d"', "e,f"]),
        ('ab"c,d', ['ab"c', "d"]),
        ('"",x', ["", "x"]),
        ("", [""]),
    ],
)
def test_parse_line(line, expected) -> None:
    assert parse_line(line) == expected


def test_parse_line_unterminated_quote() -> None:
    with pytest.raises(UnterminatedQuoteError):
        parse_line('a,"never closed')


def test_row_parser_scan_guard() -> None:
    parser = RowParser(slack=-1)
    with pytest.raises(ParseTimeoutError):
        parser.feed("abc")


def test_row_parser_chunks_join_quoted_field() -> None:
    parser = RowParser()
    parser.feed('x,"first')
    assert parser.in_quotes
    parser.feed("\n")
    parser.feed('second""",y')
    assert not parser.in_quotes
    assert parser.close() == ["x", 'first\nsecond"', "y"]


# -----------------------------------------------------------------------
# Escaping
# -----------------------------------------------------------------------


def test_escape_field_only_when_needed() -> None:
    assert escape_field("simple") == "simple"
    assert escape_field("hello,world") == '"hello,world"'
    assert escape_field('hello"world') == '"hello""world"'
    assert escape_field("hello\nworld") == '"hello\nworld"'
    assert escape_field("a\rb") == '"a\rb"'


@pytest.mark.parametrize(
    "value",
    ["", "plain", "a,b", 'say "hi"', "line1\nline2", "\r\n", '"', '""', ",", 'end,"', "日本語,テキスト", "  padded  "],
)
def test_escape_then_parse_is_identity(value) -> None:
    assert parse_line(escape_field(value)) == [value]


def test_serialize_emits_header_first() -> None:
    text = serialize([["プリセット", "サマリ", "テストプロンプト", "both"]])
    assert text == f"{HEADER}\nプリセット,サマリ,テストプロンプト,both"


def test_serialize_empty_is_header_only() -> None:
    assert serialize([]) == HEADER


def test_serialize_row_quotes_fields() -> None:
    assert serialize_row(["a/b", "t", 'x "q"\ny, z', "page"]) == 'a/b,t,"x ""q""\ny, z",page'


def test_serialize_parse_round_trip_multiline() -> None:
    rows = [["A/B", "t", 'x "q"\n\ny z', "page"], ["", "root", "p", "both"]]
    result = parse(serialize(rows))
    assert _fields(result) == rows
    assert result.error_count == 0


# -----------------------------------------------------------------------
# parse: header gate
# -----------------------------------------------------------------------


def test_header_mismatch_rejects_whole_text() -> None:
    text = "name,title,prompt,context\nA,t,p,both\nB,u,q,page"
    with pytest.raises(HeaderError):
        parse(text)


def test_missing_header_rejects_data_row() -> None:
    with pytest.raises(HeaderError):
        parse("プリセット,サマリ,以下のページをサマリしてください,both")


def test_header_needs_three_columns() -> None:
    with pytest.raises(HeaderError):
        parse("folder,title\nA,t")


def test_header_whitespace_and_missing_context_column_accepted() -> None:
    result = parse(" folder , title ,prompt\nA,t,p")
    assert result.header == ("folder", "title", "prompt")
    assert _fields(result) == [["A", "t", "p"]]


def test_header_bom_is_ignored() -> None:
    result = parse(f"\ufeff{HEADER}\nA,t,p,both")
    assert len(result.rows) == 1


def test_empty_text_rejected() -> None:
    with pytest.raises(EmptyFileError):
        parse("")
    with pytest.raises(EmptyFileError):
        parse("  \n\r\n ")


def test_oversize_text_rejected() -> None:
    with pytest.raises(FileSizeError):
        parse("x" * (MAX_TEXT_CHARS + 1))


def test_header_only_yields_no_rows() -> None:
    result = parse(HEADER)
    assert result.rows == []
    assert result.error_count == 0


# -----------------------------------------------------------------------
# parse: rows
# -----------------------------------------------------------------------


def test_concrete_scenario() -> None:
    result = parse(f'{HEADER}\nプリセット,サマリ,"以下を要約,してください",both')
    assert _fields(result) == [["プリセット", "サマリ", "以下を要約,してください", "both"]]
    assert result.rows[0].line_no == 2


def test_mixed_line_endings_and_blank_lines() -> None:
    text = f"{HEADER}\r\n\r\nA,one,p1,both\rB,two,p2,selection\n\n\nC,three,p3,page\n"
    result = parse(text)
    assert [row.fields[1] for row in result.rows] == ["one", "two", "three"]
    assert result.error_count == 0


def test_quoted_field_spans_lines_including_blank_ones() -> None:
    text = f'{HEADER}\nA,t,"line1\n\nTitle: {{$TITLE}}",both\nB,u,q,page'
    result = parse(text)
    assert _fields(result) == [["A", "t", "line1\n\nTitle: {$TITLE}", "both"], ["B", "u", "q", "page"]]
    assert [row.line_no for row in result.rows] == [2, 5]


def test_one_unterminated_row_does_not_sink_the_batch() -> None:
    text = "\n".join([
        HEADER,
        "A,one,p1,both",
        'A,"two,p2,both',
        "A,three,p3,page",
        "A,four,p4,selection",
    ])
    result = parse(text)
    assert [row.fields[1] for row in result.rows] == ["one", "three", "four"]
    assert result.error_count == 1
    assert result.issues.items[0].line_no == 3
    assert result.issues.items[0].message == "unterminated quote"


def test_unterminated_row_never_swallows_a_quoted_row() -> None:
    text = "\n".join([
        HEADER,
        "A,one,p1,both",
        'A,two,"broken,both',
        'A,three,"p3, with comma",page',
        "A,four,p4,selection",
    ])
    result = parse(text)
    assert [row.fields[1] for row in result.rows] == ["one", "three", "four"]
    assert result.rows[1].fields[2] == "p3, with comma"
    assert result.error_count == 1
    assert result.issues.messages() == ["line 3: unterminated quote"]


def test_unterminated_first_field_keeps_following_row() -> None:
    result = parse(f'{HEADER}\nA,"x,both\nA,y,"p, q",both')
    assert _fields(result) == [["A", "y", "p, q", "both"]]
    assert result.issues.messages() == ["line 2: unterminated quote"]


def test_multiline_field_stops_at_a_complete_row() -> None:
    # The continuation "a, b, c" is a row of its own, so the quote stays open.
    result = parse(f'{HEADER}\nA,t,"first\na, b, c\nB,u,q,page')
    assert result.issues.items[0].line_no == 2
    assert [row.fields[0] for row in result.rows] == ["a", "B"]


def test_insufficient_fields_row_is_dropped() -> None:
    result = parse(f"{HEADER}\nプリセット,サマリ\nカスタム,翻訳,プロンプト,selection")
    assert [row.fields[1] for row in result.rows] == ["翻訳"]
    assert result.issues.messages() == ["line 2: insufficient fields"]


def test_overlong_row_is_dropped() -> None:
    long_row = "A,t," + "x" * 50_000
    result = parse(f"{HEADER}\n{long_row}\nB,u,q,page")
    assert [row.fields[0] for row in result.rows] == ["B"]
    assert result.issues.items[0].message == "line too long"


def test_issue_list_is_capped_but_counted() -> None:
    bad = "\n".join("only,two" for _ in range(25))
    result = parse(f"{HEADER}\n{bad}\nA,t,p,both")
    assert result.error_count == 25
    assert len(result.issues.items) == 10
    assert len(result.rows) == 1


def test_extra_columns_are_kept_raw() -> None:
    result = parse(f"{HEADER}\nA,t,p,both,extra")
    assert _fields(result) == [["A", "t", "p", "both", "extra"]]
