from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from core.constants import (
    CSV_DELIMITER,
    CSV_HEADER,
    CSV_QUOTE,
    MAX_ROW_CHARS,
    MAX_TEXT_CHARS,
    SCAN_SLACK,
)
from core.errors import (
    EmptyFileError,
    FileSizeError,
    HeaderError,
    ParseTimeoutError,
    RowError,
    RowTooLongError,
    UnterminatedQuoteError,
    FieldCountError,
)
from core.log import Log
from core.records import IssueLog, ParsedRow
from core.validate import check_header

__all__ = [
    "RowParser",
    "ParseResult",
    "normalize_newlines",
    "parse_line",
    "parse",
    "escape_field",
    "serialize_row",
    "serialize",
]

_UNQUOTED, _QUOTED, _QUOTE_SEEN = range(3)

class RowParser:
    """
    Character-level state machine for one CSV record.

    Feed it text with feed(), possibly in several chunks when a quoted
    field spans physical lines, then call close() to get the fields.
    _QUOTE_SEEN is the one-character lookahead after a '"' inside quotes:
    a second '"' is a literal quote, anything else ends the quoted state.
    """

    def __init__(self, slack: int = SCAN_SLACK):
        self._fields: List[str] = []
        self._buf: List[str] = []
        self._state = _UNQUOTED
        self._at_field_start = True
        self._steps = 0
        self._budget = slack

    @property
    def in_quotes(self) -> bool:
        return self._state == _QUOTED

    def feed(self, chunk: str) -> None:
        self._budget += len(chunk)
        for ch in chunk:
            self._steps += 1
            if self._steps > self._budget:
                raise ParseTimeoutError()
            self._step(ch)

    def close(self) -> List[str]:
        if self._state == _QUOTED:
            raise UnterminatedQuoteError()
        self._fields.append("".join(self._buf))
        fields, self._fields, self._buf = self._fields, [], []
        self._state = _UNQUOTED
        self._at_field_start = True
        return fields

    def _step(self, ch: str) -> None:
        if self._state == _QUOTE_SEEN:
            if ch == CSV_QUOTE:
                self._buf.append(CSV_QUOTE)
                self._state = _QUOTED
                return
            self._state = _UNQUOTED

        if self._state == _QUOTED:
            if ch == CSV_QUOTE:
                self._state = _QUOTE_SEEN
            else:
                self._buf.append(ch)
            return

        if ch == CSV_DELIMITER:
            self._fields.append("".join(self._buf))
            self._buf = []
            self._at_field_start = True
            return

        if ch == CSV_QUOTE and self._at_field_start:
            self._state = _QUOTED
        else:
            self._buf.append(ch)
        self._at_field_start = False

@dataclass
class ParseResult:
    header: Tuple[str, ...] = ()
    rows: List[ParsedRow] = field(default_factory=list)
    issues: IssueLog = field(default_factory=IssueLog)

    @property
    def error_count(self) -> int:
        return self.issues.count

def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")

def parse_line(line: str) -> List[str]:
    """Parse a single logical record (which may contain quoted newlines)."""
    if len(line) > MAX_ROW_CHARS:
        raise RowTooLongError()
    parser = RowParser()
    parser.feed(line)
    return parser.close()

def _stands_alone(line: str) -> bool:
    """True if line parses as a complete row of its own (3+ fields, quotes closed)."""
    try:
        return len(parse_line(line)) >= 3
    except RowError:
        return False

def _read_record(lines: Sequence[str], start: int) -> Tuple[List[str], int]:
    """
    Parse the record beginning at lines[start]. Physical lines are joined
    with '\\n' while a quoted field is still open, but a line that is a
    row on its own is never taken as a continuation: the open record then
    fails with UnterminatedQuoteError.
    Returns (fields, index of the next unread line).
    """
    size = len(lines[start])
    if size > MAX_ROW_CHARS:
        raise RowTooLongError()

    parser = RowParser()
    parser.feed(lines[start])
    nxt = start + 1
    while parser.in_quotes:
        if nxt >= len(lines) or _stands_alone(lines[nxt]):
            raise UnterminatedQuoteError()
        size += 1 + len(lines[nxt])
        if size > MAX_ROW_CHARS:
            raise RowTooLongError()
        parser.feed("\n")
        parser.feed(lines[nxt])
        nxt += 1
    return parser.close(), nxt

def _iter_records(lines: Sequence[str]) -> Iterator[Tuple[int, Union[List[str], RowError]]]:
    """
    Yield (line_no, fields) or (line_no, RowError) per record.
    Blank lines between records are dropped. A failed record resumes at the
    physical line after the one it started on.
    """
    idx = 0
    while idx < len(lines):
        if not lines[idx].strip():
            idx += 1
            continue
        start = idx
        try:
            fields, idx = _read_record(lines, start)
        except RowError as e:
            yield start + 1, e
            idx = start + 1
            continue
        yield start + 1, fields

def parse(text: str) -> ParseResult:
    """
    Parse CSV text into raw field rows.

    Raises EmptyFileError, FileSizeError or HeaderError for the whole text.
    Per-row problems are collected in result.issues and never raise.
    """
    if not isinstance(text, str) or not text.strip():
        raise EmptyFileError("CSV text is empty")
    if len(text) > MAX_TEXT_CHARS:
        raise FileSizeError(f"CSV text is too large ({len(text)} > {MAX_TEXT_CHARS} chars)")

    lines = normalize_newlines(text.lstrip("\ufeff")).split("\n")
    records = _iter_records(lines)

    first = next(records, None)
    expected = CSV_DELIMITER.join(CSV_HEADER)
    if first is None:
        raise EmptyFileError("CSV text is empty")
    line_no, header = first
    if isinstance(header, RowError) or not check_header(header):
        raise HeaderError(f"CSV header is incorrect. Expected: {expected}")

    result = ParseResult(header=tuple(h.strip() for h in header))
    for line_no, fields in records:
        if not isinstance(fields, RowError) and len(fields) < 3:
            fields = FieldCountError()
        if isinstance(fields, RowError):
            result.issues.add(line_no, str(fields))
            Log.debug(f"CSV line {line_no}: {fields}", 1)
            continue
        result.rows.append(ParsedRow(line_no, tuple(fields)))

    if result.error_count:
        Log.debug(f"CSV parse: {len(result.rows)} rows, {result.error_count} rejected", 0)
    return result

# ---------- Serialize ----------

_NEEDS_QUOTES = (CSV_DELIMITER, CSV_QUOTE, "\n", "\r")

def escape_field(value: str) -> str:
    if not isinstance(value, str):
        value = str(value)
    if any(ch in value for ch in _NEEDS_QUOTES):
        return CSV_QUOTE + value.replace(CSV_QUOTE, CSV_QUOTE * 2) + CSV_QUOTE
    return value

def serialize_row(fields: Iterable[str]) -> str:
    return CSV_DELIMITER.join(escape_field(f) for f in fields)

def serialize(rows: Iterable[Sequence[str]]) -> str:
    """Header first, then one line per row, joined by '\\n'."""
    lines = [CSV_DELIMITER.join(CSV_HEADER)]
    lines.extend(serialize_row(row) for row in rows)
    return "\n".join(lines)
