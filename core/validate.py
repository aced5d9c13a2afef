from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from core.constants import (
    CSV_HEADER,
    DEFAULT_CONTEXT,
    MAX_AGGREGATE_REASONS,
    MAX_FOLDER_CHARS,
    MAX_PROMPT_CHARS,
    MAX_REPORTED_ISSUES,
    MAX_TITLE_CHARS,
    VALID_CONTEXTS,
)
from core.errors import EmptyImportError
from core.log import Log
from core.records import FlatRecord, IssueLog, ParsedRow, RowIssue

__all__ = [
    "Verdict",
    "ValidationResult",
    "check_header",
    "sanitize_text",
    "validate_fields",
    "validate_rows",
    "require_records",
]

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")

OK, SKIP, ERROR = "ok", "skip", "error"

@dataclass(slots=True, frozen=True)
class Verdict:
    """Outcome for one row: a record, or a skip/error reason."""
    kind: str
    record: Optional[FlatRecord] = None
    reason: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.kind == OK

@dataclass
class ValidationResult:
    records: List[FlatRecord] = field(default_factory=list)
    issues: IssueLog = field(default_factory=IssueLog)
    warnings: List[str] = field(default_factory=list)
    warning_count: int = 0

    @property
    def skipped(self) -> int:
        return self.issues.count

def check_header(fields: Sequence[str]) -> bool:
    """Only the first three columns are mandatory; context may be absent."""
    actual = [f.strip() for f in fields]
    return len(actual) >= 3 and tuple(actual[:3]) == CSV_HEADER[:3]

def sanitize_text(text: str) -> str:
    """Remove ASCII control characters (0x00-0x1F, 0x7F)."""
    return _CONTROL_RE.sub("", text)

def validate_fields(folder: Optional[str], title: Optional[str], prompt: Optional[str],
                    context: Optional[str] = None) -> Verdict:
    """
    Normalize one row's raw fields. Never raises.

    Order: trim, required fields, length ceilings, context coercion,
    control-character stripping.
    """
    folder = (folder or "").strip()
    title = (title or "").strip()
    prompt = (prompt or "").strip()
    context = (context or "").strip() or DEFAULT_CONTEXT

    if not title:
        return Verdict(SKIP, reason="title missing")
    if not prompt:
        return Verdict(SKIP, reason="prompt missing")

    if len(folder) > MAX_FOLDER_CHARS:
        return Verdict(ERROR, reason=f"folder path too long ({len(folder)} > {MAX_FOLDER_CHARS} chars)")
    if len(title) > MAX_TITLE_CHARS:
        return Verdict(ERROR, reason=f"title too long ({len(title)} > {MAX_TITLE_CHARS} chars)")
    if len(prompt) > MAX_PROMPT_CHARS:
        return Verdict(ERROR, reason=f"prompt too long ({len(prompt)} > {MAX_PROMPT_CHARS} chars)")

    warnings: Tuple[str, ...] = ()
    if context not in VALID_CONTEXTS:
        warnings = (f'invalid context "{context}" converted to "{DEFAULT_CONTEXT}"',)
        context = DEFAULT_CONTEXT

    title = sanitize_text(title)
    prompt = sanitize_text(prompt)
    if not title:
        return Verdict(SKIP, reason="title missing")
    if not prompt:
        return Verdict(SKIP, reason="prompt missing")

    return Verdict(OK, record=FlatRecord(folder, title, prompt, context), warnings=warnings)

def validate_rows(rows: Iterable[ParsedRow]) -> ValidationResult:
    """Run validate_fields over parsed rows, keeping input order."""
    result = ValidationResult()
    for row in rows:
        fields = list(row.fields) + [None] * (4 - len(row.fields))
        verdict = validate_fields(*fields[:4])

        for warning in verdict.warnings:
            result.warning_count += 1
            if len(result.warnings) < MAX_REPORTED_ISSUES:
                result.warnings.append(f"line {row.line_no}: {warning}")
            Log.warn(f"CSV line {row.line_no}: {warning}")

        if verdict.ok:
            result.records.append(verdict.record)
        else:
            result.issues.add(row.line_no, verdict.reason)
            Log.debug(f"CSV line {row.line_no} dropped: {verdict.reason}", 1)

    return result

def require_records(result: ValidationResult, parse_issues: Optional[IssueLog] = None) -> List[FlatRecord]:
    """
    Return the surviving records, or raise EmptyImportError naming the
    first few row-level reasons (parse and validation issues, by line).
    """
    if result.records:
        return result.records

    issues: List[RowIssue] = list(result.issues.items)
    if parse_issues is not None:
        issues.extend(parse_issues.items)
    issues.sort(key=lambda issue: issue.line_no)
    reasons = [str(issue) for issue in issues[:MAX_AGGREGATE_REASONS]]

    message = "No importable menus found"
    if reasons:
        message += ": " + "; ".join(reasons)
    raise EmptyImportError(message, reasons)
