from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from core.constants import DEFAULT_CONTEXT, MAX_REPORTED_ISSUES

__all__ = ["FlatRecord", "ParsedRow", "RowIssue", "IssueLog"]

@dataclass(slots=True, frozen=True)
class FlatRecord:
    """
    One CSV data row, i.e. one Menu leaf.

    • folder  – slash-joined ancestor folder names ("" = root)
    • title   – menu title
    • prompt  – prompt template, uninterpreted
    • context – "page" | "selection" | "both" once validated
    """
    folder: str
    title: str
    prompt: str
    context: str = DEFAULT_CONTEXT

    def as_row(self) -> List[str]:
        return [self.folder, self.title, self.prompt, self.context]

@dataclass(slots=True, frozen=True)
class ParsedRow:
    line_no: int
    fields: Tuple[str, ...]

@dataclass(slots=True, frozen=True)
class RowIssue:
    line_no: int
    message: str

    def __str__(self) -> str:
        return f"line {self.line_no}: {self.message}"

@dataclass
class IssueLog:
    """Counts every issue but keeps only the first `cap` for display."""
    cap: int = MAX_REPORTED_ISSUES
    items: List[RowIssue] = field(default_factory=list)
    count: int = 0

    def add(self, line_no: int, message: str) -> None:
        self.count += 1
        if len(self.items) < self.cap:
            self.items.append(RowIssue(line_no, message))

    def messages(self) -> List[str]:
        return [str(issue) for issue in self.items]

    def __len__(self) -> int:
        return self.count
