from __future__ import annotations

__all__ = [
    "InterchangeError",
    "FileReadError",
    "EmptyFileError",
    "FileSizeError",
    "HeaderError",
    "EmptyImportError",
    "TargetFolderError",
    "IdAllocationError",
    "RowError",
    "UnterminatedQuoteError",
    "ParseTimeoutError",
    "RowTooLongError",
    "FieldCountError",
    "HistoryError",
]

# ---------- Fatal to the whole import/export call ----------

class InterchangeError(ValueError):
    """Aborts an import or export; the tree is left untouched."""

class FileReadError(InterchangeError):
    pass

class EmptyFileError(InterchangeError):
    pass

class FileSizeError(InterchangeError):
    pass

class HeaderError(InterchangeError):
    pass

class EmptyImportError(InterchangeError):
    """No record survived parsing and validation."""

    def __init__(self, message: str, reasons: list[str] | None = None):
        super().__init__(message)
        self.reasons = list(reasons or [])

class TargetFolderError(InterchangeError):
    pass

class IdAllocationError(InterchangeError):
    """The id generator kept returning ids already in the tree."""

# ---------- Local to one CSV row; caught inside the parser ----------

class RowError(ValueError):
    pass

class UnterminatedQuoteError(RowError):
    def __init__(self, message: str = "unterminated quote"):
        super().__init__(message)

class ParseTimeoutError(RowError):
    def __init__(self, message: str = "parse timeout"):
        super().__init__(message)

class RowTooLongError(RowError):
    def __init__(self, message: str = "line too long"):
        super().__init__(message)

class FieldCountError(RowError):
    def __init__(self, message: str = "insufficient fields"):
        super().__init__(message)

# ---------- Menu history (git snapshots) ----------

class HistoryError(Exception):
    """Menu history operation failed"""
    pass
