from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from core.constants import EXPORT_FILENAME_PREFIX, MAX_FILE_BYTES
from core.csv_codec import parse, serialize
from core.errors import EmptyFileError, FileReadError, FileSizeError
from core.extract import extract, records_to_rows
from core.log import Log
from core.merge import ImportOptions, MergeReport, integrate
from core.records import FlatRecord
from core.tree import IdGenerator, Tree, new_id
from core.validate import require_records, validate_rows
from utils.fs_atomic import atomic_write_text

Pathish = Union[str, Path]

__all__ = [
    "ExportResult",
    "ImportResult",
    "export_filename",
    "export_csv",
    "write_export",
    "read_csv_file",
    "import_csv_text",
    "import_into_tree",
]

@dataclass
class ExportResult:
    text: str
    count: int
    filename: str

@dataclass
class ImportResult:
    """Records that survived parsing and validation, plus what was dropped."""
    records: List[FlatRecord]
    errors: List[str] = field(default_factory=list)
    error_count: int = 0
    warnings: List[str] = field(default_factory=list)
    warning_count: int = 0

    @property
    def count(self) -> int:
        return len(self.records)

def export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{EXPORT_FILENAME_PREFIX}-{now.strftime('%Y-%m-%d')}-{now.strftime('%H%M%S')}.csv"

# ---------- Export ----------

def export_csv(tree: Tree, now: Optional[datetime] = None) -> ExportResult:
    records = extract(tree)
    text = serialize(records_to_rows(records))
    Log.debug(f"Exported {len(records)} menu(s) to CSV", 0)
    return ExportResult(text=text, count=len(records), filename=export_filename(now))

def write_export(tree: Tree, path: Pathish) -> ExportResult:
    result = export_csv(tree)
    p = Path(path)
    atomic_write_text(p, result.text)
    result.filename = p.name
    return result

# ---------- Import ----------

def read_csv_file(path: Pathish) -> str:
    """
    Read a user-selected CSV file completely and decode it as UTF-8.
    Meant to run on the IOWorker thread; raises InterchangeError subclasses.
    """
    p = Path(path)
    if p.suffix.lower() != ".csv":
        raise FileReadError(f"Not a CSV file: {p.name}")
    try:
        size = p.stat().st_size
        if size == 0:
            raise EmptyFileError(f"File is empty: {p.name}")
        if size > MAX_FILE_BYTES:
            raise FileSizeError(f"File is too large ({size} bytes, limit {MAX_FILE_BYTES})")
        data = p.read_bytes()
    except OSError as e:
        raise FileReadError(f"Could not read {p.name}: {e}") from e

    try:
        # utf-8-sig drops a leading BOM written by spreadsheet tools.
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FileReadError(f"{p.name} is not valid UTF-8: {e}") from e

def import_csv_text(text: str) -> ImportResult:
    """Parse and validate CSV text. Raises when nothing is importable."""
    parsed = parse(text)
    validated = validate_rows(parsed.rows)
    records = require_records(validated, parsed.issues)

    issues = sorted(parsed.issues.items + validated.issues.items, key=lambda i: i.line_no)
    result = ImportResult(
        records=records,
        errors=[str(issue) for issue in issues[:parsed.issues.cap]],
        error_count=parsed.error_count + validated.skipped,
        warnings=list(validated.warnings),
        warning_count=validated.warning_count,
    )
    if result.error_count:
        Log.warn(f"CSV import dropped {result.error_count} row(s): {', '.join(result.errors)}")
    return result

def import_into_tree(tree: Tree, text: str, options: Optional[ImportOptions] = None,
                     id_gen: IdGenerator = new_id) -> Tuple[ImportResult, MergeReport]:
    """Full import path: parse, validate, then integrate into tree."""
    result = import_csv_text(text)
    return result, integrate(tree, result.records, options, id_gen=id_gen)
