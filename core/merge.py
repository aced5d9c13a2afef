from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from core.constants import (
    DEFAULT_IMPORT_FOLDER,
    FOLDER_SEPARATOR,
    IMPORT_FOLDER_DESCRIPTION,
    MAX_REPORTED_ISSUES,
)
from core.errors import TargetFolderError
from core.log import Log
from core.records import FlatRecord
from core.tree import (
    Folder,
    IdGenerator,
    Menu,
    Node,
    Tree,
    collect_ids,
    find_top_folder,
    new_id,
    unique_id,
)

__all__ = ["ImportOptions", "MergeReport", "split_folder_path", "integrate"]

@dataclass(frozen=True)
class ImportOptions:
    target_folder_name: str = DEFAULT_IMPORT_FOLDER
    create_new_folder: bool = True
    overwrite_existing: bool = False
    # Place records by their own folder path instead of all into the target.
    keep_folder_paths: bool = False

@dataclass
class MergeReport:
    added_count: int = 0
    target_folder_name: Optional[str] = None
    skipped_count: int = 0
    skipped: List[str] = field(default_factory=list)
    created_folders: int = 0

    def skip(self, reason: str) -> None:
        self.skipped_count += 1
        if len(self.skipped) < MAX_REPORTED_ISSUES:
            self.skipped.append(reason)

def split_folder_path(path: str) -> List[str]:
    return [seg.strip() for seg in path.split(FOLDER_SEPARATOR) if seg.strip()]

def _child_folder(items: List[Node], name: str) -> Optional[Folder]:
    return next((n for n in items if isinstance(n, Folder) and n.name == name), None)

def _path_exists(tree: Tree, segments: List[str]) -> bool:
    items = tree
    for name in segments:
        folder = _child_folder(items, name)
        if folder is None:
            return False
        items = folder.items
    return True

def _has_menu_titled(items: List[Node], title: str) -> bool:
    return any(isinstance(n, Menu) and n.title == title for n in items)

def _folders_to_create(tree: Tree, records: List[FlatRecord], options: ImportOptions,
                       needs_target: bool) -> int:
    """Upper bound on the folders integrate() may create for these records."""
    count = 0
    if needs_target and find_top_folder(tree, options.target_folder_name) is None:
        count += 1
    if options.keep_folder_paths:
        seen: Set[Tuple[str, ...]] = set()
        for record in records:
            segments = split_folder_path(record.folder)
            for depth in range(1, len(segments) + 1):
                prefix = tuple(segments[:depth])
                if prefix not in seen:
                    seen.add(prefix)
                    if not _path_exists(tree, list(prefix)):
                        count += 1
    return count

class _Placer:
    """Resolves (and creates) destination folders during one integrate() call."""

    def __init__(self, tree: Tree, options: ImportOptions, folder_ids: List[str],
                 report: MergeReport):
        self.tree = tree
        self.options = options
        self.folder_ids = folder_ids
        self.report = report
        self._target: Optional[Folder] = find_top_folder(tree, options.target_folder_name)

    def _new_folder(self, name: str, description: str = "") -> Folder:
        self.report.created_folders += 1
        return Folder(
            id=self.folder_ids.pop(0),
            name=name,
            description=description,
            expanded=True,
            items=[],
        )

    def target(self) -> Folder:
        if self._target is None:
            self._target = self._new_folder(self.options.target_folder_name, IMPORT_FOLDER_DESCRIPTION)
            self.tree.append(self._target)
            Log.debug(f'Created import folder "{self._target.name}"', 1)
        return self._target

    def destination(self, record: FlatRecord) -> Folder:
        segments = split_folder_path(record.folder) if self.options.keep_folder_paths else []
        if not segments:
            return self.target()

        items = self.tree
        folder = None
        for name in segments:
            folder = _child_folder(items, name)
            if folder is None:
                folder = self._new_folder(name)
                items.append(folder)
            items = folder.items
        return folder

def integrate(tree: Tree, records: Iterable[FlatRecord], options: Optional[ImportOptions] = None,
              id_gen: IdGenerator = new_id) -> MergeReport:
    """
    Append validated records to the tree as new Menu nodes.

    Existing nodes are never removed or reordered. A menu whose title already
    exists directly in its destination folder is skipped unless
    options.overwrite_existing is set. Raises TargetFolderError, before any
    mutation, when a needed folder is missing and creation is disabled, and
    IdAllocationError, also before any mutation, when id_gen cannot produce
    fresh ids.
    """
    options = options or ImportOptions()
    records = list(records)
    report = MergeReport()
    if not records:
        return report

    keep = options.keep_folder_paths
    needs_target = not keep or any(not split_folder_path(r.folder) for r in records)

    if not options.create_new_folder:
        if needs_target and find_top_folder(tree, options.target_folder_name) is None:
            raise TargetFolderError(f'Target folder "{options.target_folder_name}" not found')
        if keep:
            for record in records:
                segments = split_folder_path(record.folder)
                if segments and not _path_exists(tree, segments):
                    raise TargetFolderError(f'Folder "{record.folder}" not found')

    # Every id is drawn up front so an exhausted generator leaves the tree as it was.
    taken = collect_ids(tree)
    folder_ids = [unique_id(id_gen, "folder", taken)
                  for _ in range(_folders_to_create(tree, records, options, needs_target))]
    menu_ids = [unique_id(id_gen, "menu", taken) for _ in records]

    placer = _Placer(tree, options, folder_ids, report)
    if needs_target:
        report.target_folder_name = placer.target().name

    for index, (record, menu_id) in enumerate(zip(records, menu_ids), 1):
        dest = placer.destination(record)
        menu = Menu(
            id=menu_id,
            title=record.title,
            prompt=record.prompt,
            context=record.context,
        )

        if not options.overwrite_existing and _has_menu_titled(dest.items, menu.title):
            report.skip(f'menu {index} "{menu.title}": duplicate in "{dest.name}"')
            continue

        dest.items.append(menu)
        report.added_count += 1

    if report.skipped_count:
        Log.warn(f"Import skipped {report.skipped_count} menu(s): {'; '.join(report.skipped)}")
    where = f' into "{report.target_folder_name}"' if report.target_folder_name else ""
    Log.debug(f"Imported {report.added_count} menu(s){where}", 0)
    return report
