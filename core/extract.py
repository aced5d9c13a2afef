from __future__ import annotations

from typing import Iterable, List

from core.constants import DEFAULT_CONTEXT, FOLDER_SEPARATOR
from core.log import Log
from core.records import FlatRecord
from core.tree import Folder, Menu, Node, Separator

__all__ = ["folder_path", "extract", "records_to_rows"]

def folder_path(parent: str, name: str) -> str:
    return f"{parent}{FOLDER_SEPARATOR}{name}" if parent else name

def _extract_items(items: Iterable[Node], path: str, out: List[FlatRecord]) -> None:
    for node in items:
        if isinstance(node, Menu):
            out.append(FlatRecord(
                folder=path,
                title=node.title or "",
                prompt=node.prompt or "",
                context=node.context or DEFAULT_CONTEXT,
            ))
        elif isinstance(node, Folder):
            if FOLDER_SEPARATOR in node.name:
                Log.warn(f'Folder name "{node.name}" contains "{FOLDER_SEPARATOR}"; it exports as nested folders')
            _extract_items(node.items, folder_path(path, node.name), out)
        elif isinstance(node, Separator):
            continue
        else:
            raise TypeError(f"Not a tree node: {node!r}")

def extract(tree: Iterable[Node]) -> List[FlatRecord]:
    """
    Flatten the tree into one record per Menu, depth-first in declaration
    order. Folders become path segments; separators are dropped.
    """
    records: List[FlatRecord] = []
    _extract_items(tree, "", records)
    return records

def records_to_rows(records: Iterable[FlatRecord]) -> List[List[str]]:
    return [record.as_row() for record in records]
