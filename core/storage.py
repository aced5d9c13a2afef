from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from core.constants import CUSTOM_FOLDER_DESCRIPTION, CUSTOM_FOLDER_ID, CUSTOM_FOLDER_NAME
from core.log import Log
from core.tree import Folder, Tree, check_tree, tree_from_list, tree_to_list
from utils.fs_atomic import atomic_write_text

Pathish = Union[str, Path]

MENUS_VERSION = 1

__all__ = ["MENUS_VERSION", "default_tree", "load_menus", "save_menus", "ensure_menus"]

def default_tree() -> Tree:
    """Fresh tree with one empty user folder."""
    return [
        Folder(
            id=CUSTOM_FOLDER_ID,
            name=CUSTOM_FOLDER_NAME,
            description=CUSTOM_FOLDER_DESCRIPTION,
            expanded=True,
            items=[],
        )
    ]

def _read_json(p: Path, default: Any) -> Any:
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON in {p}: {e}") from e

def load_menus(path: Pathish) -> Tree:
    """
    Load the menu tree from its JSON document.

    Accepts either {"version": N, "menus": [...]} or a bare array.
    A missing file yields the default tree.
    """
    p = Path(path).expanduser()
    data = _read_json(p, None)
    if data is None:
        Log.debug(f"No menus file at {p}, using defaults", 1)
        return default_tree()

    if isinstance(data, dict):
        data = data.get("menus", [])
    tree = tree_from_list(data)
    check_tree(tree)
    return tree

def save_menus(path: Pathish, tree: Tree) -> None:
    check_tree(tree)
    doc: Dict[str, Any] = {"version": MENUS_VERSION, "menus": tree_to_list(tree)}
    atomic_write_text(Path(path).expanduser(), json.dumps(doc, indent=2, ensure_ascii=False))
    Log.debug(f"Saved menus to {path}", 1)

def ensure_menus(path: Pathish) -> Dict[str, Any]:
    """
    Load the menus file, creating it with defaults when absent.

    Returns: {'path': str, 'created': bool, 'tree': Tree}
    """
    p = Path(path).expanduser().resolve()
    created = not p.exists()
    tree = load_menus(p)
    if created:
        save_menus(p, tree)
    return {"path": str(p), "created": created, "tree": tree}
