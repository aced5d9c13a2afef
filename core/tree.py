from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Tuple, Union

from core.constants import DEFAULT_CONTEXT, VALID_CONTEXTS
from core.errors import IdAllocationError

__all__ = [
    "Folder",
    "Menu",
    "Separator",
    "Node",
    "Tree",
    "IdGenerator",
    "new_id",
    "unique_id",
    "node_from_dict",
    "node_to_dict",
    "tree_from_list",
    "tree_to_list",
    "walk",
    "collect_ids",
    "find_top_folder",
    "check_tree",
]

# ---------- Node variants ----------

@dataclass(slots=True)
class Menu:
    id: str
    title: str
    prompt: str
    context: str = DEFAULT_CONTEXT

@dataclass(slots=True)
class Separator:
    id: str

@dataclass(slots=True)
class Folder:
    id: str
    name: str
    description: str = ""
    expanded: bool = True
    items: List["Node"] = field(default_factory=list)

Node = Union[Folder, Menu, Separator]
Tree = List[Node]

# ---------- Ids ----------

IdGenerator = Callable[[str], str]

def new_id(kind: str) -> str:
    """Default generator: '<kind>-<12 hex chars>'."""
    return f"{kind}-{uuid.uuid4().hex[:12]}"

def unique_id(id_gen: IdGenerator, kind: str, taken: Set[str], attempts: int = 100) -> str:
    """Draw ids from id_gen until one is not in taken; records the result in taken."""
    for _ in range(attempts):
        candidate = id_gen(kind)
        if candidate not in taken:
            taken.add(candidate)
            return candidate
    raise IdAllocationError(f"Id generator kept returning taken ids for kind={kind!r}")

# ---------- JSON form ----------

def node_from_dict(data: Dict[str, Any]) -> Node:
    """Build a node from its persisted {'type': ...} dict."""
    if not isinstance(data, dict):
        raise ValueError(f"Node must be an object, got {type(data).__name__}")

    kind = data.get("type")
    node_id = data.get("id")
    if not isinstance(node_id, str) or not node_id:
        raise ValueError(f"Node of type {kind!r} has no id")

    if kind == "folder":
        return Folder(
            id=node_id,
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            expanded=bool(data.get("expanded", True)),
            items=[node_from_dict(child) for child in data.get("items", [])],
        )
    if kind == "menu":
        context = data.get("context") or DEFAULT_CONTEXT
        if context not in VALID_CONTEXTS:
            context = DEFAULT_CONTEXT
        return Menu(
            id=node_id,
            title=str(data.get("title", "")),
            prompt=str(data.get("prompt", "")),
            context=context,
        )
    if kind == "separator":
        return Separator(id=node_id)

    raise ValueError(f"Unknown node type {kind!r} for id={node_id}")

def node_to_dict(node: Node) -> Dict[str, Any]:
    if isinstance(node, Folder):
        return {
            "id": node.id,
            "type": "folder",
            "name": node.name,
            "description": node.description,
            "expanded": node.expanded,
            "items": [node_to_dict(child) for child in node.items],
        }
    elif isinstance(node, Menu):
        return {
            "id": node.id,
            "type": "menu",
            "title": node.title,
            "prompt": node.prompt,
            "context": node.context,
        }
    elif isinstance(node, Separator):
        return {"id": node.id, "type": "separator"}
    raise TypeError(f"Not a tree node: {node!r}")

def tree_from_list(data: List[Dict[str, Any]]) -> Tree:
    if not isinstance(data, list):
        raise ValueError("Menu tree must be a JSON array")
    return [node_from_dict(item) for item in data]

def tree_to_list(tree: Tree) -> List[Dict[str, Any]]:
    return [node_to_dict(node) for node in tree]

# ---------- Traversal ----------

def walk(tree: Tree, path: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], Node]]:
    """
    Depth-first, pre-order walk yielding (ancestor folder names, node).
    Folders are yielded before their children.
    """
    for node in tree:
        yield path, node
        if isinstance(node, Folder):
            yield from walk(node.items, path + (node.name,))

def collect_ids(tree: Tree) -> Set[str]:
    return {node.id for _path, node in walk(tree)}

def find_top_folder(tree: Tree, name: str) -> Optional[Folder]:
    """First top-level folder whose name matches exactly (case-sensitive)."""
    return next((n for n in tree if isinstance(n, Folder) and n.name == name), None)

def check_tree(tree: Tree) -> None:
    """
    Raise ValueError if an id repeats or a folder contains itself.
    The walk keeps its own stack so a cyclic tree cannot recurse forever.
    """
    seen_ids: Set[str] = set()
    open_folders: Set[int] = set()

    def _visit(items: List[Node]) -> None:
        for node in items:
            if isinstance(node, Folder):
                if id(node) in open_folders:
                    raise ValueError(f"Folder {node.id} contains itself")
            elif not isinstance(node, (Menu, Separator)):
                raise TypeError(f"Not a tree node: {node!r}")

            if node.id in seen_ids:
                raise ValueError(f"Duplicate node id {node.id}")
            seen_ids.add(node.id)

            if isinstance(node, Folder):
                open_folders.add(id(node))
                _visit(node.items)
                open_folders.discard(id(node))

    _visit(tree)
