# core/history.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''

from __future__ import annotations

import json
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

# GitPython imports
from git import Actor, GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import GitError as GitPythonError

from core.errors import HistoryError
from core.log import Log
from core.tree import Menu, Tree, tree_from_list, walk

Pathish = Union[str, Path]

__all__ = [
    "SnapshotInfo",
    "HistoryError",
    "is_git_available",
    "init_history",
    "snapshot",
    "get_history",
    "read_snapshot",
]

AUTHOR = Actor("MenuPad User", "menupad@localhost")

@dataclass
class SnapshotInfo:
    """One committed version of the menus file."""
    hash: str
    date: str  # Format: "2025-09-08 20:45"
    message: str
    menu_count: int

def _split(menus_path: Pathish):
    p = Path(menus_path).expanduser().resolve()
    return p.parent, p.name

def _get_repo(repo_dir: Path) -> Repo:
    # Never climb into an enclosing repository; history lives beside the file.
    try:
        return Repo(repo_dir)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise HistoryError(f"No menu history in {repo_dir}")
    except GitPythonError as e:
        raise HistoryError(f"Failed to access history: {e}")

def is_git_available() -> bool:
    """Check if Git is installed and GitPython can drive it."""
    try:
        with tempfile.TemporaryDirectory() as temp_dir:
            Repo.init(temp_dir)
        return True
    except (GitPythonError, OSError):
        return False

def init_history(menus_path: Pathish) -> Repo:
    """Open the history repository next to the menus file, creating it if needed."""
    repo_dir, _name = _split(menus_path)
    if (repo_dir / ".git").exists():
        return _get_repo(repo_dir)
    try:
        repo_dir.mkdir(parents=True, exist_ok=True)
        repo = Repo.init(repo_dir, initial_branch="master")
    except (GitPythonError, OSError) as e:
        raise HistoryError(f"Failed to initialize history: {e}")
    Log.debug(f"Initialized menu history in {repo_dir}", 1)
    return repo

def _has_head(repo: Repo) -> bool:
    try:
        repo.head.commit
        return True
    except ValueError:
        return False

def snapshot(menus_path: Pathish, message: str) -> Optional[str]:
    """
    Commit the current menus file.
    Returns the new commit hash, or None when nothing changed.
    """
    _dir, name = _split(menus_path)
    repo = init_history(menus_path)
    if not (Path(repo.working_tree_dir) / name).exists():
        return None

    try:
        repo.index.add([name])
        if _has_head(repo) and not repo.index.diff("HEAD"):
            return None
        commit = repo.index.commit(message, author=AUTHOR, committer=AUTHOR)
    except GitCommandError as e:
        raise HistoryError(f"Snapshot failed: {e}")
    except (GitPythonError, OSError) as e:
        raise HistoryError(f"Failed to create snapshot: {e}")

    Log.debug(f"Menu snapshot {commit.hexsha[:8]}: {message}", 1)
    return commit.hexsha

def _count_menus(raw: str) -> int:
    try:
        data = json.loads(raw)
        if isinstance(data, dict):
            data = data.get("menus", [])
        return sum(1 for _path, node in walk(tree_from_list(data)) if isinstance(node, Menu))
    except ValueError:
        return 0

def _blob_text(repo: Repo, rev: str, name: str) -> str:
    try:
        return repo.git.show(f"{rev}:{name}")
    except GitCommandError as e:
        raise HistoryError(f"No menus file in snapshot {rev}: {e}")

def get_history(menus_path: Pathish, limit: int = 100) -> List[SnapshotInfo]:
    """Snapshots of the menus file, newest first."""
    repo_dir, name = _split(menus_path)
    repo = _get_repo(repo_dir)
    if not _has_head(repo):
        return []

    snapshots = []
    try:
        for commit in repo.iter_commits(max_count=limit, paths=name):
            snapshots.append(SnapshotInfo(
                hash=commit.hexsha,
                date=commit.committed_datetime.strftime('%Y-%m-%d %H:%M'),
                message=commit.message.strip(),
                menu_count=_count_menus(_blob_text(repo, commit.hexsha, name)),
            ))
    except GitPythonError as e:
        raise HistoryError(f"Failed to read history: {e}")
    return snapshots

def read_snapshot(menus_path: Pathish, rev: str) -> Tree:
    """The menu tree as it was committed in rev (hash prefix or any git revision)."""
    repo_dir, name = _split(menus_path)
    raw = _blob_text(_get_repo(repo_dir), rev, name)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HistoryError(f"Snapshot {rev} is not valid JSON: {e}")
    if isinstance(data, dict):
        data = data.get("menus", [])
    return tree_from_list(data)
