from __future__ import annotations

import itertools

import pytest

from core.tree import Folder, Menu, Separator


@pytest.fixture
def id_gen():
    """Deterministic ids: '<kind>-1', '<kind>-2', ... (shared counter)."""
    counter = itertools.count(1)
    return lambda kind: f"{kind}-{next(counter)}"


@pytest.fixture
def basic_tree():
    return [
        Folder(
            id="folder-a",
            name="テストフォルダ",
            expanded=True,
            items=[Menu(id="menu-a", title="既存メニュー", prompt="既存のプロンプト", context="both")],
        )
    ]


@pytest.fixture
def complex_tree():
    return [
        Folder(
            id="preset-folder",
            name="プリセット",
            items=[
                Menu(id="preset-summary", title="サマリ", prompt="以下のページをサマリしてください", context="both"),
                Separator(id="separator-x"),
                Menu(id="preset-translate", title="翻訳", prompt="以下のテキストを翻訳してください", context="selection"),
            ],
        ),
        Folder(id="custom-folder", name="カスタム", items=[]),
    ]


@pytest.fixture
def nested_tree():
    return [
        Folder(
            id="f-dev",
            name="Dev",
            items=[
                Folder(
                    id="f-review",
                    name="Review",
                    items=[
                        Menu(id="m-code", title="Code review", prompt='Review this, please: "{$TEXT}"', context="selection"),
                    ],
                ),
                Menu(id="m-explain", title="Explain", prompt="Explain {$TEXT}", context="page"),
                Separator(id="s-1"),
            ],
        ),
        Folder(
            id="f-write",
            name="Writing",
            description="prose helpers",
            items=[
                Menu(id="m-sum", title="Summarize", prompt="Summarize the page", context="both"),
                Folder(id="f-empty", name="Empty", items=[]),
            ],
        ),
    ]
