"""Tests for integrating imported records into the menu tree."""

from __future__ import annotations

import pytest

from core.csv_codec import parse, serialize
from core.errors import IdAllocationError, TargetFolderError
from core.extract import extract, records_to_rows
from core.merge import ImportOptions, integrate, split_folder_path
from core.records import FlatRecord
from core.tree import Folder, Menu, check_tree, collect_ids, tree_to_list
from core.validate import validate_rows


def _rec(title, prompt="p", folder="", context="both"):
    return FlatRecord(folder, title, prompt, context)


def test_appends_into_existing_folder(basic_tree, id_gen) -> None:
    report = integrate(basic_tree, [_rec("新規メニュー")], ImportOptions(target_folder_name="テストフォルダ"), id_gen)

    folder = basic_tree[0]
    assert report.added_count == 1
    assert report.target_folder_name == "テストフォルダ"
    assert len(basic_tree) == 1
    assert [m.title for m in folder.items] == ["既存メニュー", "新規メニュー"]
    assert folder.items[1].id == "menu-1"


def test_creates_missing_target_folder_at_the_end(basic_tree, id_gen) -> None:
    report = integrate(basic_tree, [_rec("a"), _rec("b", context="page")], ImportOptions(), id_gen)

    assert report.added_count == 2
    assert report.created_folders == 1
    assert len(basic_tree) == 2
    new_folder = basic_tree[-1]
    assert isinstance(new_folder, Folder)
    assert new_folder.name == "Import"
    assert new_folder.expanded is True
    assert new_folder.id == "folder-1"
    assert [(m.title, m.context) for m in new_folder.items] == [("a", "both"), ("b", "page")]


def test_missing_folder_without_create_leaves_tree_untouched(basic_tree, id_gen) -> None:
    before = tree_to_list(basic_tree)
    with pytest.raises(TargetFolderError):
        integrate(basic_tree, [_rec("x")], ImportOptions(target_folder_name="Nope", create_new_folder=False), id_gen)
    assert tree_to_list(basic_tree) == before


def test_folder_lookup_is_exact_and_top_level_only(id_gen) -> None:
    tree = [
        Folder(id="f1", name="import"),
        Folder(id="f2", name="Outer", items=[Folder(id="f3", name="Import")]),
    ]
    integrate(tree, [_rec("x")], ImportOptions(target_folder_name="Import"), id_gen)

    assert [f.name for f in tree] == ["import", "Outer", "Import"]
    assert tree[0].items == []
    assert tree[1].items[0].items == []
    assert [m.title for m in tree[2].items] == ["x"]


def test_duplicate_title_is_skipped(basic_tree, id_gen) -> None:
    options = ImportOptions(target_folder_name="テストフォルダ")
    report = integrate(basic_tree, [_rec("既存メニュー", prompt="different")], options, id_gen)

    assert report.added_count == 0
    assert report.skipped_count == 1
    assert "既存メニュー" in report.skipped[0]
    assert len(basic_tree[0].items) == 1
    assert basic_tree[0].items[0].prompt == "既存のプロンプト"


def test_overwrite_existing_appends_duplicates(basic_tree, id_gen) -> None:
    options = ImportOptions(target_folder_name="テストフォルダ", overwrite_existing=True)
    report = integrate(basic_tree, [_rec("既存メニュー")], options, id_gen)

    assert report.added_count == 1
    assert [m.title for m in basic_tree[0].items] == ["既存メニュー", "既存メニュー"]


def test_duplicates_inside_one_batch(id_gen) -> None:
    tree = []
    report = integrate(tree, [_rec("same", "one"), _rec("same", "two")], ImportOptions(), id_gen)
    assert report.added_count == 1
    assert report.skipped_count == 1
    assert tree[0].items[0].prompt == "one"


def test_same_title_in_other_folder_is_not_a_duplicate(complex_tree, id_gen) -> None:
    options = ImportOptions(target_folder_name="カスタム")
    report = integrate(complex_tree, [_rec("サマリ")], options, id_gen)
    assert report.added_count == 1


def test_import_twice_adds_nothing_the_second_time(complex_tree, id_gen) -> None:
    records = [_rec("one"), _rec("two"), _rec("three")]
    first = integrate(complex_tree, records, ImportOptions(), id_gen)
    count_after_first = len(complex_tree[-1].items)
    second = integrate(complex_tree, records, ImportOptions(), id_gen)

    assert first.added_count == 3
    assert second.added_count == 0
    assert second.skipped_count == 3
    assert len(complex_tree) == 3
    assert len(complex_tree[-1].items) == count_after_first


def test_existing_nodes_keep_their_order(complex_tree, id_gen) -> None:
    before = [n.id for n in complex_tree[0].items]
    integrate(complex_tree, [_rec("new")], ImportOptions(target_folder_name="プリセット"), id_gen)
    assert [n.id for n in complex_tree[0].items][:-1] == before
    assert complex_tree[0].items[-1].title == "new"


def test_generated_ids_never_collide(basic_tree) -> None:
    drawn = iter(["menu-a", "folder-a", "menu-a", "fresh-1", "fresh-2"])
    before = collect_ids(basic_tree)
    integrate(basic_tree, [_rec("x")], ImportOptions(), lambda kind: next(drawn))

    check_tree(basic_tree)
    new_ids = collect_ids(basic_tree) - before
    assert new_ids == {"fresh-1", "fresh-2"}


def test_empty_records_do_not_create_a_folder(basic_tree, id_gen) -> None:
    report = integrate(basic_tree, [], ImportOptions(), id_gen)
    assert report.added_count == 0
    assert report.target_folder_name is None
    assert len(basic_tree) == 1


def test_split_folder_path() -> None:
    assert split_folder_path("") == []
    assert split_folder_path("A/ B //C") == ["A", "B", "C"]


def test_keep_folder_paths_places_by_path(complex_tree, id_gen) -> None:
    records = [
        _rec("deep", folder="プリセット/分析"),
        _rec("custom", folder="カスタム"),
        _rec("loose"),
    ]
    report = integrate(complex_tree, records, ImportOptions(keep_folder_paths=True), id_gen)

    assert report.added_count == 3
    preset, custom, imported = complex_tree
    assert preset.items[-1].name == "分析"
    assert [m.title for m in preset.items[-1].items] == ["deep"]
    assert [m.title for m in custom.items] == ["custom"]
    assert imported.name == "Import"
    assert [m.title for m in imported.items] == ["loose"]


def test_keep_folder_paths_without_create_checks_every_path_first(complex_tree, id_gen) -> None:
    before = tree_to_list(complex_tree)
    records = [_rec("ok", folder="カスタム"), _rec("bad", folder="Missing/Sub")]
    options = ImportOptions(keep_folder_paths=True, create_new_folder=False)
    with pytest.raises(TargetFolderError, match="Missing/Sub"):
        integrate(complex_tree, records, options, id_gen)
    assert tree_to_list(complex_tree) == before


def test_keep_folder_paths_skips_target_when_unused(complex_tree, id_gen) -> None:
    options = ImportOptions(keep_folder_paths=True, create_new_folder=False)
    report = integrate(complex_tree, [_rec("x", folder="カスタム")], options, id_gen)
    assert report.target_folder_name is None
    assert report.added_count == 1
    assert len(complex_tree) == 2


def test_round_trip_through_text_into_empty_tree(nested_tree, id_gen) -> None:
    exported = extract(nested_tree)
    parsed = parse(serialize(records_to_rows(exported)))
    validated = validate_rows(parsed.rows)

    fresh = []
    integrate(fresh, validated.records, ImportOptions(keep_folder_paths=True), id_gen)

    assert sorted(extract(fresh), key=repr) == sorted(exported, key=repr)
    check_tree(fresh)
    assert not (collect_ids(fresh) & collect_ids(nested_tree))


def test_menus_are_new_nodes(id_gen) -> None:
    tree = []
    integrate(tree, [_rec("t", "p", context="selection")], ImportOptions(), id_gen)
    menu = tree[0].items[0]
    assert isinstance(menu, Menu)
    assert (menu.title, menu.prompt, menu.context) == ("t", "p", "selection")


def test_exhausted_id_generator_leaves_tree_untouched(basic_tree) -> None:
    drawn = iter(["folder-new", "menu-new"] + ["menu-a"] * 200)
    before = tree_to_list(basic_tree)
    with pytest.raises(IdAllocationError):
        integrate(basic_tree, [_rec("one"), _rec("two")], ImportOptions(), lambda kind: next(drawn))
    assert tree_to_list(basic_tree) == before


def test_keep_folder_paths_reuses_created_folders(id_gen) -> None:
    tree = []
    records = [_rec("a", folder="X/Y"), _rec("b", folder="X/Y"), _rec("c", folder="X")]
    report = integrate(tree, records, ImportOptions(keep_folder_paths=True), id_gen)
    assert report.created_folders == 2
    check_tree(tree)
    assert [n.title if isinstance(n, Menu) else n.name for n in tree[0].items] == ["Y", "c"]
