from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_tree
from jdindex.exceptions import IoFailureError
from jdindex.models import DiagnosticKind
from jdindex.resolver import next_free_id, resolve
from jdindex.scanner import scan
from jdindex.util import AreaNumber, CategoryNumber, IDNumber


def test_fresh_tree_with_one_empty_category(tmp_path: Path) -> None:
    make_tree(tmp_path, ["10-19 Admin/11 Finance"])

    system, diagnostics = scan(tmp_path)

    assert system.counts() == (1, 1, 0)
    assert diagnostics == []
    category = system.find_by_category(11)[0]
    assert category.entry.label == "Finance"
    assert category.entry.path == "10-19 Admin/11 Finance"


def test_scan_records_directories_and_id_files(jd_tree: Path) -> None:
    system, diagnostics = scan(jd_tree)

    assert diagnostics == []
    assert system.root == jd_tree.resolve()
    assert system.counts() == (2, 3, 4)
    seed_list = system.find_by_id(IDNumber(21, 2))[0]
    assert seed_list.label == "Seed list.md"
    assert seed_list.path == "20-29 Home/21 Garden/21.02 Seed list.md"


def test_duplicate_siblings_keep_the_first_by_name(tmp_path: Path) -> None:
    make_tree(tmp_path, [
        "10-19 Admin/11 Money/11.01 Cash",
        "10-19 Admin/11 Finance/11.01 Taxes",
    ])

    system, diagnostics = scan(tmp_path)

    duplicates = [d for d in diagnostics if d.kind is DiagnosticKind.DUPLICATE_NUMBER]
    assert len(duplicates) == 1
    assert duplicates[0].paths == ("10-19 Admin/11 Finance", "10-19 Admin/11 Money")
    kept = system.find_by_category(CategoryNumber(11))
    assert [c.entry.label for c in kept] == ["Finance"]
    assert [i.label for i in kept[0]] == ["Taxes"]


def test_out_of_range_entries_are_reported_and_kept(tmp_path: Path) -> None:
    make_tree(tmp_path, [
        "10-19 Admin/25 Stray",
        "10-19 Admin/11 Finance/12.03 Misfiled",
        "30-35 Odd",
    ])

    system, diagnostics = scan(tmp_path)

    assert {d.kind for d in diagnostics} == {DiagnosticKind.OUT_OF_RANGE}
    assert sorted(p for d in diagnostics for p in d.paths) == [
        "10-19 Admin/11 Finance/12.03 Misfiled",
        "10-19 Admin/25 Stray",
        "30-35 Odd",
    ]
    assert system.find_by_category(25)
    assert system.find_by_id(IDNumber(12, 3))


def test_unparseable_directories_are_reported_and_skipped(tmp_path: Path) -> None:
    make_tree(tmp_path, [
        "Misc",
        "10-19 Admin/Scratch",
        "10-19 Admin/11 Finance/old stuff",
        "10-19 Admin/11 Finance/notes.txt",
        "readme.txt",
    ])

    system, diagnostics = scan(tmp_path)

    assert [d.kind for d in diagnostics] == [DiagnosticKind.UNPARSEABLE] * 3
    assert [d.paths for d in diagnostics] == [
        ("10-19 Admin/11 Finance/old stuff",),
        ("10-19 Admin/Scratch",),
        ("Misc",),
    ]
    assert system.counts() == (1, 1, 0)


def test_hidden_and_ignored_names_are_skipped(tmp_path: Path) -> None:
    make_tree(tmp_path, [
        ".git/objects",
        "10-19 Admin/.Trash",
        "10-19 Admin/__pycache__",
        "10-19 Admin/11 Finance",
    ])

    _, diagnostics = scan(tmp_path, ignore=["__pycache__"])

    assert diagnostics == []


def test_contents_of_an_id_are_not_indexed(tmp_path: Path) -> None:
    make_tree(tmp_path, ["10-19 Admin/11 Finance/11.01 Taxes/2020/11.02 Not an id"])

    system, diagnostics = scan(tmp_path)

    assert diagnostics == []
    assert [str(i.number) for i in system.all_ids()] == ["11.01"]


def test_scan_does_not_touch_the_tree(jd_tree: Path) -> None:
    before = sorted(p.relative_to(jd_tree) for p in jd_tree.rglob("*"))
    scan(jd_tree)
    assert sorted(p.relative_to(jd_tree) for p in jd_tree.rglob("*")) == before


def test_missing_root_is_an_io_failure(tmp_path: Path) -> None:
    with pytest.raises(IoFailureError):
        scan(tmp_path / "nowhere")


def test_misfiled_id_sharing_a_sequence_is_kept(tmp_path: Path) -> None:
    make_tree(tmp_path, [
        "10-19 Admin/11 Finance/11.01 Taxes",
        "10-19 Admin/11 Finance/12.01 Misfiled",
    ])

    system, diagnostics = scan(tmp_path)

    assert [d.kind for d in diagnostics] == [DiagnosticKind.OUT_OF_RANGE]
    assert diagnostics[0].paths == ("10-19 Admin/11 Finance/12.01 Misfiled",)
    assert [str(i) for i in system.find_by_category(11)[0]] == ["11.01 Taxes", "12.01 Misfiled"]
    result = resolve(system, "12.01")
    assert result.entry.path == "10-19 Admin/11 Finance/12.01 Misfiled"


def test_areas_with_the_same_start_are_both_kept(tmp_path: Path) -> None:
    make_tree(tmp_path, [
        "10-14 Odd/12 Other",
        "10-19 Admin/11 Finance/11.01 Taxes",
    ])

    system, diagnostics = scan(tmp_path)

    assert [area.number for area in system] == [AreaNumber(10, 14), AreaNumber(10, 19)]
    assert [d.kind for d in diagnostics] == [DiagnosticKind.OUT_OF_RANGE]
    assert diagnostics[0].paths == ("10-14 Odd",)
    assert next_free_id(system, "11") == IDNumber(11, 2)
