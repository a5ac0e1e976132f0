from __future__ import annotations

from pathlib import Path

import pytest

from jdindex.models import JDEntry, JDSystem
from jdindex.util import Level, parse_folder_name


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's own config and environment out of every test."""
    monkeypatch.delenv("JD_CONFIG", raising=False)
    monkeypatch.delenv("JD_ROOT", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))


def make_tree(root: Path, paths: list[str]) -> Path:
    """Create directories (or files, when the path ends in a suffix like .pdf) under root."""
    for relative in paths:
        target = root / relative
        if target.suffix in {".pdf", ".md", ".txt"}:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("x", encoding="utf-8")
        else:
            target.mkdir(parents=True, exist_ok=True)
    return root


def build_system(root: Path, tree: dict) -> JDSystem:
    """
    Build a JDSystem straight from a nested mapping of folder names:
    {"10-19 Admin": {"11 Finance": ["11.01 Taxes"]}}.
    """
    system = JDSystem(root)
    for area_name, categories in tree.items():
        number, label = parse_folder_name(area_name, Level.AREA)
        area = system.attach(JDEntry(number, label, area_name))
        for category_name, ids in categories.items():
            number, label = parse_folder_name(category_name, Level.CATEGORY)
            category = area.attach(JDEntry(number, label, f"{area_name}/{category_name}"))
            for id_name in ids:
                number, label = parse_folder_name(id_name, Level.ID)
                category.attach(JDEntry(number, label, f"{area_name}/{category_name}/{id_name}"))
    return system


@pytest.fixture
def jd_tree(tmp_path: Path) -> Path:
    root = tmp_path / "Documents"
    return make_tree(root, [
        "10-19 Admin/11 Finance/11.01 Taxes",
        "10-19 Admin/11 Finance/11.03 Insurance",
        "10-19 Admin/12 Health",
        "20-29 Home/21 Garden/21.01 Plans",
        "20-29 Home/21 Garden/21.02 Seed list.md",
    ])
