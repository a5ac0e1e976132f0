"""
Operations on an indexed Johnny Decimal root, as used by the CLI.

Each call loads (or rebuilds) the index for one root, works on that single
JDSystem, and persists it when it changed. Nothing is cached between calls.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

from jdindex import store
from jdindex.config import DEFAULTS, configured_root
from jdindex.exceptions import IoFailureError
from jdindex.models import Diagnostic, JDEntry, JDSystem
from jdindex.resolver import (
    allocatable_category, find_area_for, next_free_category, next_free_id, resolve,
)
from jdindex.scanner import scan
from jdindex.util import (
    CategoryNumber, IDNumber, JDNumber, format_folder_name, is_valid_label,
)
from jdindex.validator import validate


@dataclass
class IndexSummary:
    root: Path
    index_path: Path
    areas: int
    categories: int
    ids: int
    diagnostics: list[Diagnostic] = field(default_factory=list)


def find_root(start: Optional[Path] = None, config: Optional[dict] = None) -> Path:
    """
    Find the index root: an explicit start path, else the configured root,
    else the nearest directory above the working directory holding an index.
    """
    if start is None and config is not None:
        start = configured_root(config)
    return store.find_index_root(start or Path.cwd())


def get_system(start: Optional[Path] = None, strict: bool = False,
               config: Optional[dict] = None) -> JDSystem:
    """Load a JD system from a path. Walks up to find the root if needed."""
    return store.load(find_root(start, config), strict=strict)


def index(root: Path, ignore: Optional[Iterable[str]] = None) -> IndexSummary:
    """Rebuild the index for `root` from disk and persist it."""
    if ignore is None:
        ignore = DEFAULTS["ignore"]
    system, diagnostics = scan(root, ignore)
    # The scanner and the validator both see range problems; report each once.
    diagnostics = list(dict.fromkeys(diagnostics + validate(system)))
    path = store.save(system.root, system)
    areas, categories, ids = system.counts()
    return IndexSummary(system.root, path, areas, categories, ids, diagnostics)


def show(root: Path, query: Union[str, JDNumber, None] = None,
         strict: bool = False) -> list[JDEntry]:
    """The whole tree, or the entry a query names followed by everything under it."""
    system = store.load(root, strict=strict)
    entries = list(system.walk())
    if query is None:
        return entries
    prefix = resolve(system, query).entry.path
    return [entry for entry in entries if entry.path == prefix or entry.path.startswith(prefix + "/")]


def list_ids(root: Path, strict: bool = False) -> list[JDEntry]:
    """Every ID in numeric order."""
    system = store.load(root, strict=strict)
    return sorted(system.all_ids(), key=lambda entry: entry.number)


def resolve_for_cd(root: Path, query: Union[str, JDNumber], strict: bool = False) -> Path:
    """Absolute path of the area, category or ID a query names."""
    system = store.load(root, strict=strict)
    return system.absolute_path(resolve(system, query).entry)


def add(root: Path, category: Union[str, int, CategoryNumber], strict: bool = False) -> IDNumber:
    """The number a new ID in `category` would get. Nothing is created."""
    system = store.load(root, strict=strict)
    return next_free_id(system, category)


def _check_label(label: str) -> str:
    label = label.strip()
    if not label or "/" in label or "\\" in label or not is_valid_label(label):
        raise ValueError(f"Invalid label: {label!r}")
    return label


def _create(system: JDSystem, parent, number: JDNumber, label: str) -> JDEntry:
    name = format_folder_name(number, label)
    entry = JDEntry(number, label, f"{parent.entry.path}/{name}")
    path = system.absolute_path(entry)
    try:
        path.mkdir()
    except OSError as e:
        raise IoFailureError(path, e) from e
    parent.attach(entry)
    store.save(system.root, system)
    return entry


def create(root: Path, category: Union[str, int, CategoryNumber], label: str,
           strict: bool = False) -> JDEntry:
    """
    Allocate the next ID in `category`, create its folder and record it in
    the index without a full rescan.
    """
    label = _check_label(label)
    system = store.load(root, strict=strict)
    target = allocatable_category(system, category)
    number = next_free_id(system, target.number)
    return _create(system, target, number, label)


def create_category(root: Path, area, label: str, strict: bool = False) -> JDEntry:
    """Allocate the next category in `area` (x1 upwards), create it and record it."""
    label = _check_label(label)
    system = store.load(root, strict=strict)
    target = find_area_for(system, area)
    number = next_free_category(system, target.number)
    return _create(system, target, number, label)
