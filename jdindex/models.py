from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional, Union

from jdindex.util import (
    AreaNumber, CategoryNumber, IDNumber, JDNumber, Level, format_folder_name,
)


def parent_path(path: str) -> str:
    return PurePosixPath(path).parent.as_posix()


@dataclass(frozen=True)
class JDEntry:
    """One indexed node: its number, label and path relative to the index root."""

    number: JDNumber
    label: str
    path: str

    @property
    def level(self) -> Level:
        return self.number.level

    @property
    def name(self) -> str:
        return format_folder_name(self.number, self.label)

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "number": str(self.number),
            "label": self.label,
            "path": self.path,
        }

    def __str__(self):
        return self.name


@dataclass
class JDCategory:
    """Represents a JD category (e.g., '11 Finance') and its IDs."""

    entry: JDEntry
    ids: dict[IDNumber, JDEntry] = field(default_factory=dict)

    @property
    def number(self) -> CategoryNumber:
        return self.entry.number

    @property
    def children(self) -> dict[JDNumber, JDEntry]:
        return self.ids

    def attach(self, entry: JDEntry) -> JDEntry:
        self.ids[entry.number] = entry
        return entry

    def __iter__(self) -> Iterator[JDEntry]:
        for key in sorted(self.ids):
            yield self.ids[key]


@dataclass
class JDArea:
    """Represents a JD area (e.g., '10-19 Admin') and its categories."""

    entry: JDEntry
    categories: dict[CategoryNumber, JDCategory] = field(default_factory=dict)

    @property
    def number(self) -> AreaNumber:
        return self.entry.number

    @property
    def children(self) -> dict[JDNumber, JDEntry]:
        return {key: category.entry for key, category in self.categories.items()}

    def attach(self, entry: JDEntry) -> JDCategory:
        category = JDCategory(entry)
        self.categories[entry.number] = category
        return category

    def __iter__(self) -> Iterator[JDCategory]:
        for key in sorted(self.categories):
            yield self.categories[key]


@dataclass
class JDSystem:
    """
    The root of a Johnny Decimal filing system, as indexed.

    Ownership is strictly top-down: areas own categories, categories own IDs,
    each keyed by number. Parents are found by path or number lookups.
    `unplaced` holds records read from an index file that have no parent in
    the tree or whose number a sibling already holds; the validator reports them.
    """

    root: Path
    areas: dict[AreaNumber, JDArea] = field(default_factory=dict)
    unplaced: list[JDEntry] = field(default_factory=list)

    @property
    def children(self) -> dict[JDNumber, JDEntry]:
        return {key: area.entry for key, area in self.areas.items()}

    def attach(self, entry: JDEntry) -> JDArea:
        area = JDArea(entry)
        self.areas[entry.number] = area
        return area

    def __iter__(self) -> Iterator[JDArea]:
        for key in sorted(self.areas):
            yield self.areas[key]

    def all_categories(self) -> list[JDCategory]:
        return [category for area in self for category in area]

    def all_ids(self) -> list[JDEntry]:
        """Every placed ID, in tree order."""
        return [jd_id for category in self.all_categories() for jd_id in category]

    def find_area(self, number: AreaNumber) -> list[JDArea]:
        return [area for area in self if area.number == number]

    def find_by_category(self, number: Union[CategoryNumber, int]) -> list[JDCategory]:
        """All categories with this number, across every area."""
        if isinstance(number, int):
            number = CategoryNumber(number)
        return [category for category in self.all_categories() if category.number == number]

    def find_by_id(self, number: IDNumber) -> list[JDEntry]:
        return [jd_id for jd_id in self.all_ids() if jd_id.number == number]

    def area_at(self, path: str) -> Optional[JDArea]:
        for area in self.areas.values():
            if area.entry.path == path:
                return area
        return None

    def category_at(self, path: str) -> Optional[JDCategory]:
        for area in self.areas.values():
            for category in area.categories.values():
                if category.entry.path == path:
                    return category
        return None

    def parent_of(self, entry: JDEntry):
        """The container an entry belongs in, judged by its path, or None."""
        path = parent_path(entry.path)
        if entry.level is Level.AREA:
            return self if path == "." else None
        if entry.level is Level.CATEGORY:
            return self.area_at(path)
        return self.category_at(path)

    def place(self, entry: JDEntry) -> bool:
        """
        Attach an entry under the parent its path names.
        Returns False, and keeps the entry in `unplaced`, when there is no
        such parent or a sibling already holds the number.
        """
        parent = self.parent_of(entry)
        if parent is None or entry.number in parent.children:
            self.unplaced.append(entry)
            return False
        parent.attach(entry)
        return True

    def walk(self) -> Iterator[JDEntry]:
        """Pre-order: each area, then each of its categories followed by their IDs."""
        for area in self:
            yield area.entry
            yield from self.walk_area(area)

    def walk_area(self, area: JDArea) -> Iterator[JDEntry]:
        for category in area:
            yield category.entry
            yield from category

    def absolute_path(self, entry: JDEntry) -> Path:
        return self.root.joinpath(*PurePosixPath(entry.path).parts)

    def counts(self) -> tuple[int, int, int]:
        """(areas, categories, ids)."""
        return len(self.areas), len(self.all_categories()), len(self.all_ids())


class DiagnosticKind(str, Enum):
    DUPLICATE_NUMBER = "DuplicateNumber"
    OUT_OF_RANGE = "OutOfRange"
    UNPARSEABLE = "Unparseable"
    ORPHAN_ENTRY = "OrphanEntry"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal finding from scanning or validation."""

    kind: DiagnosticKind
    paths: tuple[str, ...]
    message: str

    def __str__(self):
        return f"{self.kind.value}: {self.message}"
