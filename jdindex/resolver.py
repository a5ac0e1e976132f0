"""
Number lookups and allocation over a loaded JDSystem.

Resolution is exact: a query names an area ("10-19"), a category ("11") or
an ID ("11.01"), and must match exactly one entry. Nothing is guessed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from jdindex.exceptions import (
    AreaFullError, CategoryFullError, NoSuchAreaError, NoSuchCategoryError, NotFoundError,
)
from jdindex.models import JDArea, JDCategory, JDEntry, JDSystem
from jdindex.util import (
    AreaNumber, CategoryNumber, IDNumber, JDNumber, Level, parse_number, parse_query,
)

FIRST_ID = 1
LAST_ID = 99


class ResolveKind(str, Enum):
    EXACT = "exact"
    CHILDREN = "children"
    EMPTY = "empty"


@dataclass(frozen=True)
class ResolveResult:
    kind: ResolveKind
    entry: JDEntry
    children: tuple[JDEntry, ...] = ()

    @property
    def paths(self) -> list[str]:
        if self.kind is ResolveKind.EXACT:
            return [self.entry.path]
        return [child.path for child in self.children]


def _as_number(query: Union[str, JDNumber]) -> JDNumber:
    if not isinstance(query, str):
        return query
    number = parse_query(query)
    if number is None:
        raise NotFoundError(query, "not a Johnny Decimal number")
    return number


def _single(query, matches):
    if not matches:
        raise NotFoundError(query)
    if len(matches) > 1:
        raise NotFoundError(query, f"ambiguous, {len(matches)} entries carry this number")
    return matches[0]


def resolve(system: JDSystem, query: Union[str, JDNumber]) -> ResolveResult:
    number = _as_number(query)

    if number.level is Level.ID:
        return ResolveResult(ResolveKind.EXACT, _single(query, system.find_by_id(number)))

    if number.level is Level.CATEGORY:
        category = _single(query, system.find_by_category(number))
        entry, children = category.entry, tuple(category)
    else:
        area = _single(query, system.find_area(number))
        entry, children = area.entry, tuple(category.entry for category in area)

    kind = ResolveKind.CHILDREN if children else ResolveKind.EMPTY
    return ResolveResult(kind, entry, children)


def _category_number(category: Union[str, int, CategoryNumber]) -> CategoryNumber:
    if isinstance(category, CategoryNumber):
        return category
    if isinstance(category, int):
        return CategoryNumber(category)
    number = parse_number(category, Level.CATEGORY)
    if number is None:
        raise NoSuchCategoryError(category)
    return number


def allocatable_category(system: JDSystem, category: Union[str, int, CategoryNumber]) -> JDCategory:
    """The category new IDs go into. Categories filed outside their area's span do not qualify."""
    number = _category_number(category)
    candidates = [
        candidate
        for area in system
        for candidate in area
        if candidate.number == number and area.number.contains(number.number)
    ]
    if not candidates:
        raise NoSuchCategoryError(number)
    return _single(str(number), candidates)


def next_free_id(system: JDSystem, category: Union[str, int, CategoryNumber]) -> IDNumber:
    """
    The smallest unoccupied ID in 01-99. Gaps left by deleted IDs are reused.
    Slots held by IDs with a mismatched prefix still count as occupied.
    """
    target = allocatable_category(system, category)
    used = {jd_id.number.sequence for jd_id in target.ids.values()}
    for sequence in range(FIRST_ID, LAST_ID + 1):
        if sequence not in used:
            return IDNumber(target.number.number, sequence)
    raise CategoryFullError(target.number)


def find_area_for(system: JDSystem, area: Union[str, int, AreaNumber]) -> JDArea:
    """The aligned area an area query ('10-19') or a number inside it (11) names."""
    if isinstance(area, str):
        number = parse_number(area, Level.AREA) or parse_number(area, Level.CATEGORY)
        if number is None:
            raise NoSuchAreaError(area)
        area = number
    if isinstance(area, CategoryNumber):
        area = area.number
    if isinstance(area, AreaNumber):
        matches = [candidate for candidate in system.find_area(area) if area.is_aligned]
    else:
        matches = [
            candidate for candidate in system
            if candidate.number.is_aligned and candidate.number.contains(area)
        ]
    if not matches:
        raise NoSuchAreaError(area)
    return matches[0]


def next_free_category(system: JDSystem, area: Union[str, int, AreaNumber]) -> CategoryNumber:
    """
    The smallest unused category in an area, skipping x0 (the area's meta
    category).
    """
    target = find_area_for(system, area)
    start, end = target.number.start, target.number.end
    for number in range(start + 1, end + 1):
        if CategoryNumber(number) not in target.categories:
            return CategoryNumber(number)
    raise AreaFullError(target.number)
