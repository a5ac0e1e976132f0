"""
Johnny Decimal number grammar.

Folder names carry a numeric prefix followed by an optional label:

    10-19 Admin        area (hyphen or en-dash)
    11 Finance         category
    11.01 Taxes        ID (directory or file)
    11.00              ID home slot, label optional

The prefix may be separated from the label by whitespace, ".", "-", "–" or
"_". Anything that does not match is not a JD name, and parsing returns None.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class Level(str, Enum):
    AREA = "area"
    CATEGORY = "category"
    ID = "id"

    @property
    def display_name(self) -> str:
        return "ID" if self is Level.ID else self.value.capitalize()


def _check_two_digits(*values: int) -> None:
    for value in values:
        if not 0 <= value <= 99:
            raise ValueError(f"{value} is not a two-digit Johnny Decimal number")


@dataclass(frozen=True, order=True)
class AreaNumber:
    """An area range, e.g. 10-19."""

    start: int
    end: int

    level = Level.AREA

    def __post_init__(self):
        _check_two_digits(self.start, self.end)

    @property
    def is_aligned(self) -> bool:
        """True for tens-aligned ranges spanning ten categories (x0-x9)."""
        return self.start % 10 == 0 and self.end == self.start + 9

    def contains(self, number: int) -> bool:
        return self.start <= number <= self.end

    def __str__(self):
        return f"{self.start:02d}-{self.end:02d}"


@dataclass(frozen=True, order=True)
class CategoryNumber:
    """A category, e.g. 11."""

    number: int

    level = Level.CATEGORY

    def __post_init__(self):
        _check_two_digits(self.number)

    @property
    def area(self) -> AreaNumber:
        """The aligned area this category belongs to (11 -> 10-19)."""
        start = self.number // 10 * 10
        return AreaNumber(start, start + 9)

    def __str__(self):
        return f"{self.number:02d}"


@dataclass(frozen=True, order=True)
class IDNumber:
    """An ID, e.g. 11.01. Sequence 00 is the category's home slot."""

    category: int
    sequence: int

    level = Level.ID

    def __post_init__(self):
        _check_two_digits(self.category, self.sequence)

    def __str__(self):
        return f"{self.category:02d}.{self.sequence:02d}"


JDNumber = Union[AreaNumber, CategoryNumber, IDNumber]

SEPARATORS = " .-–_"

_SEP = r"(?:\s*[-–._]\s*|\s+)"
_LABEL = rf"(?:{_SEP}(?P<label>.*))?"

# A prefix must not run on into more digits, otherwise "11.01 Taxes" would
# read as category 11 and "110 Stuff" as category 11.
_AREA = r"(\d{2})[-–](\d{2})(?!\d)"
_CATEGORY = r"(\d{2})(?!\d|[-–.]\d)"
_ID = r"(\d{2})\.(\d{2})(?!\d|\.\d)"

FOLDER_PATTERNS = {
    Level.AREA: re.compile(rf"^{_AREA}{_LABEL}$"),
    Level.CATEGORY: re.compile(rf"^{_CATEGORY}{_LABEL}$"),
    Level.ID: re.compile(rf"^{_ID}{_LABEL}$"),
}

NUMBER_PATTERNS = {
    Level.AREA: re.compile(r"^(\d{2})[-–](\d{2})$"),
    Level.CATEGORY: re.compile(r"^(\d{2})$"),
    Level.ID: re.compile(r"^(\d{2})\.(\d{2})$"),
}

# (constructor, number of digit groups)
_CONSTRUCTORS = {
    Level.AREA: (AreaNumber, 2),
    Level.CATEGORY: (CategoryNumber, 1),
    Level.ID: (IDNumber, 2),
}


def _build(level: Level, match: re.Match) -> JDNumber:
    constructor, arity = _CONSTRUCTORS[level]
    return constructor(*(int(group) for group in match.groups()[:arity]))


def parse_folder_name(name: str, level: Level) -> Optional[tuple[JDNumber, str]]:
    """
    Parse a folder (or file) name at the given level.
    Returns (number, label), or None when the name is not a JD name.
    """
    match = FOLDER_PATTERNS[level].match(name)
    if not match:
        return None
    label = (match.group("label") or "").strip()
    return _build(level, match), label


def format_folder_name(number: JDNumber, label: str = "") -> str:
    """Format a folder name: (11.01, 'Taxes') -> '11.01 Taxes'."""
    if label:
        return f"{number} {label}"
    return str(number)


def parse_number(text: str, level: Level) -> Optional[JDNumber]:
    """Parse a bare number at a known level ('10-19', '11', '11.01')."""
    match = NUMBER_PATTERNS[level].match(text.strip())
    if not match:
        return None
    return _build(level, match)


def parse_query(text: str) -> Optional[JDNumber]:
    """
    Parse a user query into a number of whichever level it names.
    '11.01' -> IDNumber, '11' -> CategoryNumber, '10-19' -> AreaNumber.
    """
    for level in (Level.ID, Level.AREA, Level.CATEGORY):
        number = parse_number(text, level)
        if number is not None:
            return number
    return None


def is_valid_label(label: str) -> bool:
    """True for labels that survive a format/parse round trip unchanged."""
    return label == label.strip() and not (label and label[0] in SEPARATORS)


def is_symlink_valid(path: Path) -> bool:
    """Check if a symlink target exists (returns True for non-symlinks)."""
    if path.is_symlink():
        try:
            path.resolve(strict=True)
            return True
        except (OSError, RuntimeError):
            return False
    return True
