"""
Numbering checks over an already-built index.

The scanner catches most of these while walking the disk; validation
re-checks them on a model loaded from a (possibly hand-edited) index file,
and reports the records the loader could not place.
"""

from typing import Optional

from jdindex.models import Diagnostic, DiagnosticKind, JDEntry, JDSystem
from jdindex.util import AreaNumber, CategoryNumber, Level


def out_of_range(entry: JDEntry, parent_number=None) -> Optional[Diagnostic]:
    """Check an entry's number against its parent's span."""
    number = entry.number
    message = None

    if entry.level is Level.AREA:
        if not number.is_aligned:
            message = f"Area {number} is not a tens-aligned range (x0-x9)."
    elif entry.level is Level.CATEGORY:
        if isinstance(parent_number, AreaNumber) and not parent_number.contains(number.number):
            message = f"Category {number} lies outside area {parent_number}."
    elif isinstance(parent_number, CategoryNumber) and number.category != parent_number.number:
        message = f"ID {number} is filed under category {parent_number}."

    if message is None:
        return None
    return Diagnostic(DiagnosticKind.OUT_OF_RANGE, (entry.path,), message)


def duplicate(kept: JDEntry, other: JDEntry) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.DUPLICATE_NUMBER,
        (kept.path, other.path),
        f"{other.level.display_name} {other.number} at {other.path} duplicates {kept.path}.",
    )


def validate(system: JDSystem) -> list[Diagnostic]:
    """Report numbering problems without touching the model."""
    diagnostics = []

    def report(diagnostic):
        if diagnostic is not None:
            diagnostics.append(diagnostic)

    for area in system:
        report(out_of_range(area.entry))
        for category in area:
            report(out_of_range(category.entry, area.number))
            for jd_id in category:
                report(out_of_range(jd_id, category.number))

    for entry in system.unplaced:
        parent = system.parent_of(entry)
        holder = parent.children.get(entry.number) if parent is not None else None
        if holder is not None:
            report(duplicate(holder, entry))
        else:
            diagnostics.append(Diagnostic(
                DiagnosticKind.ORPHAN_ENTRY,
                (entry.path,),
                f"{entry.level.display_name} {entry.number} has no parent in the index.",
            ))

    return diagnostics
