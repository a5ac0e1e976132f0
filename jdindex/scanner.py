"""
Build a JDSystem by walking an index root on disk.

Exactly three levels are read (area, category, ID); whatever lives inside an
ID is opaque. Scanning never modifies the filesystem. Names are visited in
sorted order so the kept entry and the diagnostics are the same on every run.
"""

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, Optional

from jdindex.exceptions import IoFailureError
from jdindex.models import Diagnostic, DiagnosticKind, JDEntry, JDSystem
from jdindex.util import Level, is_symlink_valid, parse_folder_name
from jdindex.validator import duplicate, out_of_range

logger = logging.getLogger(__name__)

_CHILD_LEVEL = {Level.AREA: Level.CATEGORY, Level.CATEGORY: Level.ID}


class TreeScanner:
    def __init__(self, root: Path, ignore: Optional[Iterable[str]] = None):
        self.root = Path(root).expanduser().resolve()
        self.ignore = list(ignore or [])
        self.diagnostics: list[Diagnostic] = []

    def scan(self) -> tuple[JDSystem, list[Diagnostic]]:
        if not self.root.is_dir():
            raise IoFailureError(self.root, "not a directory")
        system = JDSystem(self.root)
        self.diagnostics = []
        self._scan_level(self.root, Level.AREA, system)
        areas, categories, ids = system.counts()
        logger.info(
            "Scanned %s: %d areas, %d categories, %d IDs, %d diagnostics",
            self.root, areas, categories, ids, len(self.diagnostics),
        )
        return system, self.diagnostics

    def _is_ignored(self, path: Path) -> bool:
        if path.name.startswith("."):
            return True
        return any(fnmatch.fnmatch(path.name, pattern) for pattern in self.ignore)

    def _children(self, directory: Path) -> list[Path]:
        try:
            items = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise IoFailureError(directory, e) from e
        return [item for item in items if not self._is_ignored(item)]

    def _scan_level(self, directory: Path, level: Level, parent) -> None:
        for item in self._children(directory):
            if item.is_symlink() and not is_symlink_valid(item):
                logger.debug("Skipping broken symlink %s", item)
                continue
            is_dir = item.is_dir()
            # IDs may be files; areas and categories are always directories.
            if not is_dir and level is not Level.ID:
                continue

            relative = item.relative_to(self.root).as_posix()
            parsed = parse_folder_name(item.name, level)
            if parsed is None:
                if is_dir:
                    self.diagnostics.append(Diagnostic(
                        DiagnosticKind.UNPARSEABLE,
                        (relative,),
                        f"'{item.name}' is not a valid {level.display_name} name.",
                    ))
                continue

            number, label = parsed
            entry = JDEntry(number, label, relative)
            kept = parent.children.get(number)
            if kept is not None:
                self.diagnostics.append(duplicate(kept, entry))
                continue

            diagnostic = out_of_range(entry, getattr(parent, "number", None))
            if diagnostic is not None:
                self.diagnostics.append(diagnostic)

            logger.debug("Indexing %s", entry)
            node = parent.attach(entry)
            if level in _CHILD_LEVEL and is_dir:
                self._scan_level(item, _CHILD_LEVEL[level], node)


def scan(root: Path, ignore: Optional[Iterable[str]] = None) -> tuple[JDSystem, list[Diagnostic]]:
    """Scan `root` into a JDSystem plus the diagnostics found on the way."""
    return TreeScanner(root, ignore).scan()
