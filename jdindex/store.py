"""
The persisted index: a `.JdIndex` YAML file at the index root.

    version: 1
    entries:
    - level: area
      number: 10-19
      label: Admin
      path: 10-19 Admin
    - level: category
      number: '11'
      ...

Records are written in tree order (each area, then each of its categories
followed by their IDs), numerically sorted at every level, so saving the
same system twice gives byte-identical files. Parents are recovered from
paths on load, so record order does not matter to the reader.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional

import yaml

from jdindex.exceptions import (
    CorruptIndexError, IndexMissingError, IndexValidationError, IoFailureError,
)
from jdindex.models import JDEntry, JDSystem
from jdindex.util import Level, parse_number
from jdindex.validator import validate

logger = logging.getLogger(__name__)

INDEX_FILENAME = ".JdIndex"
FORMAT_VERSION = 1

_LEVEL_ORDER = [Level.AREA, Level.CATEGORY, Level.ID]


def index_path(root: Path) -> Path:
    return Path(root) / INDEX_FILENAME


def find_index_root(start: Path) -> Path:
    """Walk up from `start` to the nearest directory holding an index file."""
    start = Path(start).expanduser().resolve()
    for directory in [start, *start.parents]:
        if index_path(directory).is_file():
            return directory
    raise IndexMissingError(start)


def dump(system: JDSystem) -> str:
    records = [entry.to_dict() for entry in system.walk()]
    records.extend(entry.to_dict() for entry in system.unplaced)
    document = {"version": FORMAT_VERSION, "entries": records}
    return yaml.safe_dump(
        document, sort_keys=False, allow_unicode=True, default_flow_style=False
    )


def _record_to_entry(path: Path, record) -> JDEntry:
    if not isinstance(record, dict):
        raise CorruptIndexError(path, f"expected a mapping, got {record!r}")
    try:
        level = Level(record["level"])
        raw_number = record["number"]
        label = record.get("label") or ""
        entry_path = record["path"]
    except KeyError as e:
        raise CorruptIndexError(path, f"record is missing {e}") from e
    except (TypeError, ValueError) as e:
        raise CorruptIndexError(path, f"unknown level {record.get('level')!r}") from e

    # Hand-edited files may leave category numbers unquoted.
    if isinstance(raw_number, int) and not isinstance(raw_number, bool) and level is Level.CATEGORY:
        raw_number = f"{raw_number:02d}"
    if not isinstance(raw_number, str) or not isinstance(label, str) or not isinstance(entry_path, str):
        raise CorruptIndexError(path, f"malformed record {record!r}")

    number = parse_number(raw_number, level)
    if number is None:
        raise CorruptIndexError(path, f"{raw_number!r} is not a valid {level.display_name} number")
    return JDEntry(number, label.strip(), entry_path)


def parse(text: str, root: Path, path: Optional[Path] = None) -> JDSystem:
    """Rebuild a JDSystem from index file text."""
    path = path or index_path(root)
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CorruptIndexError(path, e) from e

    if not isinstance(document, dict) or not isinstance(document.get("entries", []), list):
        raise CorruptIndexError(path, "expected a mapping with an 'entries' list")
    version = document.get("version")
    if not isinstance(version, int):
        raise CorruptIndexError(path, "missing format version")
    if version > FORMAT_VERSION:
        logger.warning(
            "%s was written by a newer format (version %d); reading it as version %d",
            path, version, FORMAT_VERSION,
        )

    entries = [_record_to_entry(path, record) for record in document.get("entries") or []]

    system = JDSystem(Path(root).expanduser().resolve())
    # Parents before children, so placement only depends on paths.
    for level in _LEVEL_ORDER:
        for entry in entries:
            if entry.level is level:
                system.place(entry)
    return system


def load(root: Path, strict: bool = False) -> JDSystem:
    """
    Load the index at `root`.
    With strict=True, any validation finding raises IndexValidationError.
    """
    path = index_path(root)
    if not path.is_file():
        raise IndexMissingError(root)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IoFailureError(path, e) from e

    system = parse(text, root, path)
    logger.debug("Loaded %s (%d areas)", path, len(system.areas))

    if strict:
        diagnostics = validate(system)
        if diagnostics:
            raise IndexValidationError(diagnostics)
    return system


def _file_mode(path: Path) -> int:
    """The mode to give a rewritten index: the old file's, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save(root: Path, system: JDSystem) -> Path:
    """
    Write the index atomically: a temp file in the same directory is
    renamed over the target, so readers see the old or the new file whole.
    """
    path = index_path(root)
    content = dump(system)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f"{INDEX_FILENAME}.",
            suffix=".tmp", delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, _file_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise IoFailureError(path, e) from e
    logger.info("Index written to %s", path)
    return path
