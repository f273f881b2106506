"""Loading and auditing of the ordered pattern tables.

Each axis (layout, name, product, manufacturer, os) is an ordered list of
rows; the first row whose pattern matches wins. The data lives in
``data/patterns.yaml`` so new devices and browsers are added without code
changes. Rows are validated with pydantic when the file is loaded, and the
loaded tables are cached per path.
"""
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ValidationError

from platform_detect.errors import PatternTableError
from platform_detect.matching.text import qualify

logger = logging.getLogger(__name__)

AXES = ('layout', 'name', 'product', 'manufacturer', 'os')

_ALTERNATION = re.compile(r'^\(\?:(.*)\)$')


class PatternRow(BaseModel):
    id: str
    axis: Literal['layout', 'name', 'product', 'manufacturer', 'os']
    label: str
    pattern: Optional[str] = None


class VendorRow(BaseModel):
    name: str
    products: List[str] = []


@dataclass(frozen=True)
class PatternEntry:
    id: str
    axis: str
    label: str
    pattern: str
    ordinal: int
    explicit: bool = False

    @property
    def sample(self) -> str:
        """A literal string this entry's pattern matches."""
        if not self.explicit:
            return self.label
        text = self.pattern
        m = _ALTERNATION.match(text)
        if m:
            text = m.group(1).split('|')[0]
        return text.replace('\\', '')


@dataclass(frozen=True)
class PatternTable:
    axis: str
    entries: Tuple[PatternEntry, ...] = ()

    def __iter__(self) -> Iterator[PatternEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, entry_id: str) -> Optional[PatternEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None


@dataclass(frozen=True)
class PatternTables:
    version: int
    layout: PatternTable
    name: PatternTable
    product: PatternTable
    manufacturer: PatternTable
    os: PatternTable
    vendors: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()
    windows_versions: Dict[str, str] = field(default_factory=dict)

    def axis(self, axis: str) -> PatternTable:
        if axis not in AXES:
            raise KeyError(axis)
        return getattr(self, axis)


def build_entry(row: PatternRow, ordinal: int) -> PatternEntry:
    if row.pattern:
        return PatternEntry(row.id, row.axis, row.label, row.pattern, ordinal, explicit=True)
    return PatternEntry(row.id, row.axis, row.label, qualify(row.label), ordinal)


def build_tables(document: dict, source: str = '<memory>') -> PatternTables:
    """Validate a parsed pattern document and turn it into ``PatternTables``.

    Raises ``PatternTableError`` on any structural problem: unknown axis,
    duplicate ids, rows missing fields or patterns that do not compile.
    """
    if not isinstance(document, dict) or not isinstance(document.get('entries'), list):
        raise PatternTableError(f'{source}: expected a mapping with an "entries" list')

    per_axis: Dict[str, List[PatternEntry]] = {axis: [] for axis in AXES}
    seen = set()
    for index, raw in enumerate(document['entries']):
        try:
            row = PatternRow.model_validate(raw)
        except ValidationError as exc:
            raise PatternTableError(f'{source}: row {index} is invalid: {exc}') from exc
        if row.id in seen:
            raise PatternTableError(f'{source}: duplicate id {row.id!r}')
        seen.add(row.id)
        entry = build_entry(row, len(per_axis[row.axis]))
        try:
            re.compile(entry.pattern)
        except re.error as exc:
            raise PatternTableError(f'{source}: row {row.id!r} has a bad pattern: {exc}') from exc
        per_axis[row.axis].append(entry)

    vendors = []
    for index, raw in enumerate(document.get('vendors') or []):
        try:
            vendor = VendorRow.model_validate(raw)
        except ValidationError as exc:
            raise PatternTableError(f'{source}: vendor {index} is invalid: {exc}') from exc
        vendors.append((vendor.name, tuple(vendor.products)))

    windows = document.get('windows_versions') or {}
    if not isinstance(windows, dict):
        raise PatternTableError(f'{source}: "windows_versions" must be a mapping')

    try:
        version = int(document.get('version', 0))
    except (TypeError, ValueError) as exc:
        raise PatternTableError(f'{source}: "version" must be an integer') from exc

    return PatternTables(
        version=version,
        vendors=tuple(vendors),
        windows_versions={str(k): str(v) for k, v in windows.items()},
        **{axis: PatternTable(axis, tuple(per_axis[axis])) for axis in AXES},
    )


@lru_cache(maxsize=8)
def load_tables(path: Optional[Path] = None) -> PatternTables:
    """Load and cache the pattern tables, from the configured asset by default."""
    if path is None:
        from platform_detect.config import get_settings
        path = get_settings().patterns_path
    path = Path(path)
    if not path.exists():
        raise PatternTableError(f'pattern file not found: {path}')
    with open(path, 'r', encoding='utf-8') as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise PatternTableError(f'{path}: invalid YAML: {exc}') from exc

    tables = build_tables(document, str(path))
    logger.info(
        'loaded pattern tables v%s from %s (%s)',
        tables.version,
        path,
        ', '.join(f'{axis}={len(tables.axis(axis))}' for axis in AXES),
    )
    return tables


def find_shadowed_entries(table: PatternTable, matches) -> List[Tuple[PatternEntry, PatternEntry]]:
    """Return ``(entry, earlier)`` pairs where an earlier row wins on ``entry``'s sample.

    ``matches(entry, text)`` decides whether a row fires on a text; the
    matcher module supplies the real axis semantics.
    """
    shadowed = []
    for entry in table:
        sample = entry.sample
        for earlier in table.entries[:entry.ordinal]:
            if matches(earlier, sample):
                if earlier.label != entry.label:
                    shadowed.append((entry, earlier))
                break
    return shadowed
