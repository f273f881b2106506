import re
from functools import lru_cache
from typing import Dict, Iterable, Optional, Sequence, Tuple

from platform_detect.matching.tables import (
    PatternEntry,
    PatternTable,
    PatternTables,
    find_shadowed_entries,
)
from platform_detect.matching.text import format_token, qualify
from platform_detect.normalize.os_names import cleanup_os

_FLAGS = re.IGNORECASE | re.ASCII
_LEADING_WORDS = re.compile(r'^[a-z]+(?: +[a-z]+\b)*', _FLAGS)


@lru_cache(maxsize=None)
def compiled(pattern: str) -> 're.Pattern':
    return re.compile(pattern, _FLAGS)


def label_regex(entry: PatternEntry) -> 're.Pattern':
    return compiled(r'(?<!\w)' + entry.pattern + r'(?!\w)')


def entry_matches(entry: PatternEntry, text: str) -> bool:
    return label_regex(entry).search(text) is not None


def match_label(table: Iterable[PatternEntry], ua: str) -> Optional[str]:
    """Label of the first row whose pattern occurs as a whole word in ``ua``."""
    for entry in table:
        if entry_matches(entry, ua):
            return entry.label
    return None


def _product_shapes(pattern: str) -> Tuple['re.Pattern', ...]:
    return (
        compiled(r'\b' + pattern + r' *\d+[.\w_]*'),
        compiled(r'\b' + pattern + r' *\w+-[\w]*'),
        compiled(r'\b' + pattern + r'(?:; *(?:[a-z]+[_-])?[a-z]+\d+|[^ ();-]*)'),
    )


def _product_text(entry: PatternEntry, ua: str) -> Optional[str]:
    for shape in _product_shapes(entry.pattern):
        m = shape.search(ua)
        if m:
            return m.group(0)
    return None


def product_from_entry(entry: PatternEntry, ua: str) -> Optional[str]:
    """Model string for ``entry`` if its pattern occurs in ``ua``.

    The matched text keeps any model suffix (``Nexus 7``, ``Kindle Fire HD``),
    with the pattern replaced by the label and separators after the label
    normalised to one space.
    """
    found = _product_text(entry, ua)
    if found is None:
        return None
    if entry.explicit and not compiled(entry.pattern).search(entry.label):
        found = entry.label
    parts = found.split('/')
    result = parts[0]
    if len(parts) > 1 and parts[1] and not re.search(r'[\d.]+', parts[0]):
        result += ' ' + parts[1]

    label = entry.label
    escaped = re.escape(label)
    result = compiled(entry.pattern).sub(lambda _: label, result, count=1)
    result = compiled('; *(?:' + escaped + '[_-])?').sub(' ', result, count=1)
    result = compiled('(' + escaped + r')[-_.]?(\w)').sub(r'\1 \2', result, count=1)
    return format_token(result)


def match_product(table: Iterable[PatternEntry], ua: str) -> Optional[str]:
    for entry in table:
        result = product_from_entry(entry, ua)
        if result:
            return result
    return None


def match_os(table: Iterable[PatternEntry], ua: str,
             windows_versions: Optional[Dict[str, str]] = None) -> Optional[str]:
    for entry in table:
        m = compiled(r'\b' + entry.pattern + r'(?:/[\d.]+|[ \w.]*)').search(ua)
        if m:
            return cleanup_os(m.group(0), entry.pattern, entry.label, windows_versions)
    return None


def match_vendor(vendors: Sequence[Tuple[str, Sequence[str]]], product: Optional[str],
                 ua: str) -> Optional[str]:
    """First vendor owning ``product`` (or its leading words) or named in ``ua``."""
    lead = None
    if product:
        m = _LEADING_WORDS.match(product)
        lead = m.group(0) if m else None
    for vendor, products in vendors:
        if product and product in products:
            return vendor
        if lead and lead in products:
            return vendor
        if compiled(r'\b' + qualify(vendor) + r'(?:\b|\w*\d)').search(ua):
            return vendor
    return None


def match_manufacturer(tables: PatternTables, product: Optional[str], ua: str) -> Optional[str]:
    return match_vendor(tables.vendors, product, ua) or match_label(tables.manufacturer, ua)


def product_matches(entry: PatternEntry, text: str) -> bool:
    return _product_text(entry, text) is not None


def os_matches(entry: PatternEntry, text: str) -> bool:
    return compiled(r'\b' + entry.pattern + r'(?:/[\d.]+|[ \w.]*)').search(text) is not None


AXIS_PREDICATES = {
    'layout': entry_matches,
    'name': entry_matches,
    'manufacturer': entry_matches,
    'product': product_matches,
    'os': os_matches,
}


def axis_matcher(axis: str):
    """Predicate ``(entry, text) -> bool`` with the semantics of ``axis``."""
    return AXIS_PREDICATES[axis]


def shadowed_in(table: PatternTable):
    return find_shadowed_entries(table, axis_matcher(table.axis))
