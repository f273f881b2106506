"""Operating-system name normalisation.

Turns the raw OS fragment found in a user agent (``Windows NT 6.1``,
``Intel Mac OS X 10_15_7``, ``Linux x86_64``) into a readable name and
splits a readable name into family and version.
"""
import re
from dataclasses import dataclass
from typing import Dict, Optional

from platform_detect.matching.text import format_token

WINDOWS_VERSIONS = {
    '10.0': '10',
    '6.4': '10 Technical Preview',
    '6.3': '8.1',
    '6.2': '8',
    '6.1': 'Server 2008 R2 / 7',
    '6.0': 'Server 2008 / Vista',
    '5.2': 'Server 2003 / XP 64-bit',
    '5.1': 'XP',
    '5.01': '2000 SP1',
    '5.0': '2000',
    '4.0': 'NT',
    '4.90': 'ME',
}

# (pattern, replacement, flags, count) applied in order; count 0 replaces all
_CLEANUPS = (
    (r' ce$', ' CE', re.I, 1),
    (r'\bhpw', 'web', re.I, 1),
    (r'\bMacintosh\b', 'Mac OS', 0, 1),
    (r'_PowerPC\b', ' OS', re.I, 1),
    (r'\b(OS X) [^ \d]+', r'\1', re.I, 1),
    (r'\bMac (OS X)\b', r'\1', 0, 1),
    (r'/(\d)', r' \1', 0, 1),
    (r'_', '.', 0, 0),
    (r'(?: BePC|[ .]*fc[ \d.]+)$', '', re.I, 1),
    (r'\bx86\.64\b', 'x86_64', re.I, 0),
    (r'\b(Windows Phone) OS\b', r'\1', 0, 1),
    (r'\b(Chrome OS \w+) [\d.]+\b', r'\1', 0, 1),
)

_TRAILING_KERNEL = re.compile(r'[\d.]+$')
_OS_VERSION = re.compile(r' ([\d.+]+)$')


def windows_marketing_name(os_name: str, table: Optional[Dict[str, str]] = None) -> Optional[str]:
    """``Windows NT 6.1`` -> ``Windows Server 2008 R2 / 7``; None when not applicable."""
    if not re.match(r'Win', os_name, re.I) or re.match(r'Windows Phone ', os_name, re.I):
        return None
    m = _TRAILING_KERNEL.search(os_name)
    if not m:
        return None
    marketing = (table or WINDOWS_VERSIONS).get(m.group(0))
    return 'Windows ' + marketing if marketing else None


def cleanup_os(os_name: str, pattern: Optional[str] = None, label: Optional[str] = None,
               windows_versions: Optional[Dict[str, str]] = None) -> str:
    """Normalise a raw OS fragment.

    ``pattern`` and ``label`` are the table row that found the fragment; when
    both are given the Windows kernel version is mapped to its marketing name
    and the matched pattern is replaced by the label.
    """
    if pattern and label:
        os_name = windows_marketing_name(os_name, windows_versions) or os_name
        os_name = re.sub(pattern, lambda _: label, os_name, count=1, flags=re.I | re.A)
    for regex, repl, flags, count in _CLEANUPS:
        os_name = re.sub(regex, repl, os_name, count=count, flags=flags | re.A)
    return format_token(os_name.split(' on ')[0])


@dataclass(frozen=True)
class OSParts:
    family: str
    version: Optional[str]
    special_cased: bool = False


def split_os(os_name: str) -> OSParts:
    """Split a normalised OS name into family and trailing version.

    A version right after a slash (``Windows Server 2008 R2 / 7``) belongs to
    a combined marketing name, so the family keeps the full string.
    """
    m = _OS_VERSION.search(os_name)
    if not m:
        return OSParts(os_name, None)
    version = m.group(1)
    special = os_name[m.start() - 1:m.start()] == '/'
    family = os_name if special else os_name.replace(m.group(0), '', 1)
    return OSParts(family, version, special)
