import re

from platform_detect.matching.text import parse_float
from platform_detect.normalize.os_names import split_os
from platform_detect.pipeline.snapshot import Snapshot
from platform_detect.record import OSInfo

_X64 = re.compile(r'\b(?:AMD|IA|Win|WOW|x86_|x)64\b', re.I)


def resolve_os(s: Snapshot, ctx=None) -> Snapshot:
    """Split the OS string into an ``OSInfo``; 32-bit until shown otherwise."""
    if not s.os:
        return s.with_(os_info=None)
    parts = split_os(s.os)
    return s.with_(os_info=OSInfo(32, parts.family, parts.version, parts.special_cased))


def detect_architecture(s: Snapshot, ctx=None) -> Snapshot:
    """Mark 64-bit systems and 32-bit browsers running on them."""
    source = str(s.arch or '')
    info = s.os_info
    m = _X64.search(source)
    if m and not re.search(r'\bi686\b', source, re.I):
        if info is not None:
            family = re.sub(' *' + re.escape(m.group(0)), '', info.family, count=1)
            s = s.with_(os_info=OSInfo(64, family, info.version, info.special_cased))
        navigator = s.hints.navigator if s.use_features else None
        cpu = (navigator.cpu_class or navigator.platform) if navigator else None
        if s.name and (re.search(r'\bWOW64\b', s.ua, re.I)
                       or (cpu and re.search(r'\w(?:86|32)$', cpu)
                           and not re.search(r'\bWin64; x64\b', s.ua, re.I))):
            s = s.with_(bitness_note='32-bit')
    elif (info is not None and info.family.startswith('OS X')
          and s.name == 'Chrome' and parse_float(s.version) >= 39):
        s = s.with_(os_info=OSInfo(64, info.family, info.version, info.special_cased))
    return s
