"""WebKit build ladders.

WebKit browsers rarely say which Safari or Chrome release they match, but
the AppleWebKit build number does. The ladders map a build to the release
family that shipped it; the result is shown as ``like Safari 8.x`` or
``like Chrome 27``.
"""
import bisect
import re
from typing import Optional, Tuple, Union

from platform_detect.matching.text import parse_float, parse_int, to_number
from platform_detect.pipeline.snapshot import Snapshot

Bucket = Union[int, str]

# (upper bound exclusive, bucket)
SAFARI_LADDER: Tuple[Tuple[float, Bucket], ...] = (
    (400, 1), (500, 2), (526, 3), (533, 4), (534, '4+'), (535, 5), (537, 6),
    (538, 7), (601, 8), (602, 9), (604, 10), (606, 11), (608, 12),
)
SAFARI_TOP: Bucket = '12'

CHROME_LADDER: Tuple[Tuple[float, Bucket], ...] = (
    (530, 1), (532, 2), (532.05, 3), (533, 4), (534.03, 5), (534.07, 6),
    (534.10, 7), (534.13, 8), (534.16, 9), (534.24, 10), (534.30, 11),
    (535.01, 12), (535.02, '13+'), (535.07, 15), (535.11, 16), (535.19, 17),
    (536.05, 18), (536.10, 19), (537.01, 20), (537.11, '21+'), (537.13, 23),
    (537.18, 24), (537.24, 25), (537.36, 26),
)
CHROME_TOP: Bucket = '27'

BLINK_BUILD = 537.36


def climb(ladder, top: Bucket, build: float) -> Bucket:
    """Bucket of the first rung whose bound exceeds ``build``."""
    if build != build:
        # nan never compares lower than a bound
        return top
    index = bisect.bisect_right([bound for bound, _ in ladder], build)
    return ladder[index][1] if index < len(ladder) else top


def safari_bucket(build: float) -> Bucket:
    return climb(SAFARI_LADDER, SAFARI_TOP, build)


def chrome_bucket(build: float) -> Bucket:
    return climb(CHROME_LADDER, CHROME_TOP, build)


def approximate(bucket: Bucket) -> str:
    """``8`` -> ``8.x``; ``'13'`` -> ``'13+'``; dotted or plussed strings stay."""
    if isinstance(bucket, int):
        return f'{bucket}.x'
    if re.search(r'[.+]', bucket):
        return bucket
    return bucket + '+'


def _build_number(raw: str) -> float:
    # "532.5" is build 532.05
    return parse_float(re.sub(r'\.(\d)$', r'.0\1', raw))


def apply_webkit_ladder(s: Snapshot, ctx=None) -> Snapshot:
    ua = s.ua
    m = re.search(r'\bAppleWebKit/([\d.]+\+?)', ua, re.I)
    if not m:
        return s
    raw = m.group(1)
    build = _build_number(raw)
    safari_build: Optional[str] = None

    if s.name == 'Safari' and raw.endswith('+'):
        s = s.with_(name='WebKit Nightly', prerelease='alpha', version=raw[:-1])
    elif s.version == raw:
        s = s.with_(version=None)
    else:
        sm = re.search(r'\bSafari/([\d.]+\+?)', ua, re.I)
        safari_build = sm.group(1) if sm else None
        if s.version == safari_build:
            s = s.with_(version=None)

    cm = re.search(r'\b(?:Headless)?Chrome/([\d.]+)', ua, re.I)
    chrome = cm.group(1) if cm else None

    if (build == BLINK_BUILD and to_number(safari_build) == BLINK_BUILD and parse_float(chrome) >= 28
            and s.layout_is('WebKit')):
        s = s.set_layout('Blink')

    like_chrome = bool(s.hints.navigator and s.hints.navigator.like_chrome)
    if not s.use_features or (not like_chrome and not chrome):
        family, bucket = 'like Safari', safari_bucket(build)
    else:
        family, bucket = 'like Chrome', chrome or chrome_bucket(build)

    approx = approximate(bucket)
    if s.layout:
        s = s.with_(layout_note=family + ' ' + approx)

    if s.name == 'Safari' and (not s.version or parse_int(s.version) > 45):
        s = s.with_(version=approx)
    elif s.name == 'Chrome' and re.search(r'\bHeadlessChrome', ua, re.I):
        s = s.unshift_note('headless')
    return s
