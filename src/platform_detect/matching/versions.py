import re
from typing import Iterable, Optional

from platform_detect.matching.matcher import compiled
from platform_detect.matching.text import qualify

VENDOR_TOKENS = (
    r'(?:Cloud9|CriOS|CrMo|Edge|Edg|EdgA|EdgiOS|FxiOS|HeadlessChrome|IEMobile|Iron'
    r'|Opera ?Mini|OPiOS|OPR|Raven|SamsungBrowser|Silk(?!/[\d.]+$)|UCBrowser|YaBrowser)'
)
FALLBACK_TOKENS = r'(?:Firefox|Minefield|NetFront)'

_VERSION_TAIL = r'(?:-[\d.]+/|(?: for [\w-]+)?[ /-])([\d.]+[^ ();/_-]*)'
_REGEX_META = re.compile(r'([.^$*+?{}\[\]\\|()])')


def resolve_version(prefixes: Iterable[str], ua: str) -> Optional[str]:
    """Version token following the first prefix that occurs in ``ua``.

    Prefixes are tried in order; the token is returned verbatim
    (``53.0.2785.143``, ``12.0b2``) or None when no prefix has one.
    """
    for prefix in prefixes:
        m = compiled(prefix + _VERSION_TAIL).search(ua)
        if m and m.group(1):
            return m.group(1)
    return None


def version_prefixes(name: Optional[str]):
    """Default prefix order: vendor tokens, ``Version``, the browser name, Gecko-era names."""
    if not name:
        return (VENDOR_TOKENS, 'Version', FALLBACK_TOKENS)
    return (VENDOR_TOKENS, 'Version', qualify(_REGEX_META.sub(r'\\\1', name)), FALLBACK_TOKENS)
