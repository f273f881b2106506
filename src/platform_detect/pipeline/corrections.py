"""Order-sensitive correction rules.

Each rule takes the current ``Snapshot`` and a ``RuleContext`` and returns a
new snapshot. ``parser.RULES`` lists them in the order they run; a rule only
sees the output of the rules before it.
"""
import logging
import re
from typing import Callable, NamedTuple, Optional

from platform_detect.i18n.markers import prerelease_marker
from platform_detect.matching.matcher import product_from_entry
from platform_detect.matching.tables import PatternEntry, PatternTables
from platform_detect.matching.text import (
    format_token,
    parse_float,
    qualify,
    to_number,
    trim,
)
from platform_detect.matching.versions import resolve_version, version_prefixes
from platform_detect.pipeline.snapshot import Snapshot

logger = logging.getLogger(__name__)


class RuleContext(NamedTuple):
    tables: PatternTables
    # (subject, snapshot) -> record of a nested parse, None past the depth cap
    reparse: Callable[[str, Snapshot], Optional[object]]


def _has(pattern: str, value: Optional[str], flags: int = 0) -> bool:
    return value is not None and re.search(pattern, value, flags) is not None


def _starts(pattern: str, value: Optional[str], flags: int = 0) -> bool:
    return value is not None and re.match(pattern, value, flags) is not None


# -- product and manufacturer -----------------------------------------------

_ANDROID_SEGMENT = re.compile(r'\bAndroid[^;]*;(.*?)(?:Build|\) AppleWebKit)\b', re.I)


def extract_android_product(s: Snapshot, ctx: RuleContext) -> Snapshot:
    """Take the device model from between ``Android x;`` and ``Build``."""
    if s.product or not _has(r'\bAndroid\b', s.os):
        return s
    m = _ANDROID_SEGMENT.search(s.ua)
    if not m:
        return s
    product = re.sub(r'^[a-z]{2}-[a-z]{2};\s*', '', trim(m.group(1)), count=1, flags=re.I)
    return s.with_(product=product or None)


def refine_product(s: Snapshot, ctx: RuleContext) -> Snapshot:
    manufacturer, product = s.manufacturer, s.product
    if manufacturer and not product:
        entry = PatternEntry('manufacturer', 'product', manufacturer, qualify(manufacturer), 0)
        product = product_from_entry(entry, s.ua)
    elif manufacturer and product:
        vendor = qualify(manufacturer)
        product = re.sub('^(' + vendor + r')[-_.\s]', lambda _: manufacturer + ' ', product,
                         count=1, flags=re.I)
        product = re.sub('^(' + vendor + r')[-_.]?(\w)', lambda m: manufacturer + ' ' + m.group(2),
                         product, count=1, flags=re.I)
    m = re.search(r'\bGoogle TV\b', product or '')
    if m:
        product = m.group(0)
    if re.search(r'\bSimulator\b', s.ua, re.I):
        product = (product + ' ' if product else '') + 'Simulator'
    s = s.with_(product=product)
    if s.name == 'Opera Mini' and re.search(r'\bOPiOS\b', s.ua):
        s = s.push_note('running in Turbo/Uncompressed mode')
    return s


# -- browser identity -------------------------------------------------------

def correct_identity(s: Snapshot, ctx: RuleContext) -> Snapshot:
    """Exclusive chain of name/OS fixes for browsers that misreport themselves."""
    ua, name, os_name = s.ua, s.name, s.os

    if name == 'IE' and re.search(r'\blike iPhone OS\b', ua):
        # IE Mobile 11 claims iOS; parse again without the claim
        nested = ctx.reparse(ua.replace('like iPhone OS', '', 1), s)
        if nested is None:
            return s
        return s.with_(manufacturer=nested.manufacturer, product=nested.product)

    if _starts('iP', s.product):
        m = re.search(r' OS ([\d_]+)', ua, re.I)
        return s.with_(
            name=name or 'Safari',
            os='iOS' + (' ' + m.group(1).replace('_', '.') if m else ''),
        )

    if name == 'Konqueror' and _starts(r'Linux\b', os_name, re.I):
        return s.with_(os='Kubuntu')

    if ((s.manufacturer and s.manufacturer != 'Google'
         and ((_has('Chrome', name) and not re.search(r'\bMobile Safari\b', ua, re.I))
              or _has(r'\bVita\b', s.product)))
            or (_has(r'\bAndroid\b', os_name) and _starts('Chrome', name)
                and re.search(r'\bVersion/', ua, re.I))):
        return s.with_(name='Android Browser',
                       os=os_name if _has(r'\bAndroid\b', os_name) else 'Android')

    if name == 'Silk':
        if not re.search(r'\bMobi', ua, re.I):
            s = s.with_(os='Android').unshift_note('desktop mode')
        if re.search(r'Accelerated *= *true', ua, re.I):
            s = s.unshift_note('accelerated')
        return s

    if name == 'UC Browser' and re.search(r'\bUCWEB\b', ua):
        return s.push_note('speed mode')

    if name == 'PaleMoon':
        m = re.search(r'\bFirefox/([\d.]+)\b', ua)
        if m:
            return s.push_note('identifying as Firefox ' + m.group(1))

    if name == 'Firefox':
        m = re.search(r'\b(Mobile|Tablet|TV)\b', ua, re.I)
        if m:
            return s.with_(os=os_name or 'Firefox OS', product=s.product or m.group(1))

    false_positive = None
    if name and not re.search(r'\bMinefield\b', ua, re.I):
        false_positive = re.search(r'\b(?:Firefox|Safari)\b', name)
    if not name or false_positive:
        if name and not s.product:
            start = ua.find(false_positive.group(0) + '/') + 8
            if re.search(r'[/,]|^[^(]+?\)', ua[start:]):
                name = None
        basis = s.product or s.manufacturer or os_name
        if basis and (s.product or s.manufacturer
                      or _has(r'\b(?:Android|Symbian OS|Tablet OS|webOS)\b', os_name)):
            source = os_name if _has(r'\bAndroid\b', os_name) else basis
            m = re.search(r'[a-z]+(?: Hat)?', source, re.I)
            name = (m.group(0) if m else 'null') + ' Browser'
        return s.with_(name=name)

    if name == 'Electron':
        m = re.search(r'\bChrome/([\d.]+)\b', ua)
        if m:
            return s.push_note('Chromium ' + m.group(1))
    return s


def resolve_missing_version(s: Snapshot, ctx: RuleContext) -> Snapshot:
    if s.version:
        return s
    return s.with_(version=resolve_version(version_prefixes(s.name), s.ua))


def correct_layout(s: Snapshot, ctx: RuleContext) -> Snapshot:
    """Engines the layout table cannot see from tokens alone."""
    ua, layout, name = s.ua, s.layout, s.name
    engine = None
    if s.layout_is('iCab') and parse_float(s.version) > 3:
        engine = 'WebKit'
    elif _has(r'\bOpera\b', name):
        engine = 'Blink' if re.search(r'\bOPR\b', ua) else 'Presto'
    elif (re.search(r'\b(?:Midori|Nook|Safari)\b', ua, re.I)
          and not (s.layout_note is None and layout in ('Trident', 'EdgeHTML'))):
        engine = 'WebKit'
    elif not layout and re.search(r'\bMSIE\b', ua, re.I):
        engine = 'Tasman' if s.os == 'Mac OS' else 'Trident'
    elif s.layout_is('WebKit') and _has(r'\bPlayStation\b(?! Vita\b)', name, re.I):
        engine = 'NetFront'
    return s.set_layout(engine) if engine else s


def correct_desktop_ie(s: Snapshot, ctx: RuleContext) -> Snapshot:
    """Windows Phone desktop modes and IE 11 identifying as another browser."""
    ua = s.ua
    if s.name == 'IE':
        m = re.search(r'; *(?:XBLWP|ZuneWP)(\d+)', ua, re.I)
        if m:
            build = m.group(1)
            return s.with_(
                name=s.name + ' Mobile',
                os='Windows Phone ' + (build if build.endswith('+') else build + '.x'),
            ).unshift_note('desktop mode')
    if re.search(r'\bWPDesktop\b', ua, re.I):
        rv = re.search(r'\brv:([\d.]+)', ua)
        version = s.version or (rv.group(1) if rv else None)
        s = s.with_(name='IE Mobile', os='Windows Phone 8.x', version=version)
        return s.unshift_note('desktop mode')
    if s.name != 'IE' and s.layout_is('Trident'):
        rv = re.search(r'\brv:([\d.]+)', ua)
        if rv:
            if s.name:
                s = s.push_note('identifying as ' + s.name + (' ' + s.version if s.version else ''))
            return s.with_(name='IE', version=rv.group(1))
    return s


# -- prerelease -------------------------------------------------------------

_PRERELEASE_SUFFIX = re.compile(r'(?:[ab]|dp|pre|[ab]\d+pre)(?:\d+\+?)?$', re.I)
_PRERELEASE_WORD = re.compile(r'(?:alpha|beta)(?: ?\d)?', re.I)


def tag_prerelease(s: Snapshot, ctx: RuleContext) -> Snapshot:
    if not s.version:
        return s
    marker = None
    m = _PRERELEASE_SUFFIX.search(s.version)
    if m:
        marker = m.group(0)
    else:
        minor = s.hints.navigator.app_minor_version if s.use_features and s.hints.navigator else None
        m = _PRERELEASE_WORD.search(s.ua + ';' + (minor or ''))
        if m:
            marker = m.group(0)
        elif re.search(r'\bMinefield\b', s.ua, re.I):
            marker = 'a'
    if not marker:
        return s

    stage = 'beta' if 'b' in marker.lower() else 'alpha'
    digits = re.search(r'\d+\+?', marker)
    version = (re.sub(re.escape(marker) + r'\+?$', '', s.version, count=1)
               + prerelease_marker(stage, s.charset)
               + (digits.group(0) if digits else ''))
    return s.with_(prerelease=stage, version=version)


# -- mobile, consoles and masking -------------------------------------------

def _opera_suspect(s: Snapshot) -> bool:
    name, os_name, version = s.name, s.os, s.version
    if s.use_features and s.hints.embedded_engine is not None:
        return True
    if _has('Opera', name) and re.search(r'\b(?:MSIE|Firefox)\b', s.ua, re.I):
        return True
    if name == 'Firefox' and _has(r'\bOS X (?:\d+\.){2,}', os_name):
        return True
    if name == 'IE':
        number = to_number(version)
        if os_name and not os_name.startswith('Win') and number > 5.5:
            return True
        if _has(r'\bWindows XP\b', os_name) and number > 8:
            return True
        if number == 8 and not re.search(r'\bTrident\b', s.ua):
            return True
    return False


def correct_mobile_and_masking(s: Snapshot, ctx: RuleContext) -> Snapshot:
    ua, name = s.ua, s.name

    if name == 'Fennec' or (name == 'Firefox' and _has(r'\b(?:Android|Firefox OS|KaiOS)\b', s.os)):
        return s.with_(name='Firefox Mobile')

    if name == 'Maxthon' and s.version:
        return s.with_(version=re.sub(r'\.[\d.]+', '.x', s.version, count=1))

    if _has(r'\bXbox\b', s.product, re.I):
        if s.product == 'Xbox 360':
            s = s.with_(os=None)
            if re.search(r'\bIEMobile\b', ua):
                s = s.unshift_note('mobile mode')
        return s

    if ((_has(r'^(?:Chrome|IE|Opera)$', name)
         or (name and not s.product and not re.search('Browser|Mobi', name)))
            and (s.os == 'Windows CE' or re.search('Mobi', ua, re.I))):
        return s.with_(name=name + ' Mobile')

    if name == 'IE' and s.use_features:
        accessor = s.hints.external
        if accessor is None:
            return s
        try:
            external = accessor()
        except Exception as exc:
            logger.debug('external accessor failed: %s', exc)
            return s.unshift_note('embedded')
        if external is None:
            return s.unshift_note('platform preview')
        return s

    if _has(r'\bBlackBerry\b', s.product) or re.search(r'\bBB10\b', ua):
        product_pattern = ' *'.join(re.escape(part) for part in (s.product or '').split(' ') if part)
        m = re.search(product_pattern + r'/([.\d]+)', ua, re.I)
        build = (m.group(1) if m else None) or s.version
        if build:
            if 'BB10' in ua:
                return s.with_(product=None, manufacturer='BlackBerry',
                               os='BlackBerry ' + build, version=None)
            return s.with_(os='Device Software ' + build, version=None)

    if s.product != 'Wii' and _opera_suspect(s):
        nested = ctx.reparse(re.sub(r'\bOpera', '', ua, count=1) + ';', s)
        if nested is not None and nested.name and not re.search(r'\bOpera', nested.render()):
            note = 'ing as ' + nested.name + (' ' + nested.version if nested.version else '')
            if _has(r'\bOpera', name):
                if re.search(r'\bIE\b', note) and s.os == 'Mac OS':
                    s = s.with_(os=None)
                note = 'identify' + note
            else:
                note = 'mask' + note
                engine = s.hints.embedded_engine if s.use_features else None
                if engine is not None:
                    name = format_token(re.sub(r'([a-z])([A-Z])', r'\1 \2', engine.class_name))
                else:
                    name = 'Opera'
                s = s.with_(name=name)
                if re.search(r'\bIE\b', note):
                    s = s.with_(os=None)
                if not s.use_features:
                    s = s.with_(version=None)
            return s.set_layout('Presto').push_note(note)
    return s


# -- desktop modes and OS cleanup ---------------------------------------------

def correct_desktop_modes(s: Snapshot, ctx: RuleContext) -> Snapshot:
    name = s.name
    m = re.search(r'\bzbov|zvav$', s.os) if name == 'Opera' and s.os else None
    if m:
        mode = m.group(0)
        s = s.unshift_note('desktop mode')
        if mode == 'zvav':
            s = s.with_(name=name + ' Mini', version=None)
        else:
            s = s.with_(name=name + ' Mobile')
        return s.with_(os=re.sub(' *' + mode + '$', '', s.os, count=1))

    if name == 'Safari' and _has(r'\bChrome\b', s.layout_note):
        s = s.unshift_note('desktop mode').with_(name='Chrome Mobile', version=None)
        if _has(r'\bOS X\b', s.os):
            return s.with_(manufacturer='Apple', os='iOS 4.3+')
        return s.with_(os=None)

    if _has(r'\bSRWare Iron\b', name) and not s.version:
        return s.with_(version=resolve_version(('Chrome',), s.ua))
    return s


def strip_os_noise(s: Snapshot, ctx: RuleContext) -> Snapshot:
    """Drop OS versions copied from the browser token and browser names inside the OS."""
    os_name, name = s.os, s.name
    if s.version and os_name:
        m = re.search(r'[\d.]+$', os_name)
        if m and s.version.startswith(m.group(0)) and ('/' + m.group(0) + '-') in s.ua:
            os_name = trim(os_name.replace(m.group(0), '', 1))
    if os_name and name and name in os_name and not re.search(re.escape(name) + ' OS', os_name):
        os_name = re.sub(' *' + qualify(re.escape(name)) + ' *', '', os_name, count=1)
    return s.with_(os=os_name)


def note_layout(s: Snapshot, ctx: RuleContext) -> Snapshot:
    """Mention the engine for browsers whose name says little about it."""
    name = s.name or ''
    if not s.layout or re.search(r'\b(?:Avant|Nook)\b', name):
        return s
    if (re.search('Browser|Lunascape|Maxthon', name)
            or (name != 'Safari' and _starts('iOS', s.os) and _has(r'\bSafari\b', s.layout_note))
            or (re.match(r'(?:Adobe|Arora|Breach|Midori|Opera|Phantom|Rekonq|Rock|Samsung Internet'
                         r'|Sleipnir|SRWare Iron|Vivaldi|Web)', name) and s.layout_note)):
        detail = s.layout_note if s.layout_note is not None else s.layout
        if detail:
            return s.push_note(detail)
    return s

