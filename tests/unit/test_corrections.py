from pathlib import Path
import sys

# ensure src is importable
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT / 'src') not in sys.path:
    sys.path.insert(0, str(ROOT / 'src'))

from platform_detect.config import DEFAULT_PATTERNS_PATH
from platform_detect.hints import HostHints, NavigatorHint
from platform_detect.matching.tables import load_tables
from platform_detect.pipeline import corrections as c
from platform_detect.pipeline.snapshot import Snapshot
from platform_detect.record import PlatformRecord


def _ctx(reparse=None):
    return c.RuleContext(tables=load_tables(DEFAULT_PATTERNS_PATH),
                         reparse=reparse or (lambda ua, s: None))


# -- product and manufacturer -----------------------------------------------

def test_android_product_between_locale_and_build():
    s = Snapshot(ua='Mozilla/5.0 (Linux; U; Android 4.0.3; ko-kr; LG-L160L Build/IML74K)', os='Android 4.0.3')
    assert c.extract_android_product(s, _ctx()).product == 'LG-L160L'


def test_android_product_needs_android_os():
    s = Snapshot(ua='Mozilla/5.0 (Linux; Android 9; moto e5 play Build/PPD29)', os='Linux')
    assert c.extract_android_product(s, _ctx()).product is None


def test_android_product_keeps_table_product():
    s = Snapshot(ua='Android 4.4; Nexus 7 Build/KOT49H', os='Android 4.4', product='Nexus 7')
    assert c.extract_android_product(s, _ctx()) is s


def test_refine_product_prefixes_manufacturer():
    s = Snapshot(ua='x', manufacturer='LG', product='LG-L160L')
    assert c.refine_product(s, _ctx()).product == 'LG L160L'


def test_refine_product_from_manufacturer_token():
    s = Snapshot(ua='Android 2.3; HTC_Sensation Build/GRI40', manufacturer='HTC')
    assert c.refine_product(s, _ctx()).product == 'HTC Sensation'


def test_refine_product_simulator():
    s = Snapshot(ua='iPhone Simulator', product='iPhone')
    assert c.refine_product(s, _ctx()).product == 'iPhone Simulator'


def test_refine_product_opera_mini_turbo():
    s = Snapshot(ua='Mozilla/5.0 (iPhone) OPiOS/10.2.0.93022', name='Opera Mini')
    assert c.refine_product(s, _ctx()).notes == ('running in Turbo/Uncompressed mode',)


# -- browser identity -------------------------------------------------------

def test_identity_ios_device():
    s = Snapshot(ua='Mozilla/5.0 (iPad; CPU OS 9_3 like Mac OS X)', product='iPad', os='OS X')
    out = c.correct_identity(s, _ctx())
    assert out.name == 'Safari'
    assert out.os == 'iOS 9.3'


def test_identity_konqueror_on_linux():
    s = Snapshot(ua='Konqueror/4.5', name='Konqueror', os='Linux')
    assert c.correct_identity(s, _ctx()).os == 'Kubuntu'


def test_identity_android_webview_with_version_token():
    s = Snapshot(ua='Android 4.4; Nexus 5 Build/KRT16M) Version/4.0 Chrome/30.0.0.0 Mobile Safari/537.36',
                 name='Chrome', os='Android 4.4', product='Nexus 5', manufacturer='Google')
    out = c.correct_identity(s, _ctx())
    assert out.name == 'Android Browser'
    assert out.os == 'Android 4.4'


def test_identity_silk_desktop_mode():
    s = Snapshot(ua='Silk/3.13 Safari/535.19 Silk-Accelerated=true', name='Silk')
    out = c.correct_identity(s, _ctx())
    assert out.os == 'Android'
    assert out.notes == ('accelerated', 'desktop mode')


def test_identity_uc_speed_mode():
    s = Snapshot(ua='UCWEB/2.0 UCBrowser/9.9', name='UC Browser')
    assert c.correct_identity(s, _ctx()).notes == ('speed mode',)


def test_identity_palemoon_identifying_as_firefox():
    s = Snapshot(ua='Goanna/3.4 Firefox/52.9 PaleMoon/28.0', name='PaleMoon')
    assert c.correct_identity(s, _ctx()).notes == ('identifying as Firefox 52.9',)


def test_identity_firefox_os():
    s = Snapshot(ua='Mozilla/5.0 (Mobile; rv:26.0) Gecko/26.0 Firefox/26.0', name='Firefox')
    out = c.correct_identity(s, _ctx())
    assert out.os == 'Firefox OS'
    assert out.product == 'Mobile'


def test_identity_electron_notes_chromium():
    s = Snapshot(ua='Chrome/108.0.5359.62 Electron/22.0.0 Safari/537.36', name='Electron')
    assert c.correct_identity(s, _ctx()).notes == ('Chromium 108.0.5359.62',)


def test_identity_ie_mobile_claiming_ios_reparses():
    seen = []

    def reparse(ua, parent):
        seen.append(ua)
        return PlatformRecord(manufacturer='Nokia', product='Lumia 930')

    s = Snapshot(ua='Windows Phone 8.1; Trident/7.0; NOKIA; Lumia 930) like iPhone OS 7_0_3', name='IE')
    out = c.correct_identity(s, _ctx(reparse))
    assert (out.manufacturer, out.product) == ('Nokia', 'Lumia 930')
    assert 'like iPhone OS' not in seen[0]


def test_identity_generic_browser_from_product():
    s = Snapshot(ua='Mozilla/5.0 (PlayBook; U; RIM Tablet OS 2.1.0)', product='PlayBook', manufacturer='BlackBerry')
    assert c.correct_identity(s, _ctx()).name == 'PlayBook Browser'


# -- versions and layout ----------------------------------------------------

def test_missing_version_resolved():
    s = Snapshot(ua='Firefox/115.0', name='Firefox')
    assert c.resolve_missing_version(s, _ctx()).version == '115.0'


def test_existing_version_kept():
    s = Snapshot(ua='Firefox/115.0', name='Firefox', version='1.0')
    assert c.resolve_missing_version(s, _ctx()).version == '1.0'


def test_layout_opera_blink_or_presto():
    assert c.correct_layout(Snapshot(ua='Chrome/95 OPR/81.0', name='Opera'), _ctx()).layout == 'Blink'
    assert c.correct_layout(Snapshot(ua='Opera/9.80 Presto/2.12', name='Opera'), _ctx()).layout == 'Presto'


def test_layout_msie_without_engine_token():
    assert c.correct_layout(Snapshot(ua='MSIE 6.0; Windows NT 5.1'), _ctx()).layout == 'Trident'
    assert c.correct_layout(Snapshot(ua='MSIE 5.2; Mac_PowerPC', os='Mac OS'), _ctx()).layout == 'Tasman'


def test_desktop_ie_zune_build():
    s = Snapshot(ua='MSIE 9.0; Windows NT 6.1; Trident/5.0; XBLWP7; ZuneWP7', name='IE', version='9.0')
    out = c.correct_desktop_ie(s, _ctx())
    assert out.name == 'IE Mobile'
    assert out.os == 'Windows Phone 7.x'
    assert out.notes == ('desktop mode',)


def test_desktop_ie_identifying_as_other_browser():
    s = Snapshot(ua='Trident/7.0; rv:11.0', name='Firefox', version='30', layout='Trident')
    out = c.correct_desktop_ie(s, _ctx())
    assert (out.name, out.version) == ('IE', '11.0')
    assert out.notes == ('identifying as Firefox 30',)


# -- prerelease -------------------------------------------------------------

def test_prerelease_suffix_unicode():
    out = c.tag_prerelease(Snapshot(ua='x', version='12.0b2'), _ctx())
    assert (out.prerelease, out.version) == ('beta', '12.0β2')


def test_prerelease_suffix_ascii():
    out = c.tag_prerelease(Snapshot(ua='x', version='12.0b2', charset='ascii'), _ctx())
    assert (out.prerelease, out.version) == ('beta', '12.0b2')


def test_prerelease_developer_preview():
    out = c.tag_prerelease(Snapshot(ua='x', version='1.0dp2'), _ctx())
    assert (out.prerelease, out.version) == ('alpha', '1.0α2')


def test_prerelease_word_in_subject():
    out = c.tag_prerelease(Snapshot(ua='Browser 5.0 beta 2', version='5.0'), _ctx())
    assert (out.prerelease, out.version) == ('beta', '5.0β2')


def test_prerelease_from_minor_version_hint():
    hints = HostHints(navigator=NavigatorHint(app_minor_version='alpha'))
    out = c.tag_prerelease(Snapshot(ua='x', version='3.0', hints=hints, use_features=True), _ctx())
    assert (out.prerelease, out.version) == ('alpha', '3.0α')


def test_no_prerelease_for_release_versions():
    s = Snapshot(ua='Chrome/109.0.0.0', version='109.0.0.0')
    assert c.tag_prerelease(s, _ctx()) is s


# -- mobile, consoles and masking -------------------------------------------

def test_fennec_is_firefox_mobile():
    assert c.correct_mobile_and_masking(Snapshot(ua='Fennec/2.0', name='Fennec'), _ctx()).name == 'Firefox Mobile'


def test_firefox_on_android_is_firefox_mobile():
    s = Snapshot(ua='Android 4.4; Tablet', name='Firefox', os='Android 4.4')
    assert c.correct_mobile_and_masking(s, _ctx()).name == 'Firefox Mobile'


def test_maxthon_version_is_approximate():
    s = Snapshot(ua='Maxthon/4.4.3.4000', name='Maxthon', version='4.4.3.4000')
    assert c.correct_mobile_and_masking(s, _ctx()).version == '4.x'


def test_xbox_360_drops_os():
    s = Snapshot(ua='MSIE 9.0; Windows NT 6.1; Xbox; IEMobile', name='IE', product='Xbox 360', os='Windows 7')
    out = c.correct_mobile_and_masking(s, _ctx())
    assert out.os is None
    assert out.notes == ('mobile mode',)
    assert out.name == 'IE'


def test_mobile_postfix():
    s = Snapshot(ua='Chrome/74.0 Mobile Safari/537.36', name='Chrome')
    assert c.correct_mobile_and_masking(s, _ctx()).name == 'Chrome Mobile'
    s = Snapshot(ua='Foo/1.0', name='Foo', os='Windows CE')
    assert c.correct_mobile_and_masking(s, _ctx()).name == 'Foo Mobile'


def test_blackberry_device_software():
    s = Snapshot(ua='BlackBerry9700/5.0.0.351 Profile/MIDP-2.1', product='BlackBerry 9700', name='BlackBerry Browser')
    out = c.correct_mobile_and_masking(s, _ctx())
    assert out.os == 'Device Software 5.0.0.351'
    assert out.version is None


def test_opera_masking_skipped_past_depth_cap():
    s = Snapshot(ua='MSIE 6.0; Mac_PowerPC', name='IE', version='6.0', os='Mac OS')
    assert c.correct_mobile_and_masking(s, _ctx()) is s


# -- desktop modes and OS cleanup ---------------------------------------------

def test_opera_mobile_desktop_mode():
    s = Snapshot(ua='Opera/9.80', name='Opera', version='12.0', os='Android zbov')
    out = c.correct_desktop_modes(s, _ctx())
    assert (out.name, out.os) == ('Opera Mobile', 'Android')
    assert out.notes == ('desktop mode',)


def test_opera_mini_desktop_mode():
    s = Snapshot(ua='Opera/9.80', name='Opera', version='12.0', os='Android zvav')
    out = c.correct_desktop_modes(s, _ctx())
    assert (out.name, out.version, out.os) == ('Opera Mini', None, 'Android')


def test_safari_like_chrome_is_chrome_mobile():
    s = Snapshot(ua='x', name='Safari', version='8.x', os='OS X 10.8', layout='WebKit', layout_note='like Chrome 27+')
    out = c.correct_desktop_modes(s, _ctx())
    assert (out.name, out.version, out.manufacturer, out.os) == ('Chrome Mobile', None, 'Apple', 'iOS 4.3+')


def test_srware_iron_version_from_chrome_token():
    s = Snapshot(ua='Iron/2.0.175.0 Chrome/2.0.175.0', name='SRWare Iron')
    assert c.correct_desktop_modes(s, _ctx()).version == '2.0.175.0'


def test_strip_os_version_copied_from_browser():
    s = Snapshot(ua='Browser/4.0-b Linux 4.0', name='Browser', version='4.0', os='Linux 4.0')
    assert c.strip_os_noise(s, _ctx()).os == 'Linux'


def test_strip_browser_name_from_os():
    assert c.strip_os_noise(Snapshot(ua='x', name='Chrome', os='Chrome Linux'), _ctx()).os == 'Linux'
    assert c.strip_os_noise(Snapshot(ua='x', name='Chrome', os='Chrome OS'), _ctx()).os == 'Chrome OS'


def test_note_layout_for_generic_browser_names():
    s = Snapshot(ua='x', name='Android Browser', layout='WebKit', layout_note='like Safari 5.x')
    assert c.note_layout(s, _ctx()).notes == ('like Safari 5.x',)
    s = Snapshot(ua='x', name='Maxthon', layout='Trident')
    assert c.note_layout(s, _ctx()).notes == ('Trident',)
    s = Snapshot(ua='x', name='Avant Browser', layout='Trident')
    assert c.note_layout(s, _ctx()).notes == ()
    s = Snapshot(ua='x', name='Opera', layout='Presto', layout_note='')
    assert c.note_layout(s, _ctx()).notes == ()
