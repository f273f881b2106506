"""Corrections drawn from host hints rather than the user-agent string.

Only applies when the caller supplied ``HostHints`` describing the same
user agent that is being parsed. Every accessor goes through ``probe``, so a
host object that throws simply contributes nothing.
"""
import logging
import re
from typing import Optional

from platform_detect.hints import HostHints, probe
from platform_detect.matching.text import display, format_token
from platform_detect.pipeline.snapshot import Snapshot

logger = logging.getLogger(__name__)


def _join_version(value) -> Optional[str]:
    version = getattr(value, 'version', None)
    if version is None and isinstance(value, dict):
        version = value.get('version')
    if version is None:
        raise LookupError('module has no version')
    if isinstance(version, (list, tuple)):
        return '.'.join(str(part) for part in version)
    return str(version)


def _server_side(s: Snapshot, hints: HostHints) -> Snapshot:
    runtime = hints.managed_runtime
    if runtime is not None:
        arch = probe(runtime.get_property, 'os.arch', what='os.arch')
        s = s.with_(arch=arch or '')
        if not s.os:
            os_name = probe(runtime.get_property, 'os.name', what='os.name')
            os_version = probe(runtime.get_property, 'os.version', what='os.version')
            if os_name is not None:
                s = s.with_(os=f'{os_name} {display(os_version)}')

    if runtime is not None and runtime.rhino_environment:
        loader = hints.module_loader
        name = s.name
        try:
            if loader is None or loader.require is None:
                raise LookupError('no module loader')
            s = s.with_(version=_join_version(loader.require('ringo/engine')), name='RingoJS')
            name = 'RingoJS'
        except Exception as exc:
            logger.debug('ringo/engine unavailable: %s', exc)
            if loader is not None and loader.system is not None:
                name = 'Narwhal'
                s = s.with_(os=s.os or loader.system.os or None)
        return s.with_(name=name or 'Rhino')

    process = hints.process
    if process is None or process.browser:
        return s
    versions = process.versions or {}
    if isinstance(versions.get('electron'), str):
        s = s.push_note('Node ' + display(versions.get('node')))
        s = s.with_(name='Electron', version=versions['electron'])
    elif isinstance(versions.get('nw'), str):
        s = s.push_note('Chromium ' + display(s.version)).push_note('Node ' + display(versions.get('node')))
        s = s.with_(name='NW.js', version=versions['nw'])
    if not s.name:
        m = re.search(r'[\d.]+', process.version or '')
        s = s.with_(name='Node.js', arch=process.arch or '', os=process.platform,
                    version=m.group(0) if m else None)
    return s


def _compatibility_mode(s: Snapshot, document_mode: int, trident: int) -> Snapshot:
    engine_mode = trident + 4
    effective = document_mode
    if engine_mode != document_mode:
        s = s.push_note(f'IE {document_mode} mode')
        if s.layout:
            s = s.with_(layout_note='')
        effective = engine_mode
    if s.name == 'IE':
        s = s.with_(version=f'{float(effective):.1f}')
    return s


def apply_host_hints(s: Snapshot, ctx=None) -> Snapshot:
    """Fold runtime facts (server runtimes, AIR, PhantomJS, IE document modes) into ``s``."""
    if not s.use_features:
        return s
    hints = s.hints
    document_mode = hints.document.document_mode if hints.document else None
    trident = None
    if document_mode is not None:
        trident = re.search(r'\bTrident/(\d+)', s.ua, re.I)

    if hints.is_server_side:
        s = _server_side(s, hints)
    elif hints.desktop_shell is not None:
        s = s.with_(name='Adobe AIR', os=hints.desktop_shell.capabilities_os)
    elif hints.headless is not None:
        v = hints.headless.version
        s = s.with_(name='PhantomJS', version=f'{v.major}.{v.minor}.{v.patch}' if v else None)
    elif trident:
        s = _compatibility_mode(s, document_mode, int(trident.group(1)))
    elif document_mode is not None and s.name and re.match(r'(?:Chrome|Firefox)\b', s.name):
        s = s.push_note(f'masking as {s.name} {display(s.version)}')
        s = s.with_(name='IE', version='11.0', os='Windows').set_layout('Trident')

    return s.with_(os=format_token(s.os) if s.os else s.os)
