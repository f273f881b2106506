"""Typed host-environment hints.

A caller that knows more about the runtime than the user-agent string says
(browser navigator fields, an embedded Opera object, a Java bridge, a Node
process, ...) passes it as ``HostHints``. Nothing is read from real globals.
Every accessor is optional and every call goes through ``probe`` so a
failing accessor reads as "capability absent".
"""
import logging
from typing import Any, Callable, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class _Hint(BaseModel):
    model_config = ConfigDict(frozen=True)


class NavigatorHint(_Hint):
    user_agent: Optional[str] = None
    app_minor_version: Optional[str] = None
    cpu_class: Optional[str] = None
    platform: Optional[str] = None
    like_chrome: bool = False


class DocumentHint(_Hint):
    document_mode: Optional[int] = None


class EmbeddedEngineHint(_Hint):
    """Opera's global object."""
    class_name: str = 'Opera'
    version: Optional[Callable[[], Any]] = None


class ManagedRuntimeHint(_Hint):
    """A Java bridge (``java.lang.System``)."""
    class_name: str = 'JavaPackage'
    get_property: Optional[Callable[[str], Any]] = None
    rhino_environment: bool = False


class NarwhalSystemHint(_Hint):
    os: Optional[str] = None


class ModuleLoaderHint(_Hint):
    require: Optional[Callable[[str], Any]] = None
    system: Optional[NarwhalSystemHint] = None


class ProcessHint(_Hint):
    versions: Dict[str, Any] = {}
    platform: Optional[str] = None
    arch: Optional[str] = None
    version: Optional[str] = None
    browser: bool = False


class DesktopShellHint(_Hint):
    """Adobe AIR runtime."""
    capabilities_os: Optional[str] = None


class HeadlessVersion(_Hint):
    major: int
    minor: int
    patch: int


class HeadlessHint(_Hint):
    """PhantomJS."""
    version: Optional[HeadlessVersion] = None


class HostHints(_Hint):
    navigator: Optional[NavigatorHint] = None
    document: Optional[DocumentHint] = None
    embedded_engine: Optional[EmbeddedEngineHint] = None
    managed_runtime: Optional[ManagedRuntimeHint] = None
    module_loader: Optional[ModuleLoaderHint] = None
    process: Optional[ProcessHint] = None
    desktop_shell: Optional[DesktopShellHint] = None
    headless: Optional[HeadlessHint] = None
    external: Optional[Callable[[], Any]] = None
    charset: Optional[Literal['unicode', 'ascii']] = None

    @property
    def user_agent(self) -> str:
        return (self.navigator.user_agent if self.navigator else None) or ''

    @property
    def is_server_side(self) -> bool:
        return self.managed_runtime is not None or self.process is not None


EMPTY_HINTS = HostHints()


def probe(accessor: Optional[Callable[..., Any]], *args, what: str = 'accessor') -> Any:
    """Call a host accessor, treating a missing accessor or any failure as None."""
    if accessor is None:
        return None
    try:
        return accessor(*args)
    except Exception as exc:
        logger.debug('host %s failed: %s', what, exc)
        return None
