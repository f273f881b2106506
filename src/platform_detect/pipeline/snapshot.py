from dataclasses import dataclass, replace
from typing import Optional, Tuple

from platform_detect.hints import EMPTY_HINTS, HostHints
from platform_detect.record import OSInfo


@dataclass(frozen=True)
class Snapshot:
    """Working state of one parse. Rules return new snapshots, never mutate."""

    ua: str
    hints: HostHints = EMPTY_HINTS
    use_features: bool = False
    depth: int = 0
    charset: str = 'unicode'

    name: Optional[str] = None
    version: Optional[str] = None
    layout: Optional[str] = None
    # engine qualifier ("like Chrome 27"); '' hides it from the description
    layout_note: Optional[str] = None
    product: Optional[str] = None
    manufacturer: Optional[str] = None
    os: Optional[str] = None
    prerelease: Optional[str] = None
    notes: Tuple[str, ...] = ()
    # text searched for 64-bit tokens; the subject unless a runtime reports one
    arch: str = ''
    # set once the OS string has been split
    os_info: Optional[OSInfo] = None
    bitness_note: Optional[str] = None

    def with_(self, **changes) -> 'Snapshot':
        return replace(self, **changes)

    def push_note(self, note: str) -> 'Snapshot':
        return replace(self, notes=self.notes + (note,))

    def unshift_note(self, note: str) -> 'Snapshot':
        return replace(self, notes=(note,) + self.notes)

    def set_layout(self, layout: Optional[str]) -> 'Snapshot':
        return replace(self, layout=layout, layout_note=None)

    def layout_is(self, value: str) -> bool:
        """True when the layout is exactly ``value`` with no qualifier."""
        return self.layout == value and self.layout_note is None
