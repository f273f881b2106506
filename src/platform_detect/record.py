from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass(frozen=True)
class OSInfo:
    architecture: Optional[int] = None
    family: Optional[str] = None
    version: Optional[str] = None
    special_cased: bool = field(default=False, repr=False)

    @property
    def is_null(self) -> bool:
        return self.family is None

    def render(self) -> str:
        if self.family is None:
            return 'null'
        text = self.family
        if self.version and not self.special_cased:
            text += ' ' + self.version
        if self.architecture == 64:
            text += ' 64-bit'
        return text

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> dict:
        return {'architecture': self.architecture, 'family': self.family, 'version': self.version}


NULL_OS = OSInfo()


@dataclass(frozen=True)
class PlatformRecord:
    """Everything detected about one user agent."""

    description: Optional[str] = None
    layout: Optional[str] = None
    manufacturer: Optional[str] = None
    name: Optional[str] = None
    prerelease: Optional[str] = None
    product: Optional[str] = None
    ua: Optional[str] = None
    version: Optional[str] = None
    os: OSInfo = NULL_OS

    def render(self) -> str:
        return self.description or ''

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> dict:
        data = asdict(self)
        data['os'] = self.os.to_dict()
        return data
