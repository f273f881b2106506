class PlatformDetectError(Exception):
    """Base class for errors raised by platform_detect."""


class PatternTableError(PlatformDetectError, ValueError):
    """The pattern data asset is missing or malformed."""


class ConfigError(PlatformDetectError, ValueError):
    """A configuration file or override could not be applied."""
