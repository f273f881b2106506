import logging

from platform_detect.errors import ConfigError, PatternTableError, PlatformDetectError
from platform_detect.hints import (
    DesktopShellHint,
    DocumentHint,
    EmbeddedEngineHint,
    HeadlessHint,
    HeadlessVersion,
    HostHints,
    ManagedRuntimeHint,
    ModuleLoaderHint,
    NarwhalSystemHint,
    NavigatorHint,
    ProcessHint,
)
from platform_detect.pipeline.parser import parse
from platform_detect.record import OSInfo, PlatformRecord
from platform_detect.summary import parse_user_agent

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '1.0.0'

__all__ = [
    'ConfigError',
    'DesktopShellHint',
    'DocumentHint',
    'EmbeddedEngineHint',
    'HeadlessHint',
    'HeadlessVersion',
    'HostHints',
    'ManagedRuntimeHint',
    'ModuleLoaderHint',
    'NarwhalSystemHint',
    'NavigatorHint',
    'OSInfo',
    'PatternTableError',
    'PlatformDetectError',
    'PlatformRecord',
    'ProcessHint',
    'parse',
    'parse_user_agent',
]
