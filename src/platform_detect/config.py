import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ValidationError

from platform_detect.errors import ConfigError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / 'data'
DEFAULT_PATTERNS_PATH = DATA_DIR / 'patterns.yaml'

CONFIG_ENV = 'PLATFORM_DETECT_CONFIG'
PATTERNS_ENV = 'PLATFORM_DETECT_PATTERNS'
CHARSET_ENV = 'PLATFORM_DETECT_CHARSET'


class Settings(BaseModel):
    patterns_path: Path = DEFAULT_PATTERNS_PATH
    marker_charset: Literal['unicode', 'ascii'] = 'unicode'
    log_level: Optional[str] = None


def load_settings(path: Optional[Path] = None) -> Settings:
    """Build settings from defaults, an optional YAML file and the environment.

    The file is the one given, else the one named by ``PLATFORM_DETECT_CONFIG``.
    Environment overrides win over the file.
    """
    values = {}
    cfg_path = path or os.environ.get(CONFIG_ENV)
    if cfg_path:
        cfg_path = Path(cfg_path)
        if not cfg_path.exists():
            raise ConfigError(f'config file not found: {cfg_path}')
        with open(cfg_path, 'r', encoding='utf-8') as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f'invalid YAML in {cfg_path}: {exc}') from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f'{cfg_path} must contain a mapping')
        values.update(loaded)

    if os.environ.get(PATTERNS_ENV):
        values['patterns_path'] = os.environ[PATTERNS_ENV]
    if os.environ.get(CHARSET_ENV):
        values['marker_charset'] = os.environ[CHARSET_ENV]

    try:
        settings = Settings(**values)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    # the package logger level is left to the host unless configured
    if settings.log_level:
        try:
            logging.getLogger('platform_detect').setLevel(settings.log_level.upper())
        except ValueError as exc:
            raise ConfigError(f'unknown log level: {settings.log_level}') from exc
    logger.debug('settings loaded: %s', settings)
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
