"""
===============================================================================
QUATCORE - Configuration
===============================================================================
Loads runtime settings and named quaternions from a YAML file.

Expected layout (every key optional):

    settings:
      epsilon: 1.0e-11      # default threshold for roughly_eq comparisons
      log_level: WARNING    # logging level used by the command line tool
      degrees: false        # interpret Euler angles in degrees

    quaternions:
      unit:  {w: 1.0}
      tilt:  {w: 0.9238795, x: 0.3826834}

Each entry under ``quaternions`` is a QuaternionOptions record, so
unspecified components default to 0.0.
===============================================================================
"""

import logging
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from quatcore.constants import DEFAULT_EPSILON
from quatcore.errors import InvalidArgumentError
from quatcore.quaternion import Quaternion

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


@dataclass
class Settings:
    """
    Runtime settings for the quatcore tools.

    Attributes:
        epsilon: Threshold passed to Quaternion.roughly_eq().
        log_level: Name of the logging level (DEBUG, INFO, WARNING, ...).
        degrees: If True, Euler angles given on the command line are in
                 degrees rather than radians.
        quaternions: Named quaternions declared in the config file.
    """
    epsilon: float = DEFAULT_EPSILON
    log_level: str = 'WARNING'
    degrees: bool = False
    quaternions: Dict[str, Quaternion] = field(default_factory=dict)


def _table(raw: Dict[str, Any], section: str) -> Dict[str, Any]:
    """Return a config section as a dict; a missing or empty section is {}."""
    table = raw.get(section)
    if table is None:
        return {}
    if not isinstance(table, dict):
        raise InvalidArgumentError(
            f"Section '{section}' must be a mapping, got {type(table).__name__}"
        )
    return table


def _parse_settings(raw: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(Settings)} - {'quaternions'}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise InvalidArgumentError(
            f"Unrecognized setting(s): {', '.join(map(str, unknown))}"
        )

    parsed = dict(raw)
    if 'epsilon' in parsed:
        try:
            parsed['epsilon'] = float(parsed['epsilon'])
        except (TypeError, ValueError):
            raise InvalidArgumentError(
                f"epsilon must be a number, got {parsed['epsilon']!r}"
            ) from None
        if not parsed['epsilon'] > 0.0:
            raise InvalidArgumentError(
                f"epsilon must be positive, got {parsed['epsilon']}"
            )
    if 'log_level' in parsed:
        parsed['log_level'] = str(parsed['log_level']).upper()
    if 'degrees' in parsed:
        parsed['degrees'] = bool(parsed['degrees'])
    return parsed


def parse_config(raw: Optional[Dict[str, Any]]) -> Settings:
    """
    Build Settings from an already-parsed configuration dictionary.

    Args:
        raw: Mapping with optional ``settings`` and ``quaternions`` tables.
             None (an empty YAML document) yields the defaults.

    Returns:
        Settings instance.

    Raises:
        InvalidArgumentError: On unknown keys or malformed tables.
    """
    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise InvalidArgumentError(
            f"Configuration must be a mapping, got {type(raw).__name__}"
        )

    unknown = sorted(set(raw) - {'settings', 'quaternions'})
    if unknown:
        raise InvalidArgumentError(
            f"Unrecognized configuration section(s): {', '.join(map(str, unknown))}"
        )

    settings = Settings(**_parse_settings(_table(raw, 'settings')))

    for name, options in _table(raw, 'quaternions').items():
        if not isinstance(options, dict):
            raise InvalidArgumentError(
                f"Quaternion '{name}' must be a mapping of components"
            )
        settings.quaternions[str(name)] = Quaternion.new(options)
        logger.debug(f"Loaded named quaternion '{name}': {settings.quaternions[str(name)]}")

    return settings


def load_config(config_path: Union[str, Path, None] = None) -> Settings:
    """
    Load settings from a YAML file.

    Args:
        config_path: Path to the YAML file. When None, the defaults are
                     returned without touching the filesystem.

    Returns:
        Settings instance.

    Raises:
        InvalidArgumentError: If the file cannot be read, is not valid YAML,
            or holds malformed content.
    """
    if config_path is None:
        return Settings()

    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise InvalidArgumentError(
            f"Cannot read config file {config_path}: {exc.strerror or exc}"
        ) from exc
    except yaml.YAMLError as exc:
        raise InvalidArgumentError(
            f"Config file {config_path} is not valid YAML: {exc}"
        ) from exc
    settings = parse_config(raw)
    logger.info(f"Loaded {len(settings.quaternions)} named quaternion(s)")
    return settings


def configure_logging(level: Union[str, int] = logging.WARNING) -> None:
    """
    Configure root logging for command line use.

    The library modules only create loggers; handlers are installed here.
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise InvalidArgumentError(f"Unknown log level: {name}")
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
