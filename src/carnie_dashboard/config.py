"""Runtime settings.

Values come from three places, later ones winning: the defaults below,
``CARNIE_DASHBOARD_*`` environment variables, then command-line flags.
"""

from dataclasses import dataclass, replace
import os
from typing import Any, Dict, Mapping, Optional

ENV_PREFIX = "CARNIE_DASHBOARD_"
DEFAULT_REFRESH_SECONDS = 6.0
DEFAULT_LIMIT = 200
DEFAULT_LOG_FILE = "~/.local/state/carnie-dashboard/dashboard.log"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DashboardConfig:
    refresh_seconds: float = DEFAULT_REFRESH_SECONDS
    limit: int = DEFAULT_LIMIT
    issues_file: Optional[str] = None
    start_dir: Optional[str] = None
    bd_binary: str = "bd"
    log_file: str = DEFAULT_LOG_FILE
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_float(name, value):
    # type: (str, Any) -> float
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ConfigError("%s must be a number, got %r" % (name, value))
    if parsed < 0:
        raise ConfigError("%s must not be negative, got %r" % (name, value))
    return parsed


def _parse_int(name, value):
    # type: (str, Any) -> int
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ConfigError("%s must be an integer, got %r" % (name, value))
    if parsed < 0:
        raise ConfigError("%s must not be negative, got %r" % (name, value))
    return parsed


def _parse_level(name, value):
    # type: (str, Any) -> str
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            "%s must be one of %s, got %r" % (name, ", ".join(LOG_LEVELS), value)
        )
    return level


_FIELDS = {
    # field: (environment suffix, flag, parser)
    "refresh_seconds": ("REFRESH", "--refresh", _parse_float),
    "limit": ("LIMIT", "--limit", _parse_int),
    "issues_file": ("ISSUES_FILE", "--issues-file", None),
    "start_dir": ("DIR", "--dir", None),
    "bd_binary": ("BD", "--bd", None),
    "log_file": ("LOG_FILE", "--log-file", None),
    "log_level": ("LOG_LEVEL", "--log-level", _parse_level),
}


def _coerce(field_name, label, value):
    # type: (str, str, Any) -> Any
    parser = _FIELDS[field_name][2]
    if parser is None:
        return str(value)
    return parser(label, value)


def load_config(overrides=None, environ=None):
    # type: (Optional[Mapping[str, Any]], Optional[Mapping[str, str]]) -> DashboardConfig
    """Build a config from the environment plus explicit overrides.

    ``overrides`` maps field names to values; ``None`` means "not given" so
    argparse namespaces can be passed through ``vars()`` unchanged.
    """
    environ = os.environ if environ is None else environ
    values = {}  # type: Dict[str, Any]

    for field_name, (suffix, _, _) in _FIELDS.items():
        key = ENV_PREFIX + suffix
        raw = environ.get(key)
        if raw is None or raw == "":
            continue
        values[field_name] = _coerce(field_name, key, raw)

    for field_name, value in (overrides or {}).items():
        if field_name not in _FIELDS or value is None:
            continue
        values[field_name] = _coerce(field_name, _FIELDS[field_name][1], value)

    return replace(DashboardConfig(), **values)
