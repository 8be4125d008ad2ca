"""Settings of the evasive request filter and the directives that set them."""

from __future__ import annotations

import re
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_HASH_TBL_SIZE = 3097
DEFAULT_PAGE_COUNT = 2
DEFAULT_SITE_COUNT = 50
DEFAULT_PAGE_INTERVAL = 1
DEFAULT_SITE_INTERVAL = 1
DEFAULT_BLOCKING_PERIOD = 10
DEFAULT_LOG_DIR = "/tmp"
DEFAULT_LOG_UNBLOCK = True

_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1

_STRTOL = re.compile(r"[ \t\n\r\f\v]*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_ATOI = re.compile(r"[ \t\n\r\f\v]*([+-]?[0-9]+)")

_NUMERIC = {
    "doshashtablesize": ("hash_table_size", DEFAULT_HASH_TBL_SIZE),
    "dospagecount": ("page_count", DEFAULT_PAGE_COUNT),
    "dossitecount": ("site_count", DEFAULT_SITE_COUNT),
    "dospageinterval": ("page_interval", DEFAULT_PAGE_INTERVAL),
    "dossiteinterval": ("site_interval", DEFAULT_SITE_INTERVAL),
    "dosblockingperiod": ("blocking_period", DEFAULT_BLOCKING_PERIOD),
}

_STRINGS = {
    "doslogdir": "log_dir",
    "dosemailnotify": "email_notify",
    "dossystemcommand": "system_command",
}

_MAPPING_NUMERIC = {
    "DOSHashTableSize": "hash_table_size",
    "DOSPageCount": "page_count",
    "DOSSiteCount": "site_count",
    "DOSPageInterval": "page_interval",
    "DOSSiteInterval": "site_interval",
    "DOSBlockingPeriod": "blocking_period",
}

_MAPPING_STRINGS = {
    "DOSLogDir": "log_dir",
    "DOSEmailNotify": "email_notify",
    "DOSSystemCommand": "system_command",
}


class ConfigError(ValueError):
    """A directive is unknown or has the wrong number of arguments."""


def parse_long(value: str) -> int:
    """Read a leading integer the way ``strtol`` with base 0 does.

    Hexadecimal (``0x``) and octal (leading ``0``) prefixes are honoured,
    trailing text is ignored, and text without digits yields 0.
    """
    match = _STRTOL.match(value)
    if match is None:
        return 0
    sign, body = match.groups()
    if body[:2].lower() == "0x":
        number = int(body, 16)
    elif body.startswith("0"):
        number = int(body, 8)
    else:
        number = int(body, 10)
    if sign == "-":
        number = -number
    return max(_LONG_MIN, min(_LONG_MAX, number))


def _atoi(value: str) -> int:
    match = _ATOI.match(value)
    return int(match.group(1)) if match else 0


@dataclass
class EvasiveConfig:
    """Thresholds, intervals and notification settings."""

    hash_table_size: int = DEFAULT_HASH_TBL_SIZE
    page_count: int = DEFAULT_PAGE_COUNT
    site_count: int = DEFAULT_SITE_COUNT
    page_interval: int = DEFAULT_PAGE_INTERVAL
    site_interval: int = DEFAULT_SITE_INTERVAL
    blocking_period: int = DEFAULT_BLOCKING_PERIOD
    log_dir: str = DEFAULT_LOG_DIR
    email_notify: str | None = None
    system_command: str | None = None
    log_unblock: bool = DEFAULT_LOG_UNBLOCK
    whitelist: list[str] = field(default_factory=list)

    def apply(self, directive: str, *args: str) -> None:
        """Apply one configuration directive; names are case-insensitive."""
        name = directive.lower()
        if name == "doswhitelist":
            if not args:
                raise ConfigError(f"{directive} takes at least one argument")
            self.whitelist.extend(args)
            return
        if name not in _NUMERIC and name not in _STRINGS and name != "doslogunblock":
            raise ConfigError(f"unknown directive {directive!r}")
        if len(args) != 1:
            raise ConfigError(f"{directive} takes one argument, got {len(args)}")
        (value,) = args
        if name in _NUMERIC:
            attribute, default = _NUMERIC[name]
            number = parse_long(value)
            setattr(self, attribute, number if number > 0 else default)
        elif name in _STRINGS:
            if value:
                setattr(self, _STRINGS[name], value)
        else:
            self.log_unblock = value.lower() == "on" or value == "1"

    @classmethod
    def from_directives(cls, text: str) -> EvasiveConfig:
        """Build a configuration from directive lines such as ``DOSPageCount 5``.

        Blank lines, ``#`` comments and section tags like ``<IfModule ...>``
        are skipped.
        """
        config = cls()
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith(("#", "<")):
                continue
            try:
                words = shlex.split(line)
                config.apply(words[0], *words[1:])
            except ValueError as exc:
                raise ConfigError(f"line {lineno}: {exc}") from exc
        return config

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> EvasiveConfig:
        """Build a configuration from named string parameters.

        Numeric parameters are taken when they read as a non-zero integer,
        text parameters whenever present, and ``DOSWhitelist`` is a
        comma-separated list of entries.
        """
        config = cls()
        for key, attribute in _MAPPING_NUMERIC.items():
            raw = mapping.get(key)
            if raw is not None:
                number = _atoi(raw)
                if number != 0:
                    setattr(config, attribute, number)
        for key, attribute in _MAPPING_STRINGS.items():
            raw = mapping.get(key)
            if raw is not None:
                setattr(config, attribute, raw)
        raw = mapping.get("DOSWhitelist")
        if raw is not None:
            config.whitelist.extend(raw.split(","))
        return config