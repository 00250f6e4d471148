#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Validation helpers for the environment configuration.

Each helper inspects the raw key/value mapping read from the configuration
source and either returns a typed value or raises the matching ConfigError.
The loader calls them in a fixed order so the first violation wins:

- required keys for the role (declared order)
- value syntax (flags, ports, enumerations, identifiers, schedules)
- keys required only by enabled components
- credentials still holding their placeholder value
"""

import re
from typing import Iterable, Mapping, Optional, Tuple

from socbox.socbox_utils import str2bool
from socbox.installer.configs.constants.constants import CREDENTIAL_PLACEHOLDERS
from socbox.installer.utils.exceptions import (
    InvalidSettingValueError,
    MissingRequiredKeyError,
    UnsafeDefaultValueError,
)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_]+$")
_CRON_FIELD_RE = re.compile(r"^[0-9A-Za-z*/,\-]+$")
_CRON_MACROS = ("@reboot", "@yearly", "@annually", "@monthly", "@weekly", "@daily", "@midnight", "@hourly")


def _is_non_empty_str(value) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def get_str(values: Mapping[str, str], key: str, default: str = "") -> str:
    value = values.get(key)
    return value.strip() if _is_non_empty_str(value) else default


def check_required_keys(values: Mapping[str, str], keys: Iterable[str]) -> None:
    """Raise MissingRequiredKeyError for the first absent or empty key."""
    for key in keys:
        if not _is_non_empty_str(values.get(key)):
            raise MissingRequiredKeyError(key)


def parse_flag(values: Mapping[str, str], key: str) -> bool:
    """true/false (any case) or empty; anything else is rejected."""
    raw = values.get(key) or ""
    try:
        return str2bool(raw)
    except ValueError:
        raise InvalidSettingValueError(key, raw, "expected true or false") from None


def parse_port(values: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = get_str(values, key)
    if not raw:
        return default
    try:
        port = int(raw)
    except ValueError:
        raise InvalidSettingValueError(key, raw, "expected a port number") from None
    if not 1 <= port <= 65535:
        raise InvalidSettingValueError(key, raw, "port must be between 1 and 65535")
    return port


def parse_choice(values: Mapping[str, str], key: str, parser, default):
    """Parse an enumerated value with ``parser`` (an Enum or Enum.parse)."""
    raw = get_str(values, key)
    if not raw:
        return default
    try:
        return parser(raw.lower())
    except ValueError as e:
        raise InvalidSettingValueError(key, raw, str(e) or "unsupported value") from None


def parse_identifier(values: Mapping[str, str], key: str, default: str) -> str:
    """Database and user names are interpolated into SQL, so keep them plain."""
    raw = get_str(values, key, default)
    if not _IDENTIFIER_RE.match(raw):
        raise InvalidSettingValueError(key, raw, "only letters, digits and underscores are allowed")
    return raw


def parse_binary_switch(values: Mapping[str, str], key: str) -> bool:
    raw = get_str(values, key, "0")
    if raw not in ("0", "1"):
        raise InvalidSettingValueError(key, raw, "expected 0 or 1")
    return raw == "1"


def parse_path_list(values: Mapping[str, str], key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = get_str(values, key)
    if not raw:
        return tuple(default)
    paths = tuple(p.strip() for p in raw.split(",") if p.strip())
    for path in paths:
        if not path.startswith("/"):
            raise InvalidSettingValueError(key, raw, f"'{path}' is not an absolute path")
    return paths


def parse_cron_schedule(values: Mapping[str, str], key: str, default: str) -> str:
    raw = get_str(values, key, default)
    fields = raw.split()
    if len(fields) == 1 and fields[0] in _CRON_MACROS:
        return raw
    if len(fields) != 5 or not all(_CRON_FIELD_RE.match(f) for f in fields):
        raise InvalidSettingValueError(key, raw, "expected a five-field cron expression")
    return raw


def check_placeholder_credentials(values: Mapping[str, str], keys: Iterable[str]) -> None:
    """Raise UnsafeDefaultValueError for the first consumed credential left at its placeholder."""
    for key in keys:
        placeholder = CREDENTIAL_PLACEHOLDERS.get(key)
        if placeholder and get_str(values, key) == placeholder:
            raise UnsafeDefaultValueError(key)
