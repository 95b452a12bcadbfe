# Copyright (c) Microsoft. All rights reserved.

"""Environment variable managements."""

from __future__ import annotations

import os
from enum import Enum
from typing import overload

__all__ = [
    "CauseEnvVar",
    "resolve_bool_env_var",
    "resolve_str_env_var",
]


class CauseEnvVar(Enum):
    """Environment variables read by the cause translator."""

    XRAY_CAUSE_COPY_ATTRIBUTES = "XRAY_CAUSE_COPY_ATTRIBUTES"
    """If yes, [`make_cause`][xraycause.make_cause] always returns a fresh copy of the
    attribute map for failed spans. By default the input map is handed back as-is
    unless the legacy `http.status_text` attribute had to be removed."""

    XRAY_CAUSE_STRICT_GO_FRAMES = "XRAY_CAUSE_STRICT_GO_FRAMES"
    """If yes, Go frames whose location line cannot be parsed get an empty path and
    line 0 instead of inheriting the location of the previous frame."""

    XRAY_CAUSE_DEFAULT_LANGUAGE = "XRAY_CAUSE_DEFAULT_LANGUAGE"
    """Stack trace language assumed when the resource has no `telemetry.sdk.language`."""


_TRUTHY_VALUES = {"1", "true", "yes", "on"}
_FALSY_VALUES = {"0", "false", "no", "off"}


@overload
def resolve_bool_env_var(env_var: CauseEnvVar, override: bool, fallback: bool) -> bool: ...


@overload
def resolve_bool_env_var(env_var: CauseEnvVar, *, fallback: bool) -> bool: ...


@overload
def resolve_bool_env_var(
    env_var: CauseEnvVar, override: bool | None = None, fallback: bool | None = None
) -> bool | None: ...


def resolve_bool_env_var(
    env_var: CauseEnvVar, override: bool | None = None, fallback: bool | None = None
) -> bool | None:
    """Resolve a boolean environment variable.

    Args:
        env_var: The environment variable to resolve.
        override: Optional override supplied by the caller.
        fallback: Default value if the environment variable is not set.
    """

    if override is not None:
        return override

    env_value = os.getenv(env_var.value)
    if env_value is None:
        return fallback

    normalized = env_value.strip().lower()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False

    raise ValueError(f"{env_var.value} must be one of {_TRUTHY_VALUES} or {_FALSY_VALUES}")


@overload
def resolve_str_env_var(env_var: CauseEnvVar, override: str, fallback: str) -> str: ...


@overload
def resolve_str_env_var(env_var: CauseEnvVar, *, fallback: str) -> str: ...


@overload
def resolve_str_env_var(
    env_var: CauseEnvVar, override: str | None = None, fallback: str | None = None
) -> str | None: ...


def resolve_str_env_var(
    env_var: CauseEnvVar, override: str | None = None, fallback: str | None = None
) -> str | None:
    """Resolve a string environment variable.

    Args:
        env_var: The environment variable to resolve.
        override: Optional override supplied by the caller.
        fallback: Default value if the environment variable is not set.
    """
    if override is not None:
        return override

    env_value = os.getenv(env_var.value)
    if env_value is None:
        return fallback

    return env_value
