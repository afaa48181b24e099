"""Environment variable lookups shared by the config modules."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def optional_env_var(name: str, *, environ: Mapping[str, str] | None = None) -> str | None:
    """Return the stripped value of ``name``, or ``None`` when it is unset or blank."""

    value = (os.environ if environ is None else environ).get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def require_env_vars(
    names: Sequence[str],
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    values = {name: optional_env_var(name, environ=environ) for name in names}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise MissingConfigurationError(missing)
    return {name: value for name, value in values.items() if value is not None}


def require_env_var(name: str, *, environ: Mapping[str, str] | None = None) -> str:
    return require_env_vars([name], environ=environ)[name]
