"""Configuration for locating the entity schema change sets are applied against."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import import_module
from typing import Final

from changestage.domain.submit.schema import EntitySchema

from .env import require_env_var
from .errors import SchemaReferenceError

log = logging.getLogger(__name__)

SCHEMA_ENV_VAR: Final[str] = "CHANGESTAGE_SCHEMA"


@dataclass(frozen=True, slots=True)
class SubmitConfig:
    """Where to import the entity schema from, as ``module:attribute``."""

    schema_ref: str


def get_submit_config(*, schema_ref: str | None = None) -> SubmitConfig:
    explicit = schema_ref.strip() if schema_ref else ""
    return SubmitConfig(schema_ref=explicit or require_env_var(SCHEMA_ENV_VAR))


def load_schema(schema_ref: str) -> EntitySchema:
    """Import an :class:`EntitySchema` or a zero-argument factory returning one."""

    module_name, sep, attribute = schema_ref.partition(":")
    if not sep or not module_name or not attribute:
        raise SchemaReferenceError(schema_ref, "expected 'module:attribute'")

    try:
        module = import_module(module_name)
    except ImportError as exc:
        raise SchemaReferenceError(schema_ref, f"cannot import {module_name!r}") from exc
    try:
        target = getattr(module, attribute)
    except AttributeError as exc:
        raise SchemaReferenceError(schema_ref, f"no attribute {attribute!r}") from exc

    if not isinstance(target, EntitySchema) and callable(target):
        target = target()
    if not isinstance(target, EntitySchema):
        raise SchemaReferenceError(schema_ref, "not an EntitySchema")

    log.debug("Loaded schema %s with entity sets %s", schema_ref, target.entity_set_names)
    return target
