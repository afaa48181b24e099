"""Pydantic schema of JSON change-set documents."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, JsonValue

from changestage.domain.submit.entry import OperationKind

log = logging.getLogger(__name__)


class ChangeSetBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Change set document %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class EntryDocument(ChangeSetBaseModel):
    entity_set: str = Field(min_length=1)
    operation: OperationKind
    key: dict[str, JsonValue] = Field(default_factory=dict)
    values: dict[str, JsonValue] = Field(default_factory=dict)
    original_values: dict[str, JsonValue] = Field(default_factory=dict)


class ChangeSetDocument(ChangeSetBaseModel):
    entries: list[EntryDocument] = Field(default_factory=list)
