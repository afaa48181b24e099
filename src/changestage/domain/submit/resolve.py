"""Resolve the single entity a modification entry addresses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from changestage.domain.ports.query import QueryRequest

from .errors import AmbiguousEntityError, EntityNotFoundError

if TYPE_CHECKING:
    from changestage.domain.ports.query import QueryService

    from .entry import ModificationEntry

log = logging.getLogger(__name__)


async def find_entity(entry: ModificationEntry, query_service: QueryService) -> object:
    """Query the entry's entity set and return the one matching entity.

    Zero matches raise :class:`EntityNotFoundError`. The filter includes the concurrency-check
    values, so a stale token is reported the same way as a missing row.
    """

    query = entry.apply_to(query_service.source(entry.entity_set_name))
    result = await query_service.query(QueryRequest(query))
    matches = list(result.results)

    if not matches:
        # TODO: tell a missing row apart from a failed concurrency check by re-querying on
        # the key values alone once callers can map the two cases to different responses.
        raise EntityNotFoundError(entry.entity_set_name, entry.filter_criteria)
    if len(matches) > 1:
        raise AmbiguousEntityError(entry.entity_set_name, entry.filter_criteria, len(matches))

    log.debug("Resolved %s entity for %s", entry.entity_set_name, entry.filter_criteria)
    return matches[0]
