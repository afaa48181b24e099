"""Ports consumed by the change-application engine."""

from __future__ import annotations

from .persistence import EntityCollection, PersistenceContext, PropertyEntry, TrackedEntity
from .query import Queryable, QueryRequest, QueryResult, QueryService
from .unit_of_work import RepositoryCollection, SubmitResources, SubmitUnitOfWork, UnitOfWork

__all__ = [
    "EntityCollection",
    "PersistenceContext",
    "PropertyEntry",
    "QueryRequest",
    "QueryResult",
    "QueryService",
    "Queryable",
    "RepositoryCollection",
    "SubmitResources",
    "SubmitUnitOfWork",
    "TrackedEntity",
    "UnitOfWork",
]
