"""Shared pydantic base for boundary models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BoundaryModel(BaseModel):
    """Model that accepts both camelCase and snake_case keys.

    The extraction and clustering collaborators emit camelCase JSON
    (``emailId``, ``bidDueDates``); Python callers use field names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
