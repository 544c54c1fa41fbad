# core/domain/entities/base_entity.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DomainEntity(BaseModel):
    """
    Base entity for values exchanged between the transport layers.

    - Immutable once built: entities are shared read-only across concurrent sends.
    - Allows arbitrary types so httpx objects can be carried as-is.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
    )
