from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from core.domain.entities.base_entity import DomainEntity
from core.domain.entities.graphql_operation_entity import GraphQLOperationEntity


class GraphQLResponseEntity(DomainEntity):
    """
    A structured GraphQL response for a given operation.

    The body is passed through opaquely; GraphQL-level `errors` are kept as returned.
    """

    operation: GraphQLOperationEntity
    body: Dict[str, Any] = Field(default_factory=dict)

    @property
    def data(self) -> Optional[Dict[str, Any]]:
        data = self.body.get("data")
        return data if isinstance(data, dict) else None

    @property
    def errors(self) -> List[Dict[str, Any]]:
        errors = self.body.get("errors")
        if not isinstance(errors, list):
            return []
        return [e for e in errors if isinstance(e, dict)]
