from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from core.domain.entities.base_entity import DomainEntity
from core.services.query_document_service import QueryDocumentService


class OperationKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"


class GraphQLOperationEntity(DomainEntity):
    """
    A GraphQL operation as handed to the transport.

    The transport only reads it:
      - kind decides whether persisted queries may be used (queries only)
      - query_document is sent when the full text is needed
      - variables with None values are dropped before serialization
      - operation_identifier is the sha256 hash sent in persisted-query mode

    Example:
      GraphQLOperationEntity(
          kind=OperationKind.QUERY,
          query_document="query Pool($id: ID!) { pool(id: $id) { id } }",
          variables={"id": "0x..."},
          operation_identifier="b5f0...",
      )
    """

    kind: OperationKind = OperationKind.QUERY
    query_document: str
    variables: Optional[Dict[str, Any]] = None
    operation_identifier: Optional[str] = None

    # Informational only (logging)
    operation_name: Optional[str] = None

    @property
    def is_query(self) -> bool:
        return self.kind == OperationKind.QUERY

    def with_computed_identifier(self) -> "GraphQLOperationEntity":
        """
        Return a copy carrying the sha256 identifier of the normalized query_document.

        An explicitly provided identifier is kept as-is.
        """
        if self.operation_identifier:
            return self
        return self.model_copy(
            update={"operation_identifier": QueryDocumentService.compute_identifier(self.query_document)}
        )
