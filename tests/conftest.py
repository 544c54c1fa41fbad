from __future__ import annotations

import pytest

from core.domain.entities.graphql_operation_entity import GraphQLOperationEntity, OperationKind
from core.domain.entities.transport_config_entity import TransportConfigEntity
from tests.helpers import GRAPHQL_URL, HERO_HASH


@pytest.fixture
def hero_query() -> GraphQLOperationEntity:
    return GraphQLOperationEntity(
        kind=OperationKind.QUERY,
        query_document="query Hero($episode: Episode) { hero(episode: $episode) { ...HeroDetails } }"
        "fragment HeroDetails on Character { name }",
        variables={"episode": "JEDI", "since": None},
        operation_identifier=HERO_HASH,
        operation_name="Hero",
    )


@pytest.fixture
def create_review_mutation() -> GraphQLOperationEntity:
    return GraphQLOperationEntity(
        kind=OperationKind.MUTATION,
        query_document="mutation CreateReview($stars: Int!) { createReview(stars: $stars) { stars } }",
        variables={"stars": 5},
        operation_identifier="a" * 64,
        operation_name="CreateReview",
    )


@pytest.fixture
def apq_post_config() -> TransportConfigEntity:
    return TransportConfigEntity(url=GRAPHQL_URL, enable_auto_persisted_queries=True)


@pytest.fixture
def apq_get_config() -> TransportConfigEntity:
    return TransportConfigEntity(
        url=GRAPHQL_URL,
        enable_auto_persisted_queries=True,
        use_get_for_persisted_queries=True,
    )


@pytest.fixture
def plain_config() -> TransportConfigEntity:
    return TransportConfigEntity(url=GRAPHQL_URL)
