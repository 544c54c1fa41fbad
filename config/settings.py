"""
Application configuration for the GraphQL APQ transport.

Centralizes environment variables using python-dotenv.

Note:
- Only this module reads the environment; the transport itself receives a
  TransportConfigEntity and never looks at os.environ.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from core.domain.entities.transport_config_entity import HttpClientConfigEntity, TransportConfigEntity

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Configuration settings for the GraphQL transport.
    """

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # GraphQL endpoint
    GRAPHQL_ENDPOINT_URL: str = os.getenv("GRAPHQL_ENDPOINT_URL", "http://localhost:4000/graphql")

    # HTTP client
    GRAPHQL_TIMEOUT_S: float = float(os.getenv("GRAPHQL_TIMEOUT_S", "20"))
    GRAPHQL_CONNECT_TIMEOUT_S: float = float(os.getenv("GRAPHQL_CONNECT_TIMEOUT_S", "5"))

    # Automatic Persisted Queries
    GRAPHQL_ENABLE_APQ: bool = _env_bool("GRAPHQL_ENABLE_APQ", "false")
    GRAPHQL_APQ_USE_GET: bool = _env_bool("GRAPHQL_APQ_USE_GET", "false")


settings = Settings()


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_transport_config(cfg: Settings = settings) -> TransportConfigEntity:
    """
    Build the transport configuration from environment settings.
    """
    return TransportConfigEntity(
        url=cfg.GRAPHQL_ENDPOINT_URL,
        http=HttpClientConfigEntity(
            timeout_s=cfg.GRAPHQL_TIMEOUT_S,
            connect_timeout_s=cfg.GRAPHQL_CONNECT_TIMEOUT_S,
        ),
        enable_auto_persisted_queries=cfg.GRAPHQL_ENABLE_APQ,
        use_get_for_persisted_queries=cfg.GRAPHQL_APQ_USE_GET,
    )
