"""
Runtime configuration for the search bridge.

Settings are read from environment variables (optionally from a `.env` file):
- SEARCH_BRIDGE_ES_HOST: Elasticsearch host URL
- SEARCH_BRIDGE_INDEX: Default index to search
- SEARCH_BRIDGE_DOCUMENT_TYPE: Document type (ignored by typeless engines)
- SEARCH_BRIDGE_SCROLL_KEEP_ALIVE: Keep-alive used for scroll cursors
- SEARCH_BRIDGE_TIME_ZONE: Default time zone for date math
- SEARCH_BRIDGE_PAGE_SIZE: Default page size
- SEARCH_BRIDGE_REQUEST_TIMEOUT: Request timeout in seconds
- SEARCH_BRIDGE_VERIFY_CERTS: Whether TLS certificates are verified
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from search_bridge.errors import ConfigurationError

ENV_PREFIX = "SEARCH_BRIDGE_"


class SearchSettings(BaseModel):
    """Connection and compilation defaults."""

    es_host: str = "http://localhost:9200"
    index: Optional[str] = None
    document_type: str = "_doc"
    scroll_keep_alive: str = "1m"
    time_zone: str = "UTC"
    page_size: int = 50
    request_timeout: float = 30.0
    verify_certs: bool = True

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "SearchSettings":
        """
        Build settings from environment variables.

        Args:
            dotenv_path: Optional path to a `.env` file. When omitted, the
                         default lookup of python-dotenv is used.

        Returns:
            Settings with environment overrides applied

        Raises:
            ConfigurationError: If a numeric or boolean variable is invalid
        """
        load_dotenv(dotenv_path)

        values = {}
        for name in cls.model_fields:
            raw = _env(name.upper())
            if raw is not None:
                values[name] = raw

        try:
            return cls(**values)
        except ValidationError as exc:
            name = str(exc.errors()[0]["loc"][0])
            raise ConfigurationError(f"{ENV_PREFIX}{name.upper()}", values.get(name)) from exc


def _env(name: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return None
    return value.strip()
