"""
Configuration for the repository layer.

Settings can be built directly or loaded from the environment (and a ``.env``
file) with ``ESSettings.from_env()``.
"""

import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from es_query_builder.core.models import Selector, selector_name

ENV_PREFIX = "ELASTICSEARCH_"
DEFAULT_URL = "http://localhost:9200"


class RetrySettings(BaseModel):
    """Exponential backoff for retried writes (milliseconds)."""

    initial_ms: int = 1
    max_retries: int = 3
    jitter_ms: int = 4


class ESSettings(BaseModel):
    """Connection and behaviour settings for ``Repo``."""

    url: str = DEFAULT_URL
    urls: Dict[str, str] = Field(default_factory=dict)  # selector -> url
    log_level: str = "DEBUG"
    retry: RetrySettings = Field(default_factory=RetrySettings)
    chunk_size: int = 2000
    parallelism: int = 10
    request_timeout: Optional[float] = None

    def url_for(self, selector: Selector) -> str:
        """
        Get the cluster url serving a selector.

        Args:
            selector: Index selector

        Returns:
            The selector's own url if configured, else the default url
        """
        return self.urls.get(selector_name(selector), self.url)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ESSettings":
        """
        Load settings from environment variables.

        Reads ``ELASTICSEARCH_URL``, ``ELASTICSEARCH_URL_<SELECTOR>`` (one per
        selector, e.g. ``ELASTICSEARCH_URL_ARCHIVE``), ``ELASTICSEARCH_LOG_LEVEL``,
        ``ELASTICSEARCH_RETRY_INITIAL_MS``, ``ELASTICSEARCH_RETRY_MAX``,
        ``ELASTICSEARCH_RETRY_JITTER_MS``, ``ELASTICSEARCH_CHUNK_SIZE``,
        ``ELASTICSEARCH_PARALLELISM`` and ``ELASTICSEARCH_TIMEOUT``.

        Args:
            env_file: Optional path of a .env file to load first

        Returns:
            Settings with defaults for anything unset
        """
        load_dotenv(env_file)

        url_prefix = f"{ENV_PREFIX}URL_"
        urls = {
            key[len(url_prefix):].lower(): value
            for key, value in os.environ.items()
            if key.startswith(url_prefix) and value
        }

        defaults = RetrySettings()
        retry = RetrySettings(
            initial_ms=int(os.getenv(f"{ENV_PREFIX}RETRY_INITIAL_MS", defaults.initial_ms)),
            max_retries=int(os.getenv(f"{ENV_PREFIX}RETRY_MAX", defaults.max_retries)),
            jitter_ms=int(os.getenv(f"{ENV_PREFIX}RETRY_JITTER_MS", defaults.jitter_ms)),
        )

        timeout = os.getenv(f"{ENV_PREFIX}TIMEOUT")

        return cls(
            url=os.getenv(f"{ENV_PREFIX}URL", DEFAULT_URL),
            urls=urls,
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "DEBUG"),
            retry=retry,
            chunk_size=int(os.getenv(f"{ENV_PREFIX}CHUNK_SIZE", 2000)),
            parallelism=int(os.getenv(f"{ENV_PREFIX}PARALLELISM", 10)),
            request_timeout=float(timeout) if timeout else None,
        )
