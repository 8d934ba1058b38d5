from unittest.mock import MagicMock

import pytest

from es_query_builder import ESSettings, Repo, RetrySettings


@pytest.fixture
def settings():
    return ESSettings(retry=RetrySettings(initial_ms=0, max_retries=2, jitter_ms=0))


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def repo(settings, client):
    return Repo(settings=settings, client_factory=lambda url: client)
