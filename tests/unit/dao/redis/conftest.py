from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
import redis

from redirecthandler.models import RedirectModel


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis pipeline-compatible client."""
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.exists.return_value = False
    client.hexists.return_value = False
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    return client


@pytest.fixture
def created_at() -> datetime:
    return datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def redirect(created_at) -> RedirectModel:
    """Unpersisted redirect: /old -> /new (301) on example.com"""
    return RedirectModel('/old', '/new', 301, 'example.com', creator='alice', clock=lambda: created_at)
