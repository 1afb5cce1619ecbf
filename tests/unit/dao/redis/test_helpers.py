"""Unit tests for the Redis DAO helpers.

Test coverage includes:
    1. Connection error handling
       - Ensures the wrapped method executes and returns its result.
       - Ensures Redis connection errors are converted into DataStoreError.
       - Confirms functools.wraps preserves the original function's name and docstring.
       - Ensures connection_label() renders host:port/db.
    2. Redirect (de)serialization
       - Ensures None columns are stored as empty strings and read back as None.
       - Ensures content serialization leaves hit telemetry out.
    3. Partial hashes
    4. Path length checks
"""

from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
import redis

from redirecthandler.models import RedirectModel, RedirectType
from redirecthandler.exceptions import InvalidUriPathError
from redirecthandler.dao.exceptions import DataStoreError
from redirecthandler.dao.redis.helpers import (
    connection_label,
    handle_redis_connection_error,
    serialize_redirect,
    serialize_redirect_content,
    deserialize_redirect,
    is_complete,
    check_uri_path_lengths,
)


CREATED_AT = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


# -------------------------------
# 1. Connection error handling
# -------------------------------


def test_decorator_allows_normal_execution():
    """Ensure the wrapped function executes normally when no error occurs."""

    class DummyDAO:
        def __init__(self):
            self.redis = MagicMock()

        @handle_redis_connection_error
        def ping(self):
            return 'OK'

    dao = DummyDAO()
    assert dao.ping() == 'OK'


def test_decorator_transforms_redis_connection_error():
    """Ensure Redis ConnectionError is caught and re-raised as DataStoreError."""

    class DummyDAO:
        def __init__(self):
            self.redis = MagicMock()
            self.redis.connection_pool.connection_kwargs = {
                'host': 'localhost',
                'port': 6379,
                'db': 0,
            }

        @handle_redis_connection_error
        def fail(self):
            raise redis.exceptions.ConnectionError('Cannot connect')

    dao = DummyDAO()

    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0.") as exc_info:
        dao.fail()

    assert isinstance(exc_info.value.__cause__, redis.exceptions.ConnectionError)


def test_decorator_lets_other_redis_errors_through():
    class DummyDAO:
        def __init__(self):
            self.redis = MagicMock()

        @handle_redis_connection_error
        def fail(self):
            raise redis.exceptions.ResponseError('WRONGTYPE')

    with pytest.raises(redis.exceptions.ResponseError):
        DummyDAO().fail()


def test_decorator_preserves_function_metadata():
    """Ensure function name and docstring are preserved via functools.wraps."""

    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__


def test_connection_label():
    client = MagicMock()
    client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}

    assert connection_label(client) == '203.0.113.1:18000/5'


# -------------------------------
# 2. Redirect (de)serialization
# -------------------------------


def test_serialize_redirect_with_empty_columns():
    """Ensure None columns become empty strings."""
    redirect = RedirectModel('old', 'new', 301, clock=lambda: CREATED_AT)

    data = serialize_redirect(redirect)

    assert data['host'] == ''
    assert data['creator'] == ''
    assert data['comment'] == ''
    assert data['last_hit'] == ''
    assert data['start_date_time'] == ''
    assert data['end_date_time'] == ''
    assert data['version'] == '0'
    assert all(isinstance(value, str) for value in data.values())


def test_deserialize_redirect():
    """Ensure every column survives a write to and a read from Redis."""
    redirect = RedirectModel(
        '/campaign/',
        '/landing/',
        302,
        'example.com',
        creator='alice',
        comment='Autumn campaign',
        type=RedirectType.MANUAL,
        start_date_time=CREATED_AT,
        end_date_time=CREATED_AT + timedelta(days=30),
        clock=lambda: CREATED_AT,
    )
    redirect.increment_hit_counter(clock=lambda: CREATED_AT + timedelta(hours=2))
    redirect.set_status_code(307, clock=lambda: CREATED_AT + timedelta(hours=1))
    redirect.version = 3

    restored = deserialize_redirect(serialize_redirect(redirect))

    assert restored.identity == redirect.identity
    assert restored.target_uri_path_hash == redirect.target_uri_path_hash
    assert restored.status_code == 307
    assert restored.creator == 'alice'
    assert restored.comment == 'Autumn campaign'
    assert restored.type is RedirectType.MANUAL
    assert restored.start_date_time == redirect.start_date_time
    assert restored.end_date_time == redirect.end_date_time
    assert restored.hit_counter == 1
    assert restored.last_hit == CREATED_AT + timedelta(hours=2)
    assert restored.creation_date_time == CREATED_AT
    assert restored.last_modification_date_time == CREATED_AT + timedelta(hours=1)
    assert restored.version == 3


def test_deserialize_redirect_with_empty_columns():
    data = serialize_redirect(RedirectModel('old', 'new', 301, clock=lambda: CREATED_AT))

    redirect = deserialize_redirect(data)

    assert redirect.host is None
    assert redirect.creator is None
    assert redirect.comment is None
    assert redirect.last_hit is None
    assert redirect.start_date_time is None
    assert redirect.end_date_time is None


def test_deserialize_redirect_after_hits_on_stored_hash():
    """HINCRBY updates the counter in place; the stored counter wins."""
    data = serialize_redirect(RedirectModel('old', 'new', 301, clock=lambda: CREATED_AT))
    data['hit_counter'] = '42'

    assert deserialize_redirect(data).hit_counter == 42


def test_deserialize_redirect_with_unknown_type():
    data = serialize_redirect(RedirectModel('old', 'new', 301, clock=lambda: CREATED_AT))
    data['type'] = 'legacy'

    assert deserialize_redirect(data).type is RedirectType.GENERATED


def test_serialize_redirect_content():
    """Ensure an update never writes hit telemetry or identity columns."""
    redirect = RedirectModel('old', 'new', 301, clock=lambda: CREATED_AT)

    data = serialize_redirect_content(redirect)

    assert set(data) == {'target_uri_path', 'target_uri_path_hash', 'status_code', 'last_modification_date_time'}


# -------------------------------
# 3. Partial hashes
# -------------------------------


@pytest.mark.parametrize(
    'data, expected',
    [
        (None, False),
        ({}, False),
        ({'hit_counter': '1', 'last_hit': '2025-10-15T12:00:00+00:00'}, False),
        ({'source_uri_path': 'old'}, True),
    ],
)
def test_is_complete(data, expected):
    assert is_complete(data) is expected


# -------------------------------
# 4. Path length checks
# -------------------------------


def test_check_uri_path_lengths_at_limits():
    check_uri_path_lengths(RedirectModel('a' * 4000, 'b' * 500, 301, clock=lambda: CREATED_AT))


def test_check_uri_path_lengths_ignores_stripped_slashes():
    check_uri_path_lengths(RedirectModel('/' + 'a' * 4000 + '/', '/' + 'b' * 500 + '/', 301, clock=lambda: CREATED_AT))


def test_check_source_uri_path_length():
    with pytest.raises(InvalidUriPathError, match='Source URI path exceeds 4000 characters'):
        check_uri_path_lengths(RedirectModel('a' * 4001, 'new', 301, clock=lambda: CREATED_AT))


def test_check_target_uri_path_length():
    with pytest.raises(InvalidUriPathError, match='Target URI path exceeds 500 characters'):
        check_uri_path_lengths(RedirectModel('old', 'b' * 501, 301, clock=lambda: CREATED_AT))
