"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

This test suite verifies the correctness, consistency, and safety of
Redis key generation supplied by RedisKeySchema.

Test coverage includes:

1. Redirect key generation
   - Ensures redirect_key() scopes keys by host, using '*' for global redirects.

2. Target index key generation

3. Default prefix behavior
   - Confirms keys are not prefixed when no prefix is provided.

4. Custom prefix behavior
   - Confirms keys are correctly prefixed when a valid prefix is provided.

5. Invalid prefix types
   - Ensures improper prefix types raise TypeError.
"""

import pytest

from redirecthandler.dao.redis.redis_key_schema import RedisKeySchema


HASH = 'e0b4d2f8ee9b0c2b3a4f5e6d7c8b9a01'


# -------------------------------
# 1. Redirect key generation
# -------------------------------


@pytest.mark.parametrize(
    'host, expected',
    [
        ('example.com', f'redirects:{HASH}:example.com'),
        ('  example.com ', f'redirects:{HASH}:example.com'),
        (None, f'redirects:{HASH}:*'),
        ('', f'redirects:{HASH}:*'),
        ('   ', f'redirects:{HASH}:*'),
    ],
)
def test_redirect_key(host, expected):
    """Ensure redirect_key() generates valid Redis keys."""
    keys = RedisKeySchema()
    assert keys.redirect_key(HASH, host) == expected


def test_redirect_key_defaults_to_global():
    assert RedisKeySchema().redirect_key(HASH) == f'redirects:{HASH}:*'


# -------------------------------
# 2. Target index key generation
# -------------------------------


@pytest.mark.parametrize(
    'host, expected',
    [
        ('example.com', f'redirects:targets:{HASH}:example.com'),
        (None, f'redirects:targets:{HASH}:*'),
    ],
)
def test_target_index_key(host, expected):
    keys = RedisKeySchema()
    assert keys.target_index_key(HASH, host) == expected


# -------------------------------
# 3. Default prefix behavior
# -------------------------------


def test_no_key_prefix_by_default():
    """Ensure keys are not prefixed when no prefix is provided."""
    keys = RedisKeySchema()
    assert keys.redirect_key(HASH, 'example.com') == f'redirects:{HASH}:example.com'
    assert keys.index_key() == 'redirects:index'


# -------------------------------
# 4. Custom prefix behavior
# -------------------------------


@pytest.mark.parametrize(
    'prefix, expected_redirect_key, expected_index_key',
    [
        ('testprefix', f'testprefix:redirects:{HASH}:*', 'testprefix:redirects:index'),
        ('redirecthandler:prod', f'redirecthandler:prod:redirects:{HASH}:*', 'redirecthandler:prod:redirects:index'),
        (None, f'redirects:{HASH}:*', 'redirects:index'),
    ],
)
def test_key_prefixing(prefix, expected_redirect_key, expected_index_key):
    """Ensure keys are correctly prefixed when a prefix is provided."""
    keys = RedisKeySchema(prefix=prefix)
    assert keys.redirect_key(HASH) == expected_redirect_key
    assert keys.index_key() == expected_index_key


# -------------------------------
# 5. Invalid prefix types
# -------------------------------


@pytest.mark.parametrize('prefix', [123, -1, 45.6, [], {}])
def test_invalid_prefix_type_raises_error(prefix):
    """Ensure invalid prefix types raise a TypeError."""
    with pytest.raises(TypeError):
        RedisKeySchema(prefix=prefix)
