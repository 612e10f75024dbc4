"""Pytest fixtures wiring the token service to in-memory and FakeRedis doubles.

Unit tests build :class:`TokenService` instances through ``make_service`` and
present tokens through a :class:`StaticTokenSource`. API tests use the Flask
application factory with a FakeRedis-backed blacklist.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import fakeredis
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from flask import Flask
from freezegun import freeze_time

from jwtauth.core.config import TestingConfig
from jwtauth.core.extensions import get_state
from jwtauth.factory import create_app
from jwtauth.infra.jwt.pyjwt_signing_strategy import PyJWTSigningStrategy
from jwtauth.infra.memory.in_memory_blacklist_store import InMemoryBlacklistStore
from jwtauth.infra.redis.redis_blacklist_store import RedisBlacklistStore
from jwtauth.services._shared.ports import StaticTokenSource
from jwtauth.services.tokens import Blacklist, JWTSettings, TokenService

FROZEN_AT = "2024-01-01 00:00:00"
UNIT_SECRET = "unit-test-secret-" * 4


def _pem_pair(private_key: Any) -> dict[str, str]:
    """Serialize a private key and its public half as PEM strings."""
    private = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return {"private": private, "public": public}


@pytest.fixture(scope="session")
def rsa_keys() -> dict[str, str]:
    """RSA-2048 key pair usable with RS256/RS384/RS512."""
    return _pem_pair(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def ec_keys() -> dict[str, dict[str, str]]:
    """EC key pairs keyed by algorithm, each on the curve the algorithm requires."""
    curves = {"ES256": ec.SECP256R1(), "ES384": ec.SECP384R1(), "ES512": ec.SECP521R1()}
    return {alg: _pem_pair(ec.generate_private_key(curve)) for alg, curve in curves.items()}


@pytest.fixture
def store() -> InMemoryBlacklistStore:
    """Fresh process-local blacklist backend."""
    return InMemoryBlacklistStore()


@pytest.fixture
def token_source() -> StaticTokenSource:
    """Mutable stand-in for the request ``Authorization`` header."""
    return StaticTokenSource()


@pytest.fixture
def make_service(store, token_source) -> Callable[..., TokenService]:
    """Factory building a :class:`TokenService` over ``store``/``token_source``.

    Keyword arguments override :class:`JWTSettings` fields; defaults are an
    HS256 secret and a one-hour ttl.
    """

    def _factory(**overrides: Any) -> TokenService:
        params: dict[str, Any] = {"secret": UNIT_SECRET, "ttl": 3600}
        params.update(overrides)
        settings = JWTSettings(**params)
        return TokenService(
            settings=settings,
            blacklist=Blacklist(store, settings),
            signer=PyJWTSigningStrategy(),
            token_source=token_source,
        )

    return _factory


@pytest.fixture
def frozen() -> Iterator[Any]:
    """Freeze the clock at :data:`FROZEN_AT`; tests advance it with ``tick``."""
    with freeze_time(FROZEN_AT) as frozen_time:
        yield frozen_time


# -- Flask application ------------------------------------------------------ #


class APITestConfig(TestingConfig):
    """Testing configuration: HS256, one-hour tokens, no real Redis."""

    JWT_SECRET = "api-test-secret-" * 4
    JWT_TTL = 3600
    REDIS_URL = None


@pytest.fixture
def api_config() -> type[APITestConfig]:
    """Configuration class used by the Flask fixtures."""
    return APITestConfig


@pytest.fixture
def fake_redis() -> fakeredis.FakeRedis:
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def app(api_config, fake_redis) -> Flask:
    """Create a Flask application whose blacklist lives in FakeRedis."""
    application = create_app(api_config, store=RedisBlacklistStore(r=fake_redis))
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture
def client(app: Flask):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def tokens(app: Flask) -> TokenService:
    """The token service wired into ``app``."""
    return get_state(app).tokens


@pytest.fixture
def auth_header(tokens: TokenService) -> dict[str, str]:
    """Authorization header carrying a freshly issued token."""
    token = tokens.issue({"uid": 7, "role": "member"})
    return {"Authorization": f"Bearer {token.serialize()}"}
