"""Global extension instances and initialization helpers."""

from __future__ import annotations

from dataclasses import dataclass

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from jwtauth.infra.flask.request_token_source import FlaskRequestTokenSource
from jwtauth.infra.jwt.pyjwt_signing_strategy import PyJWTSigningStrategy
from jwtauth.infra.memory.in_memory_blacklist_store import InMemoryBlacklistStore
from jwtauth.infra.redis.redis_blacklist_store import RedisBlacklistStore
from jwtauth.services._shared.ports.blacklist_store import BlacklistStore
from jwtauth.services.tokens import Blacklist, JWTSettings, TokenService

EXTENSION_KEY = "jwtauth"

redis_client: redis.Redis | None = None


@dataclass(frozen=True, slots=True)
class JWTAuthState:
    """Objects wired once per application and shared by every request."""

    settings: JWTSettings
    store: BlacklistStore
    blacklist: Blacklist
    tokens: TokenService


def _build_store(app: Flask) -> BlacklistStore:
    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return InMemoryBlacklistStore()

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client
    return RedisBlacklistStore(r=redis_client)


def init_app(app: Flask, *, store: BlacklistStore | None = None) -> JWTAuthState:
    """Build the token service from ``app.config`` and register it.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``JWT_*`` and ``REDIS_URL`` settings are read once.
    store: BlacklistStore, optional
        Pre-built backend (tests pass a FakeRedis-backed store); when omitted
        Redis is used if ``REDIS_URL`` is set, the in-memory store otherwise.

    Returns
    -------
    JWTAuthState
        The wired objects, also stored in ``app.extensions["jwtauth"]``.
    """
    settings = JWTSettings.from_mapping(app.config)
    backend = store if store is not None else _build_store(app)
    blacklist = Blacklist(backend, settings)
    state = JWTAuthState(
        settings=settings,
        store=backend,
        blacklist=blacklist,
        tokens=TokenService(
            settings=settings,
            blacklist=blacklist,
            signer=PyJWTSigningStrategy(),
            token_source=FlaskRequestTokenSource(),
        ),
    )
    app.extensions[EXTENSION_KEY] = state
    return state


def get_state(app: Flask | None = None) -> JWTAuthState:
    """Return the wired state of ``app`` (default: the current app)."""
    target = app or current_app
    try:
        return target.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("jwtauth is not initialized. Call init_app() first.") from None


def get_token_service() -> TokenService:
    """Return the :class:`TokenService` bound to the current app."""
    return get_state().tokens

