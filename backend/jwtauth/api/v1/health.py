"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app

from jwtauth.api.deps import json_response, timing
from jwtauth.core.extensions import get_state
from jwtauth.infra.redis.redis_blacklist_store import RedisBlacklistStore

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and blacklist backend health information."""

    state = get_state()
    if isinstance(state.store, RedisBlacklistStore):
        store_status = "ok" if state.store.ping() else "fail"
        if store_status == "fail":
            current_app.logger.error("healthcheck.store_error")
    else:
        store_status = "memory"
    payload = {
        "status": "ok",
        "blacklist": store_status,
        "login_type": state.settings.login_type.value,
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload)
