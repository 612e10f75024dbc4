"""Immutable JWT settings and the closed set of supported algorithms."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from jwtauth.services._shared.errors import ConfigurationError, UnsupportedAlgorithm


class LoginMode(str, Enum):
    """Login topology: independent sessions or a single live token per subject."""

    MPOP = "mpop"
    SSO = "sso"


class AlgorithmClass(str, Enum):
    """Whether an algorithm signs with a shared secret or a key pair."""

    SYMMETRIC = "symmetric"
    ASYMMETRIC = "asymmetric"


class Algorithm(str, Enum):
    """The nine signature algorithms accepted for issuance and verification."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"

    @property
    def algorithm_class(self) -> AlgorithmClass:
        if self.value.startswith("HS"):
            return AlgorithmClass.SYMMETRIC
        return AlgorithmClass.ASYMMETRIC

    @classmethod
    def parse(cls, name: Any) -> Algorithm:
        """
        Resolve an algorithm name.

        :param name: Algorithm identifier such as ``"HS256"``.
        :raises UnsupportedAlgorithm: If ``name`` is not one of the nine values.
        """
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedAlgorithm(name if name is None else str(name)) from None


def _as_int(config: Mapping[str, Any], key: str, default: int) -> int:
    raw = config.get(key, default)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(key, f"expected an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigurationError(key, "must not be negative")
    return value


def _as_bool(config: Mapping[str, Any], key: str, default: bool) -> bool:
    raw = config.get(key, default)
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return default
    return str(raw).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class JWTSettings:
    """
    Process-wide, read-only JWT configuration.

    :param algorithm: Signature algorithm used for issuance.
    :param secret: Shared secret (symmetric algorithms).
    :param keys: Key pair mapping with ``"private"`` and ``"public"`` PEM
        entries (asymmetric algorithms).
    :param ttl: Token lifetime in seconds.
    :param login_type: :class:`LoginMode` in effect.
    :param sso_key: Claim carrying the subject in single-point mode.
    :param blacklist_cache_ttl: Retention of blacklist entries in seconds.
    :param blacklist_grace_period: Seconds a superseded token stays acceptable.
    :param blacklist_enabled: Whether revocation is enforced.
    :param blacklist_prefix: Namespace for blacklist storage keys.
    """

    algorithm: Algorithm = Algorithm.HS256
    secret: str | None = None
    keys: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    ttl: int = 7200
    login_type: LoginMode = LoginMode.MPOP
    sso_key: str = "uid"
    blacklist_cache_ttl: int = 86400
    blacklist_grace_period: int = 0
    blacklist_enabled: bool = True
    blacklist_prefix: str = "jwt:bl:"

    def __post_init__(self) -> None:
        if self.algorithm.algorithm_class is AlgorithmClass.SYMMETRIC:
            if not self.secret:
                raise ConfigurationError(
                    "JWT_SECRET", f"a secret is required for {self.algorithm.value}"
                )
        else:
            for part in ("private", "public"):
                if not self.keys.get(part):
                    raise ConfigurationError(
                        "JWT_KEYS", f"a {part} key is required for {self.algorithm.value}"
                    )
        if not self.sso_key:
            raise ConfigurationError("JWT_SSO_KEY", "must not be empty")

    @property
    def blacklist_retention(self) -> int:
        """Seconds a blacklist entry is kept in storage."""
        return self.blacklist_cache_ttl + self.blacklist_grace_period

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> JWTSettings:
        """
        Build settings from a Flask config (or any mapping of ``JWT_*`` keys).

        :param config: Source mapping.
        :returns: Validated, immutable settings.
        :raises ConfigurationError: On invalid values.
        :raises UnsupportedAlgorithm: If ``JWT_ALGORITHM`` is unknown.
        """
        login_raw = str(config.get("JWT_LOGIN_TYPE") or LoginMode.MPOP.value).strip().lower()
        try:
            login_type = LoginMode(login_raw)
        except ValueError:
            raise ConfigurationError(
                "JWT_LOGIN_TYPE", f"expected 'mpop' or 'sso', got {login_raw!r}"
            ) from None

        keys: dict[str, str] = {}
        for part, key in (("private", "JWT_PRIVATE_KEY"), ("public", "JWT_PUBLIC_KEY")):
            value = config.get(key)
            if value:
                keys[part] = str(value)
        # An explicit JWT_KEYS mapping wins over the split variables
        keys.update({k: str(v) for k, v in dict(config.get("JWT_KEYS") or {}).items() if v})

        return cls(
            algorithm=Algorithm.parse(str(config.get("JWT_ALGORITHM") or "HS256").strip()),
            secret=config.get("JWT_SECRET") or None,
            keys=MappingProxyType(keys),
            ttl=_as_int(config, "JWT_TTL", 7200),
            login_type=login_type,
            sso_key=str(config.get("JWT_SSO_KEY") or "uid"),
            blacklist_cache_ttl=_as_int(config, "JWT_BLACKLIST_CACHE_TTL", 86400),
            blacklist_grace_period=_as_int(config, "JWT_BLACKLIST_GRACE_PERIOD", 0),
            blacklist_enabled=_as_bool(config, "JWT_BLACKLIST_ENABLED", True),
            blacklist_prefix=str(config.get("JWT_BLACKLIST_PREFIX") or "jwt:bl:"),
        )


__all__ = ["Algorithm", "AlgorithmClass", "JWTSettings", "LoginMode"]
