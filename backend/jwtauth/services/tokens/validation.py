from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def numeric_claim(value: Any) -> int | None:
    """Return ``value`` as an ``int`` if it is a JSON number, else ``None``."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return int(value)


def is_time_valid(claims: Mapping[str, Any], now: int) -> bool:
    """
    Return ``True`` iff ``nbf <= now <= exp``.

    Bounds are inclusive and there is no leeway. ``iat`` is not consulted.
    Missing or non-numeric ``nbf``/``exp`` fail the check.
    """
    nbf = numeric_claim(claims.get("nbf"))
    exp = numeric_claim(claims.get("exp"))
    if nbf is None or exp is None:
        return False
    return nbf <= now <= exp
