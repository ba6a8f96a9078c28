"""
Request/notification signing shared by the payment gateway adapters.

Token = sha256( k1=v1 k2=v2 ... + secret ) over the top-level scalar fields
sorted by key; ``Token`` itself, empty values and nested objects are skipped.
"""

import hashlib
import hmac
from typing import Any

TOKEN_FIELD = "Token"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def canonical_string(payload: dict[str, Any], secret: str) -> str:
    pairs = sorted(
        (key, value)
        for key, value in payload.items()
        if key != TOKEN_FIELD and value is not None and value != "" and not isinstance(value, (dict, list, tuple))
    )
    return "".join(f"{key}={_format_value(value)}" for key, value in pairs) + secret


def sign(payload: dict[str, Any], secret: str) -> str:
    return hashlib.sha256(canonical_string(payload, secret).encode("utf-8")).hexdigest()


def verify(payload: dict[str, Any], secret: str) -> bool:
    token = payload.get(TOKEN_FIELD)
    if not isinstance(token, str) or not token:
        return False
    return hmac.compare_digest(sign(payload, secret), token.lower())


def with_token(payload: dict[str, Any], secret: str) -> dict[str, Any]:
    signed = dict(payload)
    signed[TOKEN_FIELD] = sign(payload, secret)
    return signed
