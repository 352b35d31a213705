"""Security helpers for API authentication."""

from __future__ import annotations

import os
from typing import List

from fastapi import Header, HTTPException, Query, status

from dgtracker.config import env_bool


def _allowed_keys() -> List[str]:
    raw = os.getenv("API_KEY", "")
    return [key.strip() for key in raw.split(",") if key.strip()]


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
    api_key_query: str | None = Query(default=None, alias="apiKey"),
) -> str | None:
    """Require a matching API key header when enabled via env.

    Returns the resolved API key (from header or query) so routers can fall back
    to it as the player identity.
    """

    candidate = x_api_key or api_key_query

    if not env_bool("REQUIRE_API_KEY"):
        return candidate

    allowed = _allowed_keys()
    if not allowed or candidate not in allowed:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid api key",
        )

    return candidate


__all__ = ["require_api_key"]
