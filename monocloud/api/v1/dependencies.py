"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the process cache and the admin gate.
Routes depend only on these, never on app.state directly.
"""

from __future__ import annotations

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from monocloud.core.config import get_settings
from monocloud.domain.exceptions import AdminNotConfiguredException, AuthenticationException
from monocloud.infrastructure.cache.tiered_cache import TieredCache


def get_cache(request: Request) -> TieredCache:
    """Process-wide TieredCache built in the lifespan."""
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        raise HTTPException(status_code=503, detail="Cache is not initialized")
    return cache


def require_admin(request: Request) -> None:
    """Require Authorization: Bearer <ADMIN_API_KEY>.

    Raises:
        AdminNotConfiguredException: ADMIN_API_KEY is not set (503).
        AuthenticationException: Header missing or wrong (401).
    """
    settings = get_settings()
    if settings.admin_api_key is None or not settings.admin_api_key.get_secret_value():
        raise AdminNotConfiguredException()
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    expected = settings.admin_api_key.get_secret_value()
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.encode(), expected.encode()):
        raise AuthenticationException("Unauthorized")


CacheDep = Annotated[TieredCache, Depends(get_cache)]
AdminDep = Depends(require_admin)
