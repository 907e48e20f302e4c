# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""In-memory rate limiting for the token and registration endpoints."""

import time
from collections import defaultdict

from fastapi import HTTPException, Request

from hub_redirector.client import get_client_ip
from hub_redirector.config import settings

# (client_key, endpoint) -> list of request timestamps in window
_buckets: defaultdict[tuple[str, str], list[float]] = defaultdict(list)
_last_prune = 0.0
# Window seconds; max requests per window per endpoint
WINDOW = 60
LIMITS: dict[str, int] = {
    "/api/v1/register": settings.register_rate_limit,
    "/api/v1/token": settings.token_rate_limit,
}


def _clean_old(bucket: list[float], now: float) -> None:
    cutoff = now - WINDOW
    while bucket and bucket[0] < cutoff:
        bucket.pop(0)


def _prune_stale(now: float) -> None:
    """Drop clients whose whole bucket has aged out of the window."""
    global _last_prune
    for key in list(_buckets):
        _clean_old(_buckets[key], now)
        if not _buckets[key]:
            del _buckets[key]
    _last_prune = now


def check_rate_limit(request: Request, path: str) -> None:
    """
    Raise 429 if the client has exceeded the limit for this path.
    Call this at the start of the endpoint (or via a dependency).
    """
    limit = LIMITS.get(path)
    if not limit:
        return
    now = time.monotonic()
    if now - _last_prune >= WINDOW:
        _prune_stale(now)
    key = (get_client_ip(request) or "unknown", path)
    bucket = _buckets[key]
    _clean_old(bucket, now)
    if len(bucket) >= limit:
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please try again later.",
        )
    bucket.append(now)


async def rate_limit_dep(request: Request) -> None:
    """FastAPI dependency: add Depends(rate_limit_dep) to rate-limited routes."""
    check_rate_limit(request, request.url.path.rstrip("/"))
