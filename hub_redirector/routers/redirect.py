# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Catch-all redirect to the caller's registered hub."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hub_redirector.client import get_client_ip
from hub_redirector.database import get_db
from hub_redirector.services.redirects import build_redirect_url, resolve_redirect

router = APIRouter(tags=["redirect"])


@router.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def redirect(
    request: Request,
    caller_ip: str | None = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
) -> RedirectResponse:
    """Temporary redirect keeping path and query; the mapping may change later."""
    target = await resolve_redirect(db, caller_ip)
    return RedirectResponse(
        build_redirect_url(request.url, target),
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
