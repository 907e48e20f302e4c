# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Registration API - claim a redirect with an invite code."""

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hub_redirector.api.schemas import RegisterRequest
from hub_redirector.client import get_client_ip
from hub_redirector.database import get_db
from hub_redirector.rate_limit import rate_limit_dep
from hub_redirector.services.policies import InvitePolicy, KeyPolicy, get_invite_policy, get_key_policy
from hub_redirector.services.registration import register as register_hub

router = APIRouter(tags=["register"])


@router.post("/register", response_class=PlainTextResponse, dependencies=[Depends(rate_limit_dep)])
async def register(
    body: RegisterRequest | None = Body(default=None),
    caller_ip: str | None = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
    invite_policy: InvitePolicy = Depends(get_invite_policy),
    key_policy: KeyPolicy = Depends(get_key_policy),
) -> Response:
    """Register the caller's address: redirect requests from it to the host/port of body.url."""
    if body is None:
        # 204 responses cannot carry a body
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    await register_hub(
        db,
        caller_ip=caller_ip,
        invite_code=body.invite,
        public_key=body.key,
        target_url=body.url,
        invite_policy=invite_policy,
        key_policy=key_policy,
    )
    return PlainTextResponse("Created user")
