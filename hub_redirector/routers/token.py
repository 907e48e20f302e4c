# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Token issuance API."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hub_redirector.database import get_db
from hub_redirector.rate_limit import rate_limit_dep
from hub_redirector.services.tokens import issue_token

router = APIRouter(tags=["token"])


@router.get("/token", response_class=PlainTextResponse, dependencies=[Depends(rate_limit_dep)])
async def token(db: AsyncSession = Depends(get_db)) -> PlainTextResponse:
    """Generate a new request token, store it, and return it as a decimal string."""
    issued = await issue_token(db)
    return PlainTextResponse(str(issued.id))
