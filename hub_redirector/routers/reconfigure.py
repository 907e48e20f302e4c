# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Reconfiguration API. Signed updates of a registered redirect are not supported yet."""

from fastapi import APIRouter, Body

from hub_redirector.api.schemas import ReconfigureRequest
from hub_redirector.errors import NotImplementedOperation

router = APIRouter(tags=["reconfigure"])


@router.post("/reconfigure")
async def reconfigure(body: ReconfigureRequest | None = Body(default=None)) -> None:
    # TODO: verify body.signature over body.payload with the key stored for body.key
    raise NotImplementedOperation()
