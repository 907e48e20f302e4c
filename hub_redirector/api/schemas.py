# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pydantic schemas for API request bodies."""

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    # Public key of the hub; will authenticate reconfiguration requests
    key: str
    # Invite code to consume
    invite: str
    # URL to redirect to
    url: str


class ReconfigureRequest(BaseModel):
    key: str
    signature: str
    payload: str
