# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Database models."""

from hub_redirector.models.base import Base
from hub_redirector.models.redirect import RedirectMapping
from hub_redirector.models.user import User
from hub_redirector.models.token import Token
from hub_redirector.models.invite import Invite

__all__ = [
    "Base",
    "RedirectMapping",
    "User",
    "Token",
    "Invite",
]
