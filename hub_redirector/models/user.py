# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""User model."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hub_redirector.models.base import Base
from hub_redirector.models.redirect import RedirectMapping
from hub_redirector.models.timestamp import TimestampMixin


class User(Base, TimestampMixin):
    """Registrant, identified by the public key that will sign reconfiguration requests."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    public_key: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    redirect: Mapped["RedirectMapping | None"] = relationship(
        "RedirectMapping", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
