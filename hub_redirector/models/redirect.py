# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Public IP to internal host/port mapping."""

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hub_redirector.models.base import Base

if TYPE_CHECKING:
    from hub_redirector.models.user import User


class RedirectMapping(Base):
    """Where requests from one public IP are sent. One row per public IP."""

    __tablename__ = "redirects"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    public_ip: Mapped[str] = mapped_column(String(45), unique=True, nullable=False, index=True)
    time_created: Mapped[int] = mapped_column(BigInteger, nullable=False)
    internal_ip: Mapped[str] = mapped_column(String(255), nullable=False)
    internal_port: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    user: Mapped["User"] = relationship("User", back_populates="redirect")
