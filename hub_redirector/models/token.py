# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Issued request tokens."""

from sqlalchemy import BigInteger
from sqlalchemy.orm import Mapped, mapped_column

from hub_redirector.models.base import Base


class Token(Base):
    """Random non-negative identifier handed out by the token endpoint. Never updated."""

    __tablename__ = "tokens"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    time_created: Mapped[int] = mapped_column(BigInteger, nullable=False)
