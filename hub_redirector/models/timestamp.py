# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Timestamp helpers for models."""

import time
from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, mapped_column


def epoch_seconds() -> int:
    """Current time as integer seconds since the epoch."""
    return int(time.time())


class TimestampMixin:
    """Mixin for time_created timestamp."""

    time_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
