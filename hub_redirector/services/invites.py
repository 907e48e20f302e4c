# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Invite ledger: creation and single-use consumption of invite codes."""

import secrets
from collections.abc import Iterable
from datetime import datetime, timezone

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hub_redirector.models import Invite


def generate_invite_code() -> str:
    return secrets.token_urlsafe(16)


async def create_invites(db: AsyncSession, codes: Iterable[str]) -> list[str]:
    """Insert the codes that do not exist yet and commit. Returns the codes created."""
    wanted = list(dict.fromkeys(c.strip() for c in codes if c and c.strip()))
    if not wanted:
        return []
    result = await db.execute(select(Invite.code).where(Invite.code.in_(wanted)))
    existing = set(result.scalars().all())
    created = [c for c in wanted if c not in existing]
    if created:
        await db.execute(insert(Invite), [{"code": c} for c in created])
    await db.commit()
    return created


class DatabaseInvitePolicy:
    """Invites stored in the invites table; a code is valid until used_at is set."""

    async def is_valid(self, db: AsyncSession, code: str) -> bool:
        if not code:
            return False
        result = await db.execute(
            select(Invite.id).where(Invite.code == code, Invite.used_at.is_(None))
        )
        return result.scalar_one_or_none() is not None

    async def consume(self, db: AsyncSession, code: str) -> bool:
        """Mark the invite used. False when another registration got there first.

        The caller commits; the conditional UPDATE is what makes the
        check-and-consume atomic.
        """
        result = await db.execute(
            update(Invite)
            .where(Invite.code == code, Invite.used_at.is_(None))
            .values(used_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
