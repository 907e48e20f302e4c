# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Token issuance: random 63-bit identifiers recorded in the tokens table."""

import logging
import secrets

from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hub_redirector.config import settings
from hub_redirector.database import begin_write
from hub_redirector.errors import RandomSourceError, StorageError
from hub_redirector.models import Token
from hub_redirector.models.timestamp import epoch_seconds

logger = logging.getLogger(__name__)

MAX_TOKEN = 2**63 - 1


def generate_token_id() -> int:
    """Draw a signed 64-bit value and drop the sign.

    abs() of the minimum signed value is 2**63, which does not fit a signed
    BIGINT column, so that single draw is repeated.
    """
    while True:
        try:
            raw = secrets.token_bytes(8)
        except (OSError, NotImplementedError) as e:
            raise RandomSourceError(str(e)) from e
        value = abs(int.from_bytes(raw, "big", signed=True))
        if value <= MAX_TOKEN:
            return value


async def issue_token(db: AsyncSession) -> Token:
    """Generate a token and store it with its issuance time."""
    attempts = max(1, settings.token_insert_attempts)
    for attempt in range(1, attempts + 1):
        try:
            token_id = generate_token_id()
        except RandomSourceError:
            logger.exception("Random source unavailable")
            raise
        issued_at = epoch_seconds()
        try:
            await begin_write(db)
            result = await db.execute(
                insert(Token.__table__).values(id=token_id, time_created=issued_at)
            )
        except IntegrityError:
            await db.rollback()
            logger.warning("Token id collision (attempt %d/%d)", attempt, attempts)
            continue
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception("Failed to insert token into DB")
            raise StorageError(f"token insert failed: {e}") from e
        if result.rowcount != 1:
            await db.rollback()
            logger.error("Token insert affected %s rows, expected 1", result.rowcount)
            raise StorageError("Failed to insert token into DB")
        await db.commit()
        return Token(id=token_id, time_created=issued_at)
    logger.error("Gave up issuing a token after %d collisions", attempts)
    raise StorageError("token id collisions exhausted")
