# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Registration gate: invite, key and URL checks, then one transactional write."""

import logging
from dataclasses import dataclass

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hub_redirector.database import begin_write
from hub_redirector.errors import (
    StorageError,
    ValidationError,
    invalid_invite,
    invalid_key,
    invalid_url,
)
from hub_redirector.models import RedirectMapping, User
from hub_redirector.models.timestamp import epoch_seconds
from hub_redirector.services.policies import InvitePolicy, KeyPolicy

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyUrl)


@dataclass(frozen=True)
class Registration:
    user_id: int
    public_ip: str
    internal_host: str
    internal_port: int


def parse_target_url(url: str) -> tuple[str, int] | None:
    """Host and port of an absolute URL; None if it is not one.

    The port falls back to the scheme default (http 80, https 443, ...);
    schemes without a default need an explicit port.
    """
    try:
        parsed = _url_adapter.validate_python(url)
    except PydanticValidationError:
        return None
    if not parsed.host or parsed.port is None:
        return None
    if not 0 < parsed.port <= 65535:
        return None
    return parsed.host.strip("[]"), parsed.port


async def register(
    db: AsyncSession,
    *,
    caller_ip: str | None,
    invite_code: str,
    public_key: str,
    target_url: str,
    invite_policy: InvitePolicy,
    key_policy: KeyPolicy,
) -> Registration:
    """Validate a registration and store the user and its redirect mapping.

    Checks run invite, key, URL and stop at the first failure. The invite is
    consumed in the same transaction as the inserts, so db must not have a
    transaction open yet.
    """
    try:
        await begin_write(db)
        invite_ok = await invite_policy.is_valid(db, invite_code)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Invite check failed")
        raise StorageError(f"invite check failed: {e}") from e
    if not invite_ok:
        raise invalid_invite()
    if not key_policy.validate(public_key):
        raise invalid_key()
    target = parse_target_url(target_url)
    if target is None:
        raise invalid_url()
    if not caller_ip:
        raise ValidationError("Unknown caller address")
    host, port = target

    try:
        if not await invite_policy.consume(db, invite_code):
            await db.rollback()
            logger.info("Invite already consumed by a concurrent registration")
            raise invalid_invite()

        result = await db.execute(insert(User.__table__).values(public_key=public_key))
        if result.rowcount != 1:
            await db.rollback()
            logger.error("User insert affected %s rows, expected 1", result.rowcount)
            raise StorageError("Failed to create new user")
        user_id = result.inserted_primary_key[0]

        result = await db.execute(
            insert(RedirectMapping.__table__).values(
                public_ip=caller_ip,
                time_created=epoch_seconds(),
                internal_ip=host,
                internal_port=port,
                user_id=user_id,
            )
        )
        if result.rowcount != 1:
            await db.rollback()
            logger.error("Redirect insert affected %s rows, expected 1", result.rowcount)
            raise StorageError("Failed to create redirect")
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info("Registration for %s conflicts with an existing row", caller_ip)
        raise ValidationError("Key or address already registered") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Registration write failed for %s", caller_ip)
        raise StorageError(f"registration failed: {e}") from e

    logger.info("Registered %s -> %s:%d", caller_ip, host, port)
    return Registration(user_id=user_id, public_ip=caller_ip, internal_host=host, internal_port=port)
