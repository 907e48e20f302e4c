# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Redirect lookup: caller IP to internal host/port."""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import MultipleResultsFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import URL

from hub_redirector.errors import NotFoundError, StorageError
from hub_redirector.models import RedirectMapping

logger = logging.getLogger(__name__)

NO_MAPPING = "No mapping found for this address"


@dataclass(frozen=True)
class RedirectTarget:
    host: str
    port: int


async def resolve_redirect(db: AsyncSession, caller_ip: str | None) -> RedirectTarget:
    """Look up the mapping registered for caller_ip (already normalized)."""
    if not caller_ip:
        raise NotFoundError(NO_MAPPING)
    try:
        result = await db.execute(
            select(RedirectMapping.internal_ip, RedirectMapping.internal_port).where(
                RedirectMapping.public_ip == caller_ip
            )
        )
        row = result.one_or_none()
    except MultipleResultsFound as e:
        logger.error("Multiple redirect rows for %s; public_ip must be unique", caller_ip)
        raise StorageError(f"duplicate mapping for {caller_ip}") from e
    except SQLAlchemyError as e:
        logger.exception("Redirect lookup failed for %s", caller_ip)
        raise StorageError(f"redirect lookup failed: {e}") from e
    if row is None:
        raise NotFoundError(NO_MAPPING)
    return RedirectTarget(host=row.internal_ip, port=row.internal_port)


def build_redirect_url(url: URL, target: RedirectTarget) -> str:
    """Same scheme, path and query as url, with host and port from target."""
    host = target.host
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return str(url.replace(netloc=f"{host}:{target.port}"))
