# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pluggable registration policies (invite and key checks)."""

import base64
from typing import Protocol

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from sqlalchemy.ext.asyncio import AsyncSession

from hub_redirector.config import settings
from hub_redirector.services.invites import DatabaseInvitePolicy

ED25519_KEY_BYTES = 32


class InvitePolicy(Protocol):
    async def is_valid(self, db: AsyncSession, code: str) -> bool: ...

    async def consume(self, db: AsyncSession, code: str) -> bool: ...


class KeyPolicy(Protocol):
    def validate(self, key: str) -> bool: ...


class BasicKeyPolicy:
    """Printable ASCII without whitespace, length within bounds."""

    def __init__(self, min_length: int = 8, max_length: int = 4096):
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, key: str) -> bool:
        if not key or not self.min_length <= len(key) <= self.max_length:
            return False
        return all(33 <= ord(ch) <= 126 for ch in key)


def _decode_base64(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _decode_key(encoded: str) -> bytes | None:
    """Decode URL-safe base64 (padding optional) or hex, whichever yields 32 bytes."""
    cleaned = encoded.strip()
    for decoder in (_decode_base64, bytes.fromhex):
        try:
            raw = decoder(cleaned)
        except ValueError:
            continue
        if len(raw) == ED25519_KEY_BYTES:
            return raw
    return None


class Ed25519KeyPolicy:
    """Key must be a raw 32-byte Ed25519 public key, hex or URL-safe base64."""

    def validate(self, key: str) -> bool:
        if not key:
            return False
        raw = _decode_key(key)
        if raw is None:
            return False
        try:
            Ed25519PublicKey.from_public_bytes(raw)
        except ValueError:
            return False
        return True


def get_invite_policy() -> InvitePolicy:
    """FastAPI dependency: invite policy used by registration."""
    return DatabaseInvitePolicy()


def get_key_policy() -> KeyPolicy:
    """FastAPI dependency: key policy selected by settings.key_policy."""
    if settings.key_policy == "ed25519":
        return Ed25519KeyPolicy()
    return BasicKeyPolicy(settings.key_min_length, settings.key_max_length)
