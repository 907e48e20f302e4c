# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Invite ledger and key policy tests."""

import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from hub_redirector.config import settings
from hub_redirector.scripts.create_invite import parse_args
from hub_redirector.services.invites import DatabaseInvitePolicy, create_invites, generate_invite_code
from hub_redirector.services.policies import BasicKeyPolicy, Ed25519KeyPolicy, get_key_policy


def raw_public_key() -> bytes:
    return Ed25519PrivateKey.generate().public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


@pytest.mark.parametrize(
    "key, ok",
    [
        ("1234567890", True),
        ("ssh-ed25519/AAAAC3Nza", True),
        ("", False),
        ("short", False),
        ("has a space", False),
        ("tab\there!!", False),
        ("x" * 4097, False),
        ("ключключключ", False),
    ],
)
def test_basic_key_policy(key, ok):
    assert BasicKeyPolicy(8, 4096).validate(key) is ok


def test_ed25519_key_policy_accepts_base64_and_hex():
    raw = raw_public_key()
    policy = Ed25519KeyPolicy()
    assert policy.validate(base64.urlsafe_b64encode(raw).decode().rstrip("="))
    assert policy.validate(base64.urlsafe_b64encode(raw).decode())
    assert policy.validate(raw.hex())


def test_ed25519_key_policy_rejects_wrong_length():
    policy = Ed25519KeyPolicy()
    assert not policy.validate("1234567890")
    assert not policy.validate(raw_public_key()[:31].hex())
    assert not policy.validate("")


def test_key_policy_from_settings(monkeypatch):
    assert isinstance(get_key_policy(), BasicKeyPolicy)
    monkeypatch.setattr(settings, "key_policy", "ed25519")
    assert isinstance(get_key_policy(), Ed25519KeyPolicy)


async def test_create_invites_skips_existing(session_maker):
    async with session_maker() as session:
        created = await create_invites(session, ["Invite", "alpha", "beta", "alpha", "  "])
    assert created == ["alpha", "beta"]


async def test_invite_consumed_once(session_maker):
    policy = DatabaseInvitePolicy()
    async with session_maker() as session:
        assert await policy.is_valid(session, "Invite")
        assert await policy.consume(session, "Invite")
        await session.commit()
    async with session_maker() as session:
        assert not await policy.is_valid(session, "Invite")
        assert not await policy.consume(session, "Invite")


async def test_unknown_invite_is_invalid(session_maker):
    policy = DatabaseInvitePolicy()
    async with session_maker() as session:
        assert not await policy.is_valid(session, "missing")
        assert not await policy.is_valid(session, "")


def test_generated_invite_codes_are_unique():
    codes = {generate_invite_code() for _ in range(100)}
    assert len(codes) == 100


def test_create_invite_args():
    assert len(parse_args([])) == 1
    assert len(set(parse_args(["3"]))) == 3
    assert parse_args(["Invite", "Other"]) == ["Invite", "Other"]
