# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Caller address resolution."""

import ipaddress

from fastapi import Request

from hub_redirector.config import settings


def normalize_ip(address: str) -> str | None:
    """Canonical string form of an IPv4/IPv6 address, or None if it is not one.

    IPv4-mapped IPv6 addresses (::ffff:a.b.c.d) collapse to the IPv4 form so a
    dual-stack listener matches the same row as an IPv4 one.
    """
    try:
        ip = ipaddress.ip_address(address.strip())
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return str(ip)


def get_client_ip(request: Request) -> str | None:
    """Normalized source address of the request. X-Forwarded-For only when trusted."""
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return normalize_ip(forwarded.split(",")[0])
    if request.client and request.client.host:
        return normalize_ip(request.client.host)
    return None
