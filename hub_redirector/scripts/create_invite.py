#!/usr/bin/env python3
# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Create invite codes. Run: python -m hub_redirector.scripts.create_invite [COUNT | CODE ...]"""

import asyncio
import sys

from hub_redirector.database import async_session_maker, init_db
from hub_redirector.services.invites import create_invites, generate_invite_code


def parse_args(argv: list[str]) -> list[str]:
    """One numeric argument means "generate that many"; otherwise the arguments are the codes."""
    if not argv:
        return [generate_invite_code()]
    if len(argv) == 1 and argv[0].isdigit():
        return [generate_invite_code() for _ in range(int(argv[0]))]
    return argv


async def main(argv: list[str]) -> int:
    await init_db()
    codes = parse_args(argv)
    async with async_session_maker() as session:
        created = await create_invites(session, codes)
    for code in created:
        print(code)
    skipped = len(set(codes)) - len(created)
    if skipped:
        print(f"{skipped} code(s) already existed", file=sys.stderr)
    return 0 if created else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
