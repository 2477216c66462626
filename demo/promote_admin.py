#!/usr/bin/env python3
"""Promote a registered user to the Admin role. Run on the server.

Usage:
    DATABASE_URL=sqlite+aiosqlite:///./data/payments.db python demo/promote_admin.py admin
"""
import asyncio
import os
import sys

from sqlalchemy import update
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from payments_api.models.user import User, UserRole


async def promote(username: str) -> int:
    engine = create_async_engine(os.environ["DATABASE_URL"])
    sf = async_sessionmaker(engine, class_=AsyncSession)
    async with sf() as s:
        r = await s.execute(
            update(User)
            .where(User.username == username)
            .values(role=UserRole.ADMIN)
        )
        await s.commit()
    await engine.dispose()
    return r.rowcount


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else "admin"
    rows = asyncio.run(promote(target))
    print(f"Rows updated: {rows}")
