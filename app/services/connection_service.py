"""
Connection Service
==================
Stores user connection events and answers the lookup queries behind the API.
Every function is a single round-trip to the database; the caller owns the
session.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database import UserConnection

logger = logging.getLogger("uvicorn.error")


async def insert_connection(
    db: AsyncSession,
    user_id: int,
    ip_address: str,
    timestamp: datetime | None = None,
) -> UserConnection:
    """
    Append one connection event and return it with its generated id.

    Raises ValidationError (before touching the database) if the address
    does not fit the ip_address column.
    """
    connection = UserConnection(
        user_id=user_id,
        ip_address=ip_address,
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    db.add(connection)
    await db.commit()
    await db.refresh(connection)

    logger.debug("Connection %d: user %d from %s", connection.id, user_id, ip_address)
    return connection


async def find_user_ids_by_ip_prefix(db: AsyncSession, prefix: str) -> list[int]:
    """
    Distinct user ids with at least one address starting with `prefix`.

    The prefix is matched literally and case-sensitively: LIKE narrows the
    rows (and can use the ip_address index), substr makes the match exact
    on stores whose LIKE ignores case.
    """
    result = await db.execute(
        select(UserConnection.user_id)
        .where(
            UserConnection.ip_address.startswith(prefix, autoescape=True),
            func.substr(UserConnection.ip_address, 1, len(prefix)) == prefix,
        )
        .distinct()
        .order_by(UserConnection.user_id)
    )
    return list(result.scalars().all())


async def find_ips_by_user(db: AsyncSession, user_id: int) -> list[str]:
    """Distinct addresses recorded for a user."""
    result = await db.execute(
        select(UserConnection.ip_address)
        .where(UserConnection.user_id == user_id)
        .distinct()
        .order_by(UserConnection.ip_address)
    )
    return list(result.scalars().all())


async def find_latest_by_user(db: AsyncSession, user_id: int) -> UserConnection | None:
    """Most recent connection of a user; the highest id wins a timestamp tie."""
    result = await db.execute(
        select(UserConnection)
        .where(UserConnection.user_id == user_id)
        .order_by(UserConnection.timestamp.desc(), UserConnection.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()
