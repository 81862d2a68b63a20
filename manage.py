#!/usr/bin/env python3
"""
Operator script: apply database migrations and inspect recorded connections.

Usage:
    python manage.py                              # migrate only
    python manage.py --log 100001 31.214.157.141  # record a connection
    python manage.py --user 100001                # IPs + last connection of a user
    python manage.py --prefix 31.214              # users whose IP starts with a prefix
"""

import argparse
import asyncio

from app.core.exceptions import ConnectionServiceError
from app.models.database import async_session, engine
from app.models.schemas import LastConnectionResponse
from app.services import connection_service
from app.services.ip_validation import validate_ip_address
from main import ensure_data_dir, run_migrations


async def log_connection(user_id: int, ip_address: str) -> bool:
    """Record a connection, applying the same validation as the API."""
    try:
        validate_ip_address(ip_address)
        async with async_session() as session:
            connection = await connection_service.insert_connection(session, user_id, ip_address)
    except ConnectionServiceError as exc:
        print(f"Error: {exc.message}")
        return False

    print(f"Recorded connection #{connection.id}: user {user_id} from {ip_address}")
    return True


async def show_user(user_id: int) -> None:
    async with async_session() as session:
        ips = await connection_service.find_ips_by_user(session, user_id)
        latest = await connection_service.find_latest_by_user(session, user_id)

    if not ips:
        print(f"No connections recorded for user {user_id}")
        return

    print(f"\nUser {user_id}: {len(ips)} distinct IP(s)")
    for ip in ips:
        print(f"  {ip}")
    last = LastConnectionResponse.model_validate(latest)
    print(f"Last connection: {last.ip_address} at {last.timestamp.isoformat()}")


async def show_prefix(prefix: str) -> None:
    async with async_session() as session:
        user_ids = await connection_service.find_user_ids_by_ip_prefix(session, prefix)

    print(f"\n{len(user_ids)} user(s) with an IP starting with {prefix!r}")
    for user_id in user_ids:
        print(f"  {user_id}")


async def main() -> int:
    parser = argparse.ArgumentParser(description="Manage the User Connection Service database")
    parser.add_argument(
        "--log",
        nargs=2,
        metavar=("USER_ID", "IP_ADDRESS"),
        help="Record a connection event",
    )
    parser.add_argument(
        "--user",
        type=int,
        help="Show distinct IPs and the last connection of a user",
    )
    parser.add_argument(
        "--prefix",
        help="Show users whose IP starts with the given prefix",
    )

    args = parser.parse_args()

    ensure_data_dir()
    print("Applying migrations...")
    await asyncio.to_thread(run_migrations)
    print("Database is up to date")

    ok = True
    try:
        if args.log:
            user_id, ip_address = args.log
            try:
                user_id = int(user_id)
            except ValueError:
                parser.error(f"USER_ID must be an integer, got {user_id!r}")
            ok = await log_connection(user_id, ip_address)

        if args.user is not None:
            await show_user(args.user)

        if args.prefix is not None:
            await show_prefix(args.prefix)
    finally:
        await engine.dispose()

    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
