"""
Router for logging user connections and querying them.

  POST /api/connection                           record a connection event
  GET  /api/users/by-ip/{partial_ip}             users whose IP starts with a prefix
  GET  /api/users/{user_id}/ips                  distinct IPs of a user
  GET  /api/users/{user_id}/last-connection      latest connection of a user (or null)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidIpAddress
from app.models.database import get_db
from app.models.schemas import LastConnectionResponse
from app.services import connection_service
from app.services.ip_validation import validate_ip_address

router = APIRouter(prefix="/api", tags=["Connections"])
logger = logging.getLogger("uvicorn.error")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

UserId = Annotated[int, Query(alias="userId", ge=INT64_MIN, le=INT64_MAX, description="User ID.")]
UserIdPath = Annotated[int, Path(ge=INT64_MIN, le=INT64_MAX, description="User ID.")]


@router.post(
    "/connection",
    operation_id="LogConnection",
    summary="Log a user connection event.",
    response_description="HTTP 200 OK when the connection was recorded.",
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Invalid IP address"}},
)
async def log_connection(
    user_id: UserId,
    ip_address: Annotated[str, Query(alias="ipAddress", description="IP address of the user.")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """
    Record that a user connected from an IP address.

    The address must be a valid IPv4 or IPv6 address; it is stored as submitted
    together with the current UTC time.
    """
    try:
        validate_ip_address(ip_address)
    except InvalidIpAddress:
        logger.info("Rejected connection for user %d: invalid IP %r", user_id, ip_address)
        raise

    await connection_service.insert_connection(db, user_id, ip_address)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/users/by-ip/{partial_ip}",
    response_model=list[int],
    operation_id="FindUsersByIp",
    summary="Find all users whose IP addresses start with the given prefix.",
    response_description="List of user IDs.",
)
async def find_users_by_ip(
    partial_ip: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[int]:
    return await connection_service.find_user_ids_by_ip_prefix(db, partial_ip)


@router.get(
    "/users/{user_id}/ips",
    response_model=list[str],
    operation_id="GetUserIps",
    summary="Get all distinct IP addresses used by the user.",
    response_description="List of distinct IP addresses.",
)
async def get_user_ips(
    user_id: UserIdPath,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[str]:
    return await connection_service.find_ips_by_user(db, user_id)


@router.get(
    "/users/{user_id}/last-connection",
    response_model=LastConnectionResponse | None,
    operation_id="GetLastConnection",
    summary="Get the user's most recent connection.",
    response_description="Object with ipAddress and timestamp, or null if the user has no records.",
)
async def get_last_connection(
    user_id: UserIdPath,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LastConnectionResponse | None:
    connection = await connection_service.find_latest_by_user(db, user_id)
    if connection is None:
        return None
    return LastConnectionResponse.model_validate(connection)
