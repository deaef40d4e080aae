"""Bearer-token authentication for the favorites service."""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, Request

from favsync.config import get_settings

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24 * 7


def create_access_token(user_id: int, email: str = "") -> str:
    """Issue a signed token carrying the user id."""
    expiration = datetime.now(timezone.utc) + timedelta(hours=JWT_EXPIRATION_HOURS)
    return jwt.encode(
        {"id": user_id, "email": email, "exp": expiration},
        get_settings().secret_key,
        algorithm=JWT_ALGORITHM,
    )


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(status_code=401, detail={"error": error, "message": message})


async def get_current_user_id(request: Request) -> int:
    """Resolve the user id from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise _unauthorized("Token not provided", "Please sign in again")

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Malformed token", "Invalid token format")

    try:
        payload = jwt.decode(parts[1], get_settings().secret_key, algorithms=[JWT_ALGORITHM])
        return int(payload["id"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        logger.warning("Rejected invalid bearer token")
        raise _unauthorized("Invalid token", "Session expired. Please sign in again")
