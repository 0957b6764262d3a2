from __future__ import annotations

import logging
from typing import Optional, Sequence

import jwt
from pydantic import BaseModel

from src.app.domain.errors import AuthenticationError, SessionExpiredError

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class CurrentUser(BaseModel):
    id: str
    username: Optional[str] = None


def verify_token(
    token: str,
    secret: str,
    algorithms: Sequence[str] = ("HS256",),
) -> CurrentUser:
    """
    Verify a JWT and return the identity claims it carries.

    Raises:
        SessionExpiredError: If the token signature is valid but it has expired
        AuthenticationError: For any other verification failure
    """
    try:
        payload = jwt.decode(token, secret, algorithms=list(algorithms))
    except jwt.ExpiredSignatureError as expired:
        raise SessionExpiredError() from expired
    except jwt.InvalidTokenError as invalid:
        logger.info("Rejected token: %s", type(invalid).__name__)
        raise AuthenticationError() from invalid

    user_id = payload.get("userId") or payload.get("sub")
    if not user_id:
        raise AuthenticationError()

    username = payload.get("username")
    return CurrentUser(id=str(user_id), username=str(username) if username is not None else None)


def authenticate(
    scheme: Optional[str],
    token: Optional[str],
    secret: str,
    algorithms: Sequence[str] = ("HS256",),
) -> CurrentUser:
    """Check the Authorization scheme, then verify the bearer token."""
    if not scheme or scheme.lower() != BEARER_SCHEME or not token:
        raise AuthenticationError()
    return verify_token(token, secret, algorithms)
