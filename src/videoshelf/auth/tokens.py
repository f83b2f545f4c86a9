"""Bearer-token authentication.

Tokens are JWTs signed with the configured secret and carry the user id in
the ``id`` claim. Every verification failure maps to 401 before any store
access; only a verified token leads to the user lookup.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Header

from videoshelf.api.app import get_app_settings, get_db_session
from videoshelf.config import Settings
from videoshelf.core.errors import InternalError, NotFound, Unauthenticated
from videoshelf.db import repo
from videoshelf.db.repo import DbSession
from videoshelf.models.domain import UserEntity

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"
USER_ID_CLAIM = "id"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Pull the token out of an ``Authorization: Bearer <token>`` header.

    Returns None when the header is missing, uses another scheme, or
    carries no token.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


def issue_token(user_id: str, settings: Settings, expires_in: timedelta | None = None) -> str:
    """Sign a token for a user.

    Args:
        user_id: Value for the ``id`` claim.
        settings: Supplies secret, algorithm and default lifetime.
        expires_in: Override for the token lifetime.

    Returns:
        Encoded JWT.
    """
    if not settings.jwt_secret_key:
        raise InternalError("JWT secret not configured")
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(seconds=settings.token_ttl_seconds)
    payload = {USER_ID_CLAIM: user_id, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> str:
    """Verify a token and return its user id claim.

    Raises:
        Unauthenticated: Expired, malformed or wrongly signed token, or no id claim.
        InternalError: No secret configured.
    """
    if not settings.jwt_secret_key:
        raise InternalError("JWT secret not configured")
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise Unauthenticated("Token expired!") from e
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise Unauthenticated("Invalid token!") from e

    user_id = claims.get(USER_ID_CLAIM)
    if not isinstance(user_id, str) or not user_id:
        raise Unauthenticated("Invalid token!")
    return user_id


def authenticate(authorization: str | None, settings: Settings, session: DbSession) -> UserEntity:
    """Resolve the caller from an Authorization header value.

    Raises:
        Unauthenticated: No token, or token fails verification.
        NotFound: Token is valid but its user does not exist.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthenticated("No token provided!")

    user_id = decode_token(token, settings)

    user = repo.get_user(session, user_id)
    if user is None:
        raise NotFound("User not found!")
    return user


def get_current_user(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_app_settings),
    session: DbSession = Depends(get_db_session),
) -> UserEntity:
    """Dependency: the authenticated caller."""
    return authenticate(authorization, settings, session)


def get_owner_if_enforced(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_app_settings),
    session: DbSession = Depends(get_db_session),
) -> UserEntity | None:
    """Dependency: the authenticated caller when owner auth is enforced, else None.

    Edit and delete routes are open by default; ``enforce_owner_auth``
    turns the bearer check on for them.
    """
    if not settings.enforce_owner_auth:
        return None
    return authenticate(authorization, settings, session)
