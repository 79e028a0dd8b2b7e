from datetime import datetime, timedelta, timezone
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from jwt import PyJWTError

from .core.config import settings

logger = logging.getLogger(__name__)

# Tokens are issued by the upstream identity provider; the directory only verifies them
bearer_scheme_optional = HTTPBearer(auto_error=False)


def _secret_value(secret_obj: Any) -> str:
    if hasattr(secret_obj, "get_secret_value"):
        return str(secret_obj.get_secret_value())
    return str(secret_obj)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a bearer JWT."""
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.secret_key),
        algorithms=[settings.algorithm],
        options={"verify_aud": False},
    )
    return cast(Dict[str, Any], payload_raw)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Used by local tooling and tests; production tokens come from the identity
    provider signed with the same secret.

    Args:
        data: Claims to encode; ``sub`` must be the user id
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})

    return cast(
        str,
        jwt.encode(to_encode, _secret_value(settings.secret_key), algorithm=settings.algorithm),
    )


def _subject(token: str) -> Optional[str]:
    payload = decode_access_token(token)
    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub:
        logger.warning("Token payload missing 'sub' field")
        return None
    return sub


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme_optional),
) -> str:
    """
    Dependency returning the authenticated user id from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    invalid_credentials = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        user_id = _subject(credentials.credentials)
    except PyJWTError as e:
        logger.error(f"JWT validation error: {str(e)}")
        raise invalid_credentials
    if user_id is None:
        raise invalid_credentials

    logger.debug(f"Successfully validated token for user: {user_id}")
    return user_id


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme_optional),
) -> Optional[str]:
    """
    Like get_current_user, but returns None instead of raising for anonymous
    or invalid tokens.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        return _subject(credentials.credentials)
    except PyJWTError as e:
        logger.debug(f"Ignoring invalid optional token: {str(e)}")
        return None


def hash_api_key(api_key: str) -> str:
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


async def verify_public_api_key(x_api_key: Optional[str] = Header(default=None, alias="X-API-Key")) -> str:
    """
    Dependency guarding the public read API.

    The SHA-256 of the presented key is compared in constant time with
    PUBLIC_API_KEY_HASH.
    """
    if not x_api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="API key required")

    expected = settings.public_api_key_hash
    if not expected or not hmac.compare_digest(hash_api_key(x_api_key), expected.strip().lower()):
        logger.warning("Rejected public API request with an invalid key")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
    return x_api_key
