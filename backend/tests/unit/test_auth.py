from datetime import timedelta

from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jwt import ExpiredSignatureError
import pytest

from directory.auth import (
    create_access_token,
    decode_access_token,
    get_current_user,
    get_current_user_optional,
    hash_api_key,
)


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_token_round_trip():
    token = create_access_token({"sub": "01HUSER000000000000000000A"})

    assert decode_access_token(token)["sub"] == "01HUSER000000000000000000A"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "someone"}, expires_delta=timedelta(seconds=-10))

    with pytest.raises(ExpiredSignatureError):
        decode_access_token(token)


def test_api_key_hash_is_sha256_hex():
    digest = hash_api_key("abc")

    assert digest == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


@pytest.mark.asyncio
async def test_current_user_requires_credentials():
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(None)

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_current_user_rejects_token_without_subject():
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(_credentials(create_access_token({"role": "admin"})))

    assert exc_info.value.detail == "Could not validate credentials"


@pytest.mark.asyncio
async def test_optional_user_ignores_garbage():
    assert await get_current_user_optional(_credentials("not-a-jwt")) is None
    assert await get_current_user_optional(_credentials(create_access_token({"sub": "u1"}))) == "u1"
