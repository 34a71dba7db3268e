import pytest
from starlette.requests import Request

from techmarket.config import AuthConfig, Settings
from techmarket.errors import Unauthenticated
from techmarket.models import Role
from techmarket.services.auth import (
    create_access_token,
    decode_access_token,
    extract_token,
    get_current_user,
    hash_password,
    verify_password,
)


def _request(headers: dict) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def test_hash_and_verify_password():
    hashed = hash_password("hunter22", rounds=4)
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


def test_token_round_trip():
    token = create_access_token("01USER", "technician")
    auth = decode_access_token(token)
    assert auth.user_id == "01USER"
    assert auth.role is Role.TECHNICIAN


def test_expired_token_rejected():
    settings = Settings(jwt_secret="s3cret", auth=AuthConfig(token_expire_minutes=-1))
    token = create_access_token("01USER", "user", settings=settings)
    with pytest.raises(Unauthenticated):
        decode_access_token(token, settings=settings)


def test_token_signed_with_other_secret_rejected():
    token = create_access_token("01USER", "user", settings=Settings(jwt_secret="other"))
    with pytest.raises(Unauthenticated):
        decode_access_token(token)


def test_malformed_token_rejected():
    with pytest.raises(Unauthenticated):
        decode_access_token("not-a-jwt")


def test_missing_secret_fails_everything():
    token = create_access_token("01USER", "user")
    no_secret = Settings(jwt_secret="")
    with pytest.raises(Unauthenticated):
        decode_access_token(token, settings=no_secret)
    with pytest.raises(RuntimeError):
        create_access_token("01USER", "user", settings=no_secret)


def test_extract_token_from_custom_header_and_bearer():
    assert extract_token(_request({"x-auth-token": "abc"})) == "abc"
    assert extract_token(_request({"Authorization": "Bearer xyz"})) == "xyz"
    assert extract_token(_request({"Authorization": "Basic xyz"})) is None
    assert extract_token(_request({})) is None


def test_get_current_user_without_token():
    with pytest.raises(Unauthenticated) as exc:
        get_current_user(_request({}))
    assert "No token" in exc.value.detail


def test_get_current_user_with_token():
    token = create_access_token("01ADMIN", "admin")
    auth = get_current_user(_request({"x-auth-token": token}))
    assert auth.user_id == "01ADMIN"
    assert auth.role == Role.ADMIN
