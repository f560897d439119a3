from datetime import timedelta

import jwt
import pytest

from utils.auth_utils import (
    compare_password,
    generate_access_token,
    generate_refresh_token,
    hash_password,
    verify_access_token,
    verify_refresh_token,
    verify_token,
)
from utils.errors import InvalidTokenError, TokenExpiredError, Unauthenticated


def test_hash_password_is_salted_and_verifiable():
    first = hash_password("s3cret-pass")
    second = hash_password("s3cret-pass")

    assert first != "s3cret-pass"
    assert first != second
    assert compare_password("s3cret-pass", first)
    assert compare_password("s3cret-pass", second)


def test_compare_password_rejects_wrong_or_missing_hash():
    hashed = hash_password("s3cret-pass")

    assert not compare_password("other-pass", hashed)
    assert not compare_password("s3cret-pass", "")


def test_access_token_round_trip(app_ctx):
    token = generate_access_token(7, "user")
    claims = verify_access_token(token)

    assert claims["userId"] == 7
    assert claims["role"] == "user"
    assert claims["exp"] > claims["iat"]


def test_access_token_lifetime_defaults_to_config(app_ctx):
    claims = verify_access_token(generate_access_token(1, "user"))
    assert claims["exp"] - claims["iat"] == int(timedelta(minutes=15).total_seconds())

    claims = verify_refresh_token(generate_refresh_token(1, "user"))
    assert claims["exp"] - claims["iat"] == int(timedelta(days=5).total_seconds())


def test_access_token_fails_on_refresh_path(app_ctx):
    access = generate_access_token(3, "admin")
    refresh = generate_refresh_token(3, "admin")

    with pytest.raises(InvalidTokenError):
        verify_refresh_token(access)
    with pytest.raises(InvalidTokenError):
        verify_access_token(refresh)


def test_expired_token_raises_token_expired(app_ctx):
    token = generate_access_token(3, "user", expires_delta=timedelta(seconds=-5))

    with pytest.raises(TokenExpiredError):
        verify_access_token(token)

    claims = verify_access_token(token, verify_exp=False)
    assert claims["userId"] == 3


def test_malformed_tokens_are_invalid(app_ctx):
    with pytest.raises(InvalidTokenError):
        verify_token("not-a-jwt", app_ctx.config["ACCESS_TOKEN_SECRET"])

    missing_role = jwt.encode({"userId": 1, "exp": 9999999999}, app_ctx.config["ACCESS_TOKEN_SECRET"], algorithm="HS256")
    with pytest.raises(InvalidTokenError):
        verify_access_token(missing_role)

    string_id = jwt.encode(
        {"userId": "1", "role": "user", "exp": 9999999999}, app_ctx.config["ACCESS_TOKEN_SECRET"], algorithm="HS256"
    )
    with pytest.raises(InvalidTokenError):
        verify_access_token(string_id)


def test_token_errors_are_unauthenticated():
    assert issubclass(InvalidTokenError, Unauthenticated)
    assert issubclass(TokenExpiredError, Unauthenticated)
    assert TokenExpiredError().status_code == 401
