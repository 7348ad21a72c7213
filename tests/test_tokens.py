from __future__ import annotations

import jwt
import pytest

from ticketing.auth.jwt import JwtTokens
from ticketing.auth.login_codes import generate_login_code, hash_login_code
from ticketing.auth.password import hash_password, verify_password
from ticketing.services.exceptions import AuthenticationError

SECRET = "unit_test_secret_with_enough_bytes_1234"


def test_issue_then_verify_returns_subject():
    tokens = JwtTokens(secret=SECRET)
    token = tokens.issue("user-1", "u@example.com", ["attendee"])

    assert tokens.verify(token) == "user-1"
    claims = jwt.decode(token, SECRET, algorithms=["HS256"], audience=tokens.audience)
    assert claims["email"] == "u@example.com"
    assert claims["roles"] == ["attendee"]


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        JwtTokens(secret="another_secret_with_enough_bytes_12345").issue("u", "u@example.com", []),
        JwtTokens(secret=SECRET, audience="someone-else").issue("u", "u@example.com", []),
        JwtTokens(secret=SECRET).issue("u", "u@example.com", [], ttl_seconds=-1),
    ],
)
def test_verify_rejects_bad_tokens(token):
    with pytest.raises(AuthenticationError):
        JwtTokens(secret=SECRET).verify(token)


def test_password_hashing():
    hashed = hash_password("StrongPass123")

    assert hashed != "StrongPass123"
    assert verify_password("StrongPass123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("StrongPass123", None)


def test_login_codes_are_six_digits():
    code = generate_login_code()

    assert len(code) == 6 and code.isdigit()
    assert hash_login_code(code) == hash_login_code(code)
    assert hash_login_code(code) != code
