from datetime import timedelta

import pytest
from jose import jwt

from vidshare.core.exceptions import AuthError
from vidshare.core.security import (
    _create_token,
    create_access_token,
    create_refresh_token,
    decode_token,
    extract_bearer_token,
    hash_password,
    verify_password,
)


def test_password_hash_roundtrip() -> None:
    hashed = hash_password("Secret#123")

    assert hashed != "Secret#123"
    assert verify_password("Secret#123", hashed)
    assert not verify_password("Secret#124", hashed)


def test_tokens_carry_subject_and_type() -> None:
    access = create_access_token("user-1")
    refresh = create_refresh_token("user-1")

    assert decode_token(access, "access") == "user-1"
    assert decode_token(refresh, "refresh") == "user-1"


def test_refresh_tokens_are_unique() -> None:
    assert create_refresh_token("user-1") != create_refresh_token("user-1")


def test_token_type_is_enforced() -> None:
    with pytest.raises(AuthError, match="Invalid access token"):
        decode_token(create_refresh_token("user-1"), "access")


def test_expired_token_rejected() -> None:
    expired = _create_token("user-1", "access", timedelta(seconds=-30))
    with pytest.raises(AuthError, match="Access token expired"):
        decode_token(expired, "access")


def test_foreign_signature_rejected() -> None:
    forged = jwt.encode({"sub": "user-1", "type": "access"}, "other-secret", algorithm="HS256")
    with pytest.raises(AuthError, match="Invalid access token"):
        decode_token(forged, "access")


def test_extract_bearer_token() -> None:
    assert extract_bearer_token(None) is None
    assert extract_bearer_token("Bearer abc.def") == "abc.def"
    assert extract_bearer_token("bearer abc") == "abc"
    with pytest.raises(AuthError):
        extract_bearer_token("Basic dXNlcjpwYXNz")
