from datetime import timedelta
from types import SimpleNamespace

from meetups.core.security import (
    create_access_token,
    create_user_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("secret1")

    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_user_token_claims():
    token = create_user_token(SimpleNamespace(id=7, email="a@x.com"))

    claims = decode_access_token(token)

    assert claims["sub"] == "7"
    assert claims["email"] == "a@x.com"
    assert "exp" in claims


def test_expired_token_rejected():
    token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-10))

    assert decode_access_token(token) is None


def test_tampered_token_rejected():
    token = create_access_token({"sub": "1"})
    header, payload, signature = token.split(".")

    assert decode_access_token(f"{header}.{payload}.{signature[::-1]}") is None
    assert decode_access_token("not-a-token") is None
