from datetime import UTC, datetime, timedelta
from uuid import uuid4

from src.adapters.auth.crypto import JWTAuthAdapter
from src.api.auth_utils import create_access_token, decode_access_token


def test_hash_verify_success():
    auth = JWTAuthAdapter()
    pwd = "my-secret-password"
    hashed = auth.hash_password(pwd)

    assert hashed != pwd
    assert hashed.startswith("$argon2")
    assert auth.verify_password(pwd, hashed) is True


def test_verify_fail():
    auth = JWTAuthAdapter()
    hashed = auth.hash_password("password")

    assert auth.verify_password("wrong", hashed) is False


def test_token_carries_subject_and_claims():
    auth = JWTAuthAdapter()
    user_id = uuid4()

    token = auth.create_token(user_id, 60, type="admin", role="super_admin")
    payload = auth.validate_token(token)

    assert payload is not None
    assert payload["sub"] == str(user_id)
    assert payload["type"] == "admin"
    assert payload["role"] == "super_admin"


def test_expired_token_is_rejected():
    token = create_access_token(
        {"sub": "someone"},
        timedelta(minutes=5),
        now_utc=datetime.now(UTC) - timedelta(hours=1),
    )

    assert decode_access_token(token) is None


def test_tampered_token_is_rejected():
    token = JWTAuthAdapter().create_token("uid", 60)

    header_and_payload = token.rsplit(".", 1)[0]

    assert decode_access_token(f"{header_and_payload}.c2lnbmF0dXJl") is None


def test_token_without_subject_is_rejected():
    assert decode_access_token(create_access_token({"type": "user"})) is None


def test_secret_key_is_read_at_use(monkeypatch):
    monkeypatch.setenv("EINFO_SECRET_KEY", "first-key")
    token = create_access_token({"sub": "someone"})

    monkeypatch.setenv("EINFO_SECRET_KEY", "rotated-key")

    assert decode_access_token(token) is None
