"""Tests for password hashing and the session credential."""

from datetime import timedelta

import pytest
from jose import JWTError

from payments_api.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_is_argon2_and_verifies(self):
        hashed = hash_password("SecurePass123!")
        assert hashed.startswith("$argon2")
        assert "SecurePass123!" not in hashed
        assert verify_password("SecurePass123!", hashed) is True

    def test_wrong_password_returns_false(self):
        """A mismatch is a plain False; callers decide which error to raise."""
        assert verify_password("WrongPass123!", hash_password("SecurePass123!")) is False


class TestSessionCredential:

    def test_carries_user_id_and_role(self):
        token = create_access_token({"sub": "user-1", "role": "Employee"})
        claims = decode_access_token(token)
        assert claims["sub"] == "user-1"
        assert claims["role"] == "Employee"
        assert "exp" in claims

    def test_expired_credential_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_tampered_credential_rejected(self):
        token = create_access_token({"sub": "user-1", "role": "Customer"})
        header, payload, signature = token.split(".")
        with pytest.raises(JWTError):
            decode_access_token(f"{header}.{payload}.{signature[::-1]}")

    async def test_expired_cookie_is_unauthorized(self, client, customer_client):
        """An expired session cookie gets 401, like a missing one."""
        me = await customer_client.get("/api/auth/me")
        stale = create_access_token(
            {"sub": me.json()["id"], "role": "Customer"},
            expires_delta=timedelta(seconds=-1),
        )
        response = await client.get("/api/auth/me", headers={"Cookie": f"payments_session={stale}"})
        assert response.status_code == 401
