"""
Unit tests for password hashing and JWT helpers.
"""

from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("Secr3t!pass")

        assert hashed != "Secr3t!pass"
        assert verify_password("Secr3t!pass", hashed)

    def test_wrong_password(self):
        assert not verify_password("wrong", hash_password("Secr3t!pass"))

    def test_hashes_are_salted(self):
        assert hash_password("Secr3t!pass") != hash_password("Secr3t!pass")

    def test_missing_or_malformed_hash(self):
        assert not verify_password("anything", None)
        assert not verify_password("anything", "")
        assert not verify_password("anything", "not-a-bcrypt-hash")


class TestJwt:
    def test_access_token_claims(self):
        token = create_access_token("42", {"email": "a@example.com", "role": "admin"})
        payload = decode_token(token)

        assert payload["sub"] == "42"
        assert payload["type"] == "access"
        assert payload["role"] == "admin"

    def test_refresh_token_type(self):
        assert decode_token(create_refresh_token("42"))["type"] == "refresh"

    def test_invalid_token(self):
        assert decode_token("not.a.jwt") is None
