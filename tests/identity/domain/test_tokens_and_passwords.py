"""Tests for bearer tokens and password hashing."""

from datetime import timedelta

import pytest
from jose import jwt

from storefront.identity.account import AccountRole
from storefront.identity.passwords import hash_password, verify_password
from storefront.identity.tokens import Principal, decode_token, issue_token
from storefront.shared.errors import AuthenticationError
from storefront.utils import settings


class TestPasswords:
    def test_hash_verifies(self):
        hashed = hash_password("correct-horse")
        assert hashed != "correct-horse"
        assert verify_password("correct-horse", hashed)
        assert not verify_password("wrong-horse", hashed)


class TestTokens:
    def test_round_trip_resolves_principal(self):
        token = issue_token("acc-001", "Seller")
        principal = decode_token(token)

        assert principal == Principal(account_id="acc-001", role=AccountRole.SELLER)
        assert principal.is_seller
        assert not principal.is_customer

    def test_token_claims(self):
        claims = jwt.decode(issue_token("acc-001", "Customer"), settings.jwt_secret(), algorithms=["HS256"])
        assert claims["sub"] == "acc-001"
        assert claims["role"] == "Customer"
        assert claims["exp"] > claims["iat"]

    def test_expired_token_rejected(self):
        token = issue_token("acc-001", "Customer", expires_in=timedelta(seconds=-5))
        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token)
        assert exc_info.value.messages == {"token": ["Token has expired"]}

    def test_tampered_token_rejected(self):
        token = jwt.encode({"sub": "acc-001", "role": "Admin"}, "some-other-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_unknown_role_rejected(self):
        token = jwt.encode({"sub": "acc-001", "role": "Guest"}, settings.jwt_secret(), algorithm="HS256")
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_secret_comes_from_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "rotated-secret")
        token = issue_token("acc-001", "Customer")
        claims = jwt.decode(token, "rotated-secret", algorithms=["HS256"])
        assert claims["sub"] == "acc-001"
