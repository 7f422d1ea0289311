"""Tests for session token issuing and verification."""

import pytest
from jose import jwt

from src.config import Settings
from src.services.errors import InvalidToken
from src.services.tokens import TokenService


class TestTokenService:
    """Tests for TokenService."""

    @pytest.mark.parametrize("user_id", [1, 42, 987654321])
    def test_verify_returns_issued_subject(self, tokens, user_id):
        """A token issued for a user resolves to exactly that user's id."""
        assert tokens.verify(tokens.issue(user_id)) == user_id

    def test_token_has_no_expiry(self, tokens, settings):
        """Session tokens are long-lived and carry no exp claim."""
        claims = jwt.get_unverified_claims(tokens.issue(7))
        assert "exp" not in claims
        assert claims["sub"] == "7"

    def test_rejects_token_signed_with_other_secret(self, tokens):
        """Rotating the secret invalidates outstanding tokens."""
        other = TokenService(Settings(app_secret="another-secret"))
        with pytest.raises(InvalidToken):
            tokens.verify(other.issue(1))

    def test_rejects_tampered_token(self, tokens):
        """A payload swapped under another token's signature fails verification."""
        header, _, signature = tokens.issue(1).split(".")
        _, payload, _ = tokens.issue(2).split(".")
        tampered = f"{header}.{payload}.{signature}"
        with pytest.raises(InvalidToken):
            tokens.verify(tampered)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_rejects_malformed_token(self, tokens, token):
        """Malformed tokens fail verification."""
        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_rejects_token_without_integer_subject(self, tokens, settings):
        """A correctly signed token without a usable subject is invalid."""
        token = jwt.encode({"sub": "not-a-number"}, settings.app_secret, algorithm="HS256")
        with pytest.raises(InvalidToken):
            tokens.verify(token)

        token = jwt.encode({"userId": 1}, settings.app_secret, algorithm="HS256")
        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_requires_secret(self):
        """The shared secret must be provisioned."""
        with pytest.raises(ValueError):
            TokenService(Settings(app_secret=""))
