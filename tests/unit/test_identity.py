"""Unit tests for identity token verification."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from taskboard.core.auth.identity import IdentityVerifier, create_identity_token
from taskboard.core.config import Settings, get_settings
from taskboard.core.exceptions import InvalidCredentialError


def _encode(claims: dict) -> str:
    settings = get_settings()
    return jwt.encode(claims, settings.IDENTITY_SECRET, algorithm=settings.IDENTITY_ALGORITHM)


def _expiry() -> datetime:
    return datetime.now(UTC) + timedelta(minutes=5)


class TestIdentityVerifier:
    """Tests for IdentityVerifier.verify."""

    def test_round_trip(self):
        """Test a minted token verifies to the same identity."""
        token = create_identity_token("uid-42", "ann@example.com", name="Ann")

        claims = IdentityVerifier().verify(token)

        assert claims.uid == "uid-42"
        assert claims.email == "ann@example.com"
        assert claims.name == "Ann"

    def test_uid_falls_back_to_sub(self):
        """Test the uid comes from sub when user_id is absent."""
        token = _encode({"sub": "sub-only", "email": "a@example.com", "exp": _expiry()})

        assert IdentityVerifier().verify(token).uid == "sub-only"

    def test_name_falls_back_to_email_local_part(self):
        """Test a missing name becomes the email local part."""
        token = create_identity_token("uid-1", "bob.smith@example.com")

        assert IdentityVerifier().verify(token).name == "bob.smith"

    def test_expired_token_rejected(self):
        """Test an expired token raises InvalidCredentialError."""
        token = create_identity_token(
            "uid-1", "a@example.com", expires_delta=timedelta(seconds=-30)
        )

        with pytest.raises(InvalidCredentialError):
            IdentityVerifier().verify(token)

    def test_wrong_secret_rejected(self):
        """Test a token signed with another key is rejected."""
        token = jwt.encode(
            {"sub": "uid-1", "email": "a@example.com", "exp": _expiry()},
            "some-other-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidCredentialError):
            IdentityVerifier().verify(token)

    @pytest.mark.parametrize("token", ["", "not-a-jwt"])
    def test_malformed_token_rejected(self, token):
        """Test empty and malformed tokens are rejected."""
        with pytest.raises(InvalidCredentialError):
            IdentityVerifier().verify(token)

    def test_missing_email_rejected(self):
        """Test a token without an email claim is rejected."""
        token = _encode({"sub": "uid-1", "exp": _expiry()})

        with pytest.raises(InvalidCredentialError):
            IdentityVerifier().verify(token)

    def test_audience_enforced_when_configured(self):
        """Test the audience claim is checked when an audience is set."""
        settings = Settings(IDENTITY_SECRET="aud-secret", IDENTITY_AUDIENCE="taskboard")
        good = create_identity_token("uid-1", "a@example.com", settings=settings)
        bad = jwt.encode(
            {"sub": "uid-1", "email": "a@example.com", "aud": "other", "exp": _expiry()},
            "aud-secret",
            algorithm="HS256",
        )
        verifier = IdentityVerifier(settings=settings)

        assert verifier.verify(good).uid == "uid-1"
        with pytest.raises(InvalidCredentialError):
            verifier.verify(bad)
