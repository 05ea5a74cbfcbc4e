"""Identity-provider bearer token verification.

The identity provider issues signed ID tokens; we only consume them. A token
that cannot be verified raises :class:`InvalidCredentialError`, which callers
can tell apart from a valid token for a user we have not seen yet.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from taskboard.core.config import Settings, get_settings
from taskboard.core.exceptions import InvalidCredentialError


@dataclass(frozen=True)
class IdentityClaims:
    """Verified identity extracted from an ID token."""

    uid: str
    email: str
    name: str


class IdentityVerifier:
    """Verify bearer ID tokens with python-jose."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def decode(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a token's signature, expiry, audience and issuer.

        Raises:
            InvalidCredentialError: If the token fails validation.
        """
        options = {"verify_aud": self.settings.IDENTITY_AUDIENCE is not None}
        try:
            return jwt.decode(
                token,
                self.settings.IDENTITY_SECRET,
                algorithms=[self.settings.IDENTITY_ALGORITHM],
                audience=self.settings.IDENTITY_AUDIENCE,
                issuer=self.settings.IDENTITY_ISSUER,
                options=options,
            )
        except JWTError as e:
            raise InvalidCredentialError(f"Invalid identity token: {e}") from e

    def verify(self, token: str) -> IdentityClaims:
        """
        Verify a bearer token and extract the identity claims.

        The uid comes from ``user_id``, falling back to ``sub``. The display
        name falls back to the email's local part, then to ``"User"``.

        Args:
            token: Raw bearer token.

        Returns:
            IdentityClaims for the token holder.

        Raises:
            InvalidCredentialError: If the token is invalid or lacks uid/email.
        """
        if not token:
            raise InvalidCredentialError("Missing identity token")

        payload = self.decode(token)

        uid = payload.get("user_id") or payload.get("sub")
        if not uid:
            raise InvalidCredentialError("Identity token has no subject")

        email = payload.get("email")
        if not email:
            raise InvalidCredentialError("Identity token has no email")

        name = payload.get("name") or email.split("@")[0] or "User"
        return IdentityClaims(uid=str(uid), email=email, name=name)


def create_identity_token(
    uid: str,
    email: str,
    name: str | None = None,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """
    Mint an ID token signed with the configured identity secret.

    Used by the CLI and the test-suite to stand in for the identity provider
    in development.

    Example:
        >>> token = create_identity_token("uid-1", "ann@example.com", "Ann")
        >>> IdentityVerifier().verify(token).uid
        'uid-1'
    """
    settings = settings or get_settings()
    now = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": uid,
        "user_id": uid,
        "email": email,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
    }
    if name:
        claims["name"] = name
    if settings.IDENTITY_AUDIENCE:
        claims["aud"] = settings.IDENTITY_AUDIENCE
    if settings.IDENTITY_ISSUER:
        claims["iss"] = settings.IDENTITY_ISSUER
    return jwt.encode(claims, settings.IDENTITY_SECRET, algorithm=settings.IDENTITY_ALGORITHM)
