"""Helper functions for tests."""

from taskboard.core.auth.identity import create_identity_token


def bearer_headers(uid: str, email: str, name: str | None = None) -> dict[str, str]:
    """
    Build an Authorization header carrying an ID token for the given identity.

    Args:
        uid: Identity provider user ID.
        email: Email claim.
        name: Optional display name claim.

    Returns:
        Dictionary with the Authorization header.
    """
    token = create_identity_token(uid, email, name=name)
    return {"Authorization": f"Bearer {token}"}
