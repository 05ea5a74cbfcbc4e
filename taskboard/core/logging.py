"""Structured logging configuration for security and application events."""

import logging
import sys
from typing import Any

from taskboard.core.config import get_settings

settings = get_settings()

# Create logger for security events
security_logger = logging.getLogger("taskboard.security")

# Create logger for application events
app_logger = logging.getLogger("taskboard")


def configure_logging(level: str | None = None) -> None:
    """Attach the console handler to the taskboard loggers (idempotent)."""
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    app_logger.setLevel(log_level)
    security_logger.setLevel(log_level)
    # security_logger propagates to app_logger, one handler is enough
    if not app_logger.handlers:
        app_logger.addHandler(console_handler)


def mask_email(email: str) -> str:
    """
    Mask email address for logging (show only first 3 chars and domain).

    Args:
        email: Email address to mask.

    Returns:
        Masked email string (e.g., "tes***@example.com").
    """
    if not email or "@" not in email:
        return "***"

    local_part, domain = email.split("@", 1)

    if len(local_part) <= 3:
        masked_local = "*" * len(local_part)
    else:
        masked_local = local_part[:3] + "***"

    return f"{masked_local}@{domain}"


def log_auth_success(user_id: int, email: str, created: bool = False) -> None:
    """
    Log successful identity verification.

    Args:
        user_id: Resolved user id.
        email: User email (will be masked).
        created: Whether the user was created by this login.
    """
    security_logger.info(
        f"Authentication successful - user_id={user_id}, email={mask_email(email)}"
        + (", created=True" if created else "")
    )


def log_auth_failure(reason: str, email: str | None = None) -> None:
    """
    Log failed identity verification.

    Args:
        reason: Reason for failure (generic, doesn't reveal if user exists).
        email: User email when known (will be masked).
    """
    message = f"Authentication failed - reason={reason}"
    if email:
        message += f", email={mask_email(email)}"
    security_logger.warning(message)


def log_access_denied(user_id: int, action: str, resource_id: int | None = None) -> None:
    """Log an ordinary denied-access outcome."""
    message = f"Access denied - user_id={user_id}, action={action}"
    if resource_id is not None:
        message += f", resource_id={resource_id}"
    security_logger.warning(message)


def log_permission_change(
    user_id: int,
    action: str,
    target_user_id: int | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """
    Log permission change event to console.

    Args:
        user_id: User who made the change.
        action: Action performed (grant, revoke, etc.).
        target_user_id: Target user ID (optional).
        details: Additional details (optional).
    """
    message = f"Permission change - user_id={user_id}, action={action}"
    if target_user_id is not None:
        message += f", target_user_id={target_user_id}"
    if details:
        message += f", details={details}"

    security_logger.info(message)
