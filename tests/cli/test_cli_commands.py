"""Tests for the taskboard CLI."""

from unittest.mock import patch

import pytest
from sqlalchemy.orm import sessionmaker
from typer.testing import CliRunner

from taskboard.cli import app
from taskboard.core.auth.identity import IdentityVerifier
from taskboard.core.auth.permissions import Role

runner = CliRunner()


@pytest.fixture
def cli_sessions(engine):
    """Point the CLI at the test database; each command gets its own session."""
    with patch("taskboard.cli.SessionLocal", sessionmaker(bind=engine)):
        yield


class TestTokenCommand:
    """Tests for the token command."""

    def test_token_is_verifiable(self):
        """Test the minted token verifies with the configured secret."""
        result = runner.invoke(app, ["token", "uid-cli", "cli@example.com", "--name", "Cli User"])

        assert result.exit_code == 0
        claims = IdentityVerifier().verify(result.output.strip())
        assert claims.uid == "uid-cli"
        assert claims.email == "cli@example.com"
        assert claims.name == "Cli User"


class TestUsersCommands:
    """Tests for the users sub-commands."""

    def test_grant_role(self, cli_sessions, db_session, standard_user):
        """Test granting a role by email."""
        result = runner.invoke(app, ["users", "grant", standard_user.email, "Admin"])

        assert result.exit_code == 0
        db_session.refresh(standard_user)
        assert standard_user.role is Role.ADMIN

    def test_grant_unknown_email(self, cli_sessions):
        """Test granting to an unknown email fails."""
        result = runner.invoke(app, ["users", "grant", "nobody@example.com", "Admin"])

        assert result.exit_code == 1
        assert "No user" in result.output

    def test_list_users(self, cli_sessions, standard_user):
        """Test listing users shows their role labels."""
        result = runner.invoke(app, ["users", "list"])

        assert result.exit_code == 0
        assert "Stan Standard" in result.output
        assert "Standard User" in result.output
