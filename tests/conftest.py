import os
from datetime import UTC, datetime
from itertools import count
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Keep the module-level engine away from any developer database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("IDENTITY_SECRET", "test-identity-secret")

# Remaining settings may come from a local .env; never override the above
env_file = Path(__file__).parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file, override=False)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from taskboard.core.auth.permissions import Role  # noqa: E402
from taskboard.core.config import get_settings  # noqa: E402
from taskboard.core.db.deps import get_db  # noqa: E402
from taskboard.core.db.session import Base, build_engine  # noqa: E402
from taskboard.models import AppUser, TaskItem, TaskStatus, UserPermission  # noqa: E402
from tests.helpers import bearer_headers  # noqa: E402

# Clear settings cache so the environment above is picked up
get_settings.cache_clear()

_sequence = count(1)


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database per test (foreign keys on)."""
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """Database session for one test; services commit into the test database."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""
    from taskboard.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory creating a user with one permission record of the given role."""

    def _make_user(
        role: Role = Role.USER,
        display_name: str | None = None,
        email: str | None = None,
    ) -> AppUser:
        n = next(_sequence)
        user = AppUser(
            external_id=f"uid-{n}",
            email=email or f"user{n}@example.com",
            display_name=display_name or f"User {n}",
            role=role,
        )
        user.permissions.append(UserPermission(role=role))
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_task(db_session):
    """Factory creating a task owned by ``owner``."""

    def _make_task(
        owner: AppUser,
        title: str = "Task",
        description: str | None = None,
        status: TaskStatus = TaskStatus.OPEN,
        created_at: datetime | None = None,
    ) -> TaskItem:
        created_at = created_at or datetime.now(UTC)
        task = TaskItem(
            title=title,
            description=description,
            owner_id=owner.id,
            created_at=created_at,
            updated_at=created_at,
        )
        task.apply_status(status, now=created_at)
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task

    return _make_task


@pytest.fixture
def super_admin(make_user):
    return make_user(Role.SUPER_ADMIN, display_name="Sam Super")


@pytest.fixture
def admin_user(make_user):
    return make_user(Role.ADMIN, display_name="Ada Admin")


@pytest.fixture
def standard_user(make_user):
    return make_user(Role.USER, display_name="Stan Standard")


@pytest.fixture
def other_user(make_user):
    return make_user(Role.USER, display_name="Olga Other")


@pytest.fixture
def read_only_user(make_user):
    return make_user(Role.READ_ONLY, display_name="Rita Reader")


@pytest.fixture
def auth_headers():
    """Build authentication headers for an existing user."""

    def _auth_headers(user: AppUser) -> dict[str, str]:
        return bearer_headers(user.external_id, user.email, user.display_name)

    return _auth_headers
