from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from taskboard.core.config import get_settings

settings = get_settings()


def build_engine(database_url: str, **kwargs):
    """Create an engine; SQLite connections get foreign keys switched on."""
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)

    engine = create_engine(database_url, echo=settings.DB_ECHO, future=True, **kwargs)

    if is_sqlite:
        # Cascade/restrict rules on app_users depend on this pragma
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()
