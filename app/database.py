# app/database.py
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Record store connection (Supabase Postgres via pooler)
#
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size=1       : keep only 1 connection to the Supabase pooler
# - max_overflow=0    : do not open extra connections beyond the pool
# - pool_pre_ping=True: validate connections before using them
#
# In-memory SQLite (tests) shares one connection, since each new
# connection would see an empty database. File-backed SQLite keeps the
# default pool so concurrent requests get their own transactions.
# ---------------------------------------------------------

db_url = settings.DATABASE_URL


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///") or ":memory:" in url or "mode=memory" in url


def _build_engine(url: str):
    if url.startswith("sqlite"):
        if _is_memory_sqlite(url):
            return create_engine(
                url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        # Writers queue on the database lock for up to 30s
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": 30},
        )

    # Append sslmode=require if it is not already present
    if "sslmode=" not in url:
        if "?" in url:
            url = url + "&sslmode=require"
        else:
            url = url + "?sslmode=require"

    return create_engine(
        url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


engine = _build_engine(db_url)


def create_db_and_tables() -> None:
    """
    Create the kv_store table if it does not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Services stage their writes in this session and commit once per
    unit of work.
    """
    with Session(engine) as session:
        yield session
