import logging
import os

from fastapi import Request
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# ----------------------------------------------------
# 1. BASE CLASS FOR ALL MODELS
# ----------------------------------------------------
Base = declarative_base()


# ----------------------------------------------------
# 2. ENGINE SETTINGS
# ----------------------------------------------------
def _engine_kwargs(database_url: str) -> dict:
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite"):
        return {"pool_pre_ping": True}

    kwargs = {"connect_args": {"check_same_thread": False}}

    if url.database in (None, "", ":memory:"):
        # One shared connection, otherwise every session sees an empty DB
        kwargs["poolclass"] = StaticPool
    else:
        # Ensure directory exists
        directory = os.path.dirname(os.path.abspath(url.database))
        os.makedirs(directory, exist_ok=True)

    return kwargs


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ----------------------------------------------------
# 3. DATABASE HANDLE (engine + session factory)
# ----------------------------------------------------
class Database:
    """
    Owns the engine and the session factory.

    Created once at startup (see main.lifespan), handed to each request
    through get_db, and disposed on shutdown.
    """

    def __init__(self, database_url: str):
        self.url = database_url
        self.engine = create_engine(database_url, **_engine_kwargs(database_url))

        if self.engine.dialect.name == "sqlite":
            _enable_sqlite_foreign_keys(self.engine)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")


# ----------------------------------------------------
# 4. DEPENDENCY FOR FASTAPI
# ----------------------------------------------------
def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request):
    """
    FastAPI dependency: one DB session per request.
    """
    db = get_database(request).SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ----------------------------------------------------
# 5. AUTO-MIGRATION LOGIC FOR SQLITE
# ----------------------------------------------------
def table_exists(engine: Engine, table_name: str) -> bool:
    inspector = inspect(engine)
    return table_name in inspector.get_table_names()


def run_migrations(engine: Engine) -> None:
    """
    Performs minimal migrations:
    - If a table doesn't exist → create it.
    - If columns are missing → ADD COLUMN.

    This avoids FULL schema rebuild (not safe for SQLite).
    Versioned schema changes live in arthavidhi/migrations (Alembic).
    """
    # Register every model on Base.metadata
    from arthavidhi.models import bill_model, company_model, user_model  # noqa: F401

    missing = [t for t in Base.metadata.sorted_tables if not table_exists(engine, t.name)]
    if missing:
        logger.info("Creating tables: %s", ", ".join(t.name for t in missing))
        Base.metadata.create_all(bind=engine, tables=missing)

    inspector = inspect(engine)
    for table in Base.metadata.sorted_tables:
        if table in missing:
            continue

        existing_cols = {col["name"] for col in inspector.get_columns(table.name)}

        for col_name, col_obj in table.columns.items():
            if col_name in existing_cols:
                continue
            col_type = col_obj.type.compile(engine.dialect)
            alter = f"ALTER TABLE {table.name} ADD COLUMN {col_name} {col_type}"
            logger.info("[MIGRATION] %s", alter)
            with engine.begin() as conn:
                conn.execute(text(alter))

    logger.info("Migration complete")
