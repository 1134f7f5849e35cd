import logging
from pathlib import Path
from urllib.parse import unquote

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()
SessionLocal = sessionmaker(autoflush=False, autocommit=False, future=True)
engine: Engine | None = None
_database_url: str = ""


def _ensure_sqlite_parent(database_url: str) -> None:
    if not database_url.startswith("sqlite:///"):
        return
    raw = unquote(database_url[len("sqlite:///") :])
    if not raw or raw == ":memory:":
        return
    try:
        Path(raw).parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        # If the parent dir can't be created, SQLite will fail later with a clearer error.
        pass


def configure_database(database_url: str) -> Engine:
    """(Re)bind the module engine and session factory to ``database_url``."""
    global engine, _database_url
    _ensure_sqlite_parent(database_url)
    if engine is not None and database_url != _database_url:
        engine.dispose()
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, connect_args=connect_args, future=True)
    _database_url = database_url
    SessionLocal.configure(bind=engine)
    return engine


configure_database(get_settings().database_url)


def ensure_runtime_schema() -> None:
    """Apply lightweight runtime schema safety for SQLite deployments."""
    if engine is None or not _database_url.startswith("sqlite"):
        return
    with engine.begin() as conn:
        tcols = {
            row[1]
            for row in conn.exec_driver_sql("PRAGMA table_info(saved_threats)").fetchall()
            if row and len(row) > 1
        }
        # Structured payload column (added without Alembic); legacy rows stay text-only.
        if tcols and "payload_json" not in tcols:
            logger.info("Adding saved_threats.payload_json column")
            conn.exec_driver_sql("ALTER TABLE saved_threats ADD COLUMN payload_json TEXT")
            conn.exec_driver_sql("UPDATE saved_threats SET payload_json='{}' WHERE payload_json IS NULL")

        if tcols:
            conn.exec_driver_sql(
                "CREATE INDEX IF NOT EXISTS ix_saved_threats_project_stage ON saved_threats (project_id, stage)"
            )


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
