import logging
import os
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError
from starlette.middleware.sessions import SessionMiddleware

from app import db as app_db
from app import models as _models  # noqa: F401 - register SQLAlchemy models before create_all
from app.bootstrap import ensure_default_admin
from app.config import get_settings
from app.routers import auth, controls, projects, reports, tables, threats

try:
    from threat_workbench import get_runtime_version
except ModuleNotFoundError:  # pragma: no cover - compatibility for non-editable local runs
    from src.threat_workbench import get_runtime_version


def _sqlite_path_from_url(database_url: str) -> Path | None:
    url = (database_url or "").strip()
    if not url.startswith("sqlite:///"):
        return None
    raw = url[len("sqlite:///") :]
    return Path(raw)


def _backup_sqlite_files(db_path: Path, *, reason: str, include_db: bool) -> None:
    ts = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
    backup_dir = get_settings().runtime_dir / "db_recovery"
    backup_dir.mkdir(parents=True, exist_ok=True)
    targets = [Path(f"{db_path}-journal"), Path(f"{db_path}-wal")]
    if include_db:
        targets.append(db_path)
    for path in targets:
        if not path.exists():
            continue
        try:
            os.replace(str(path), str(backup_dir / f"{path.name}.{reason}.{ts}"))
        except OSError:
            logging.getLogger(__name__).exception("Failed to backup sqlite file: %s", path)


def _initialize_db_schema(database_url: str) -> None:
    active_engine = app_db.configure_database(database_url)
    app_db.Base.metadata.create_all(bind=active_engine)
    app_db.ensure_runtime_schema()
    with app_db.SessionLocal() as db:
        ensure_default_admin(db)


def _retry_after_backup(settings, db_path: Path, *, reason: str, include_db: bool) -> None:
    logger = logging.getLogger(__name__)
    _backup_sqlite_files(db_path, reason=reason, include_db=include_db)
    if app_db.engine is not None:
        app_db.engine.dispose()
    try:
        _initialize_db_schema(settings.database_url)
    except OperationalError:
        ts = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        fallback_dir = settings.runtime_dir / "db_recovery"
        fallback_dir.mkdir(parents=True, exist_ok=True)
        fallback_url = f"sqlite:///{(fallback_dir / f'threat_workbench_{reason}_{ts}.db').as_posix()}"
        logger.warning("SQLite recovery failed. Falling back to fresh database: %s", fallback_url)
        os.environ["DATABASE_URL"] = fallback_url
        get_settings.cache_clear()
        _initialize_db_schema(fallback_url)


def _init_db_with_recovery(settings) -> None:
    """
    Create tables + apply runtime schema, recovering from SQLite disk I/O errors caused by
    stale journal files or a corrupted database file.
    """
    logger = logging.getLogger(__name__)
    try:
        _initialize_db_schema(settings.database_url)
        return
    except OperationalError as e:
        db_path = _sqlite_path_from_url(settings.database_url)
        if "disk i/o error" not in str(e).lower() or not db_path:
            raise

    if Path(f"{db_path}-journal").exists():
        logger.warning("SQLite disk I/O error detected. Attempting journal recovery: %s", db_path)
        _retry_after_backup(settings, db_path, reason="journal_recovery", include_db=False)
        return

    logger.warning("SQLite disk I/O error detected. Backing up DB and creating a fresh database: %s", db_path)
    _retry_after_backup(settings, db_path, reason="db_recreate", include_db=True)


def create_app() -> FastAPI:
    # Respect runtime env overrides (tests, packaged launcher, temporary runs).
    get_settings.cache_clear()
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie_name,
        same_site="lax",
        https_only=False,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins or ["http://127.0.0.1", "http://localhost"],
        allow_origin_regex=settings.cors_allow_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _init_db_with_recovery(settings)

    app.include_router(auth.router)
    app.include_router(projects.router)
    app.include_router(tables.router)
    app.include_router(threats.router)
    app.include_router(controls.router)
    app.include_router(reports.router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/api/health")
    def api_health():
        return {"status": "ok", "version": get_runtime_version()}

    return app


app = create_app()
