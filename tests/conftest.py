from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest


ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"

for path in (ROOT_DIR, SRC_DIR):
    value = str(path)
    if path.exists() and value not in sys.path:
        sys.path.insert(0, value)

# Keep runtime files (secrets, sqlite, exports) out of the working tree.
_RUNTIME_ROOT = Path(tempfile.mkdtemp(prefix="threat-workbench-tests-"))
os.environ["RUNTIME_DIR"] = str(_RUNTIME_ROOT)
os.environ["DATABASE_URL"] = f"sqlite:///{(_RUNTIME_ROOT / 'bootstrap.db').as_posix()}"
os.environ.setdefault("DEFAULT_ADMIN_USER", "admin")
os.environ.setdefault("DEFAULT_ADMIN_PASSWORD", "admin123!")


def _init_test_db(db_path: Path) -> None:
    import app.db as app_db
    from app import models  # noqa: F401

    app_db.configure_database(f"sqlite:///{db_path.as_posix()}")
    assert app_db.engine is not None
    app_db.Base.metadata.drop_all(bind=app_db.engine)
    app_db.Base.metadata.create_all(bind=app_db.engine)


@pytest.fixture()
def db(tmp_path):
    import app.db as app_db

    _init_test_db(tmp_path / "workbench.db")
    with app_db.SessionLocal() as session:
        yield session


@pytest.fixture()
def project(db):
    from app.models import Project

    row = Project(name="ACME", description="Test project")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture()
def client(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{(tmp_path / 'api.db').as_posix()}")
    monkeypatch.setenv("RUNTIME_DIR", str(tmp_path / "runtime"))

    from app.config import get_settings
    from app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
    get_settings.cache_clear()


@pytest.fixture()
def auth_client(client):
    response = client.post("/login", data={"username": "admin", "password": "admin123!"})
    assert response.status_code == 200
    return client
