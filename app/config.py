import json
import os
import secrets
import sys
import tempfile
from functools import lru_cache
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# Env names whose shipped placeholder values must be replaced at runtime.
SECRET_PLACEHOLDERS = {
    "SECRET_KEY": "change-me-threat-workbench-secret",
    "PASSWORD_PEPPER": "change-me-password-pepper",
}
SECRETS_FILENAME = ".runtime_secrets.json"

_generated_secrets: dict[str, str] = {}


def load_env_file(env_file: Path = BASE_DIR / ".env") -> None:
    """Copy ``KEY=value`` lines into ``os.environ`` without overriding real env vars."""
    try:
        lines = env_file.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return
    for raw in lines:
        key, sep, value = raw.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#") or key in os.environ:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ[key] = value


load_env_file()


def default_runtime_dir() -> Path:
    if not (getattr(sys, "frozen", False) or getattr(sys, "_MEIPASS", "")):
        return BASE_DIR / "data"
    candidates = [Path.home() / ".threat_workbench" / "data", Path(tempfile.gettempdir()) / "ThreatWorkbench" / "data"]
    local_appdata = os.getenv("LOCALAPPDATA", "").strip()
    if local_appdata:
        candidates.insert(0, Path(local_appdata) / "ThreatWorkbench" / "data")
    for path in candidates:
        try:
            path.mkdir(parents=True, exist_ok=True)
            return path
        except OSError:
            continue
    return BASE_DIR / "data"


def _runtime_dir_from_env() -> Path:
    configured = os.getenv("RUNTIME_DIR", "").strip()
    return Path(configured).expanduser() if configured else default_runtime_dir()


def _read_secrets_file(path: Path) -> dict[str, str]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    if not isinstance(payload, dict):
        return {}
    return {str(k): str(v) for k, v in payload.items() if isinstance(v, str)}


def _write_secrets_file(path: Path, values: dict[str, str]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(values, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        return


def runtime_secret(env_name: str, runtime_dir: Path) -> str:
    """Env value, else a generated value persisted under ``runtime_dir``.

    Generated values are cached for the process so sessions and password
    hashes stay valid when settings are rebuilt.
    """
    current = os.getenv(env_name, "").strip()
    if current and current != SECRET_PLACEHOLDERS.get(env_name):
        return current
    if env_name in _generated_secrets:
        return _generated_secrets[env_name]

    store_path = runtime_dir / SECRETS_FILENAME
    stored = _read_secrets_file(store_path)
    value = stored.get(env_name, "").strip()
    if not value:
        value = secrets.token_urlsafe(32)
        stored[env_name] = value
        _write_secrets_file(store_path, stored)
    _generated_secrets[env_name] = value
    return value


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class Settings:
    def __init__(self) -> None:
        self.app_name: str = os.getenv("APP_NAME", "Threat Workbench")
        self.app_env: str = os.getenv("APP_ENV", "dev")
        self.runtime_dir: Path = _runtime_dir_from_env()
        self.runtime_dir.mkdir(parents=True, exist_ok=True)
        self.secret_key: str = runtime_secret("SECRET_KEY", self.runtime_dir)
        self.password_pepper: str = runtime_secret("PASSWORD_PEPPER", self.runtime_dir)
        self.session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "threat_workbench_session")
        default_db_path = self.runtime_dir / "threat_workbench.db"
        self.database_url: str = os.getenv("DATABASE_URL", f"sqlite:///{default_db_path.as_posix()}")
        self.default_admin_user: str = os.getenv("DEFAULT_ADMIN_USER", "admin")
        self.default_admin_password: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123!")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        self.cors_allowed_origins: list[str] = _split_csv(
            os.getenv(
                "CORS_ALLOWED_ORIGINS",
                "http://127.0.0.1,http://localhost,http://127.0.0.1:56471,http://localhost:56471",
            )
        )
        self.cors_allow_origin_regex: str = os.getenv(
            "CORS_ALLOW_ORIGIN_REGEX",
            r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        )

    @property
    def export_dir(self) -> Path:
        return self.runtime_dir / "exports"


@lru_cache
def get_settings() -> Settings:
    return Settings()
