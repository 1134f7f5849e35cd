from __future__ import annotations

from pathlib import Path
import sys
import tomllib

from .core.composition import compose_request, threat_family

__version__ = "0.1.0"


def get_runtime_version() -> str:
    candidates: list[Path] = []
    meipass = getattr(sys, "_MEIPASS", "")
    if meipass:
        candidates.append(Path(meipass) / "pyproject.toml")
    candidates.append(Path(__file__).resolve().parents[2] / "pyproject.toml")

    for path in dict.fromkeys(candidates):
        if not path.exists():
            continue
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            continue
        if (data.get("project", {}) or {}).get("name") != "threat-workbench":
            continue
        version = str(data["project"].get("version", "")).strip()
        if version:
            return version
    return __version__


__all__ = ["__version__", "compose_request", "get_runtime_version", "threat_family"]
