import json
from typing import Any


def to_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=True, default=str, sort_keys=True)


def from_json(value: str | None, fallback: Any) -> Any:
    if not value:
        return fallback
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return fallback
