from __future__ import annotations

import json
from pathlib import Path

from app.services.threat_relations import ThreatRecord

from ..models import ComposeRequest, to_compose_request, to_threat_record


def load_compose_file(path: Path) -> ComposeRequest:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("Input JSON must be an object with stage, tables and links.")
    return to_compose_request(raw)  # type: ignore[arg-type]


def load_threats_file(path: Path) -> list[ThreatRecord]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("Input JSON must be a list of saved threats.")
    records: list[ThreatRecord] = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError("Each saved threat must be an object.")
        records.append(to_threat_record(item))  # type: ignore[arg-type]
    return records


def dump_result_file(path: Path, payload: dict[str, object]) -> None:
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
