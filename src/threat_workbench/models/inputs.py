from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict

from app.services.threat_composer import Link, StageInputs, to_link, to_stage_inputs
from app.services.threat_relations import ThreatRecord


class RawComposeRequest(TypedDict, total=False):
    stage: str
    tables: list[Any]
    links: list[Any]
    stage_inputs: dict[str, Any]


class RawThreat(TypedDict, total=False):
    id: int | str
    threat_statement: str
    stage: str
    parent_threat_id: int | str | None
    project_id: int | str | None


@dataclass(slots=True)
class ComposeRequest:
    stage: str
    tables: list[Any]
    links: list[Link] = field(default_factory=list)
    stage_inputs: StageInputs = field(default_factory=StageInputs)


def _check_stage_inputs(raw: Any) -> None:
    if raw in (None, ""):
        return
    if not isinstance(raw, dict):
        raise ValueError("'stage_inputs' must be an object.")
    techniques = raw.get("selected_attack_techniques") or []
    if not isinstance(techniques, list) or not all(isinstance(t, dict) for t in techniques):
        raise ValueError("'selected_attack_techniques' must be a list of objects.")


def to_compose_request(payload: RawComposeRequest) -> ComposeRequest:
    tables = payload.get("tables") or []
    if not isinstance(tables, list):
        raise ValueError("'tables' must be a list.")
    if not all(isinstance(table, (list, dict)) for table in tables):
        raise ValueError("Each entry in 'tables' must be a list of items.")
    links = payload.get("links") or []
    if not isinstance(links, list):
        raise ValueError("'links' must be a list.")
    _check_stage_inputs(payload.get("stage_inputs"))
    return ComposeRequest(
        stage=str(payload.get("stage", "") or ""),
        tables=tables,
        links=[to_link(link) for link in links],
        stage_inputs=to_stage_inputs(payload.get("stage_inputs")),
    )


def to_threat_record(payload: RawThreat) -> ThreatRecord:
    if "id" not in payload:
        raise ValueError("Each threat needs an 'id'.")
    threat_id = payload["id"]
    if not isinstance(threat_id, (int, str)):
        raise ValueError(f"Threat id must be a string or number, got {threat_id!r}.")
    parent = payload.get("parent_threat_id")
    if parent not in (None, "") and not isinstance(parent, (int, str)):
        raise ValueError(f"Threat {threat_id!r} has an invalid parent_threat_id {parent!r}.")
    return ThreatRecord(
        id=threat_id,
        threat_statement=str(payload.get("threat_statement", "") or ""),
        stage=str(payload.get("stage", "") or ""),
        parent_threat_id=parent if parent not in (None, "") else None,
        project_id=payload.get("project_id"),
    )
