from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models import Project, SavedThreat
from app.services.errors import ProjectNotFound, ThreatNotFound
from app.services.threat_composer import is_diagnostic, parse_stage
from app.services.threat_relations import ThreatRecord
from app.utils.jsonx import from_json, to_json

logger = logging.getLogger(__name__)


def list_threats(db: Session, project_id: int, stage: str | None = None) -> list[SavedThreat]:
    query = select(SavedThreat).where(SavedThreat.project_id == project_id)
    if stage:
        query = query.where(SavedThreat.stage == parse_stage(stage))
    query = query.order_by(SavedThreat.created_at.asc(), SavedThreat.id.asc())
    return list(db.execute(query).scalars().all())


def get_threat(db: Session, threat_id: int) -> SavedThreat:
    threat = db.get(SavedThreat, threat_id)
    if not threat:
        raise ThreatNotFound(threat_id)
    return threat


def threat_payload(threat: SavedThreat) -> dict[str, Any]:
    payload = from_json(threat.payload_json or "", {})
    return payload if isinstance(payload, dict) else {}


def to_record(threat: SavedThreat) -> ThreatRecord:
    return ThreatRecord(
        id=int(threat.id),
        threat_statement=str(threat.threat_statement or ""),
        stage=str(threat.stage or ""),
        parent_threat_id=int(threat.parent_threat_id) if threat.parent_threat_id is not None else None,
        project_id=int(threat.project_id),
        created_at=threat.created_at,
    )


def threat_to_dict(threat: SavedThreat) -> dict[str, Any]:
    return {
        "id": int(threat.id),
        "project_id": int(threat.project_id),
        "threat_statement": threat.threat_statement,
        "stage": threat.stage,
        "parent_threat_id": int(threat.parent_threat_id) if threat.parent_threat_id is not None else None,
        "payload": threat_payload(threat),
        "created_at": threat.created_at.isoformat() + "Z" if threat.created_at else "",
    }


def save_threat(
    db: Session,
    project_id: int,
    threat_statement: str,
    stage: str = "initial",
    parent_threat_id: int | None = None,
    payload: dict[str, Any] | None = None,
) -> SavedThreat:
    stage_key = parse_stage(stage)
    text = (threat_statement or "").strip()
    if not text:
        raise ValueError("Threat statement is required")
    if is_diagnostic(text):
        raise ValueError(f"Threat statement is incomplete: {text}")
    if not db.get(Project, project_id):
        raise ProjectNotFound(project_id)
    if parent_threat_id is not None:
        parent = get_threat(db, parent_threat_id)
        if int(parent.project_id) != int(project_id):
            raise ValueError("Parent threat belongs to another project")

    threat = SavedThreat(
        project_id=project_id,
        threat_statement=text,
        stage=stage_key,
        parent_threat_id=parent_threat_id,
        payload_json=to_json(payload or {}),
    )
    db.add(threat)
    db.commit()
    db.refresh(threat)
    logger.info(
        "Saved %s threat %s for project %s (parent=%s)", stage_key, threat.id, project_id, parent_threat_id
    )
    return threat


def update_threat(db: Session, threat_id: int, threat_statement: str) -> SavedThreat:
    threat = get_threat(db, threat_id)
    text = (threat_statement or "").strip()
    if not text:
        raise ValueError("Threat statement is required")
    if text != threat.threat_statement:
        threat.threat_statement = text
        # Hand-edited text no longer matches its structured fields.
        threat.payload_json = "{}"
    db.commit()
    db.refresh(threat)
    logger.info("Updated threat %s", threat_id)
    return threat


def delete_threat(db: Session, threat_id: int) -> None:
    threat = get_threat(db, threat_id)
    db.execute(
        update(SavedThreat).where(SavedThreat.parent_threat_id == threat.id).values(parent_threat_id=None)
    )
    db.delete(threat)
    db.commit()
    logger.info("Deleted threat %s from project %s", threat_id, threat.project_id)
