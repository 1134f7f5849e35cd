from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models import Project, SecurityControl, ThreatControl
from app.services.errors import ControlNotFound, ProjectNotFound
from app.services.threat_relations import resolve_family
from app.services.threat_store import get_threat, list_threats, to_record

logger = logging.getLogger(__name__)


def control_to_dict(control: SecurityControl) -> dict[str, Any]:
    return {
        "id": int(control.id),
        "project_id": int(control.project_id),
        "name": control.name,
        "description": control.description,
        "layer": control.layer,
        "type": control.type,
        "effectiveness_rating": control.effectiveness_rating,
    }


def create_control(
    db: Session,
    project_id: int,
    name: str,
    *,
    description: str = "",
    layer: int | None = None,
    control_type: str = "",
    effectiveness_rating: str = "",
) -> SecurityControl:
    if not db.get(Project, project_id):
        raise ProjectNotFound(project_id)
    value = (name or "").strip()
    if not value:
        raise ValueError("Control name is required")
    control = SecurityControl(
        project_id=project_id,
        name=value,
        description=(description or "").strip(),
        layer=layer,
        type=(control_type or "").strip(),
        effectiveness_rating=(effectiveness_rating or "").strip(),
    )
    db.add(control)
    db.commit()
    db.refresh(control)
    logger.info("Created control %s for project %s", control.id, project_id)
    return control


def list_controls(db: Session, project_id: int) -> list[SecurityControl]:
    return list(
        db.execute(
            select(SecurityControl)
            .where(SecurityControl.project_id == project_id)
            .order_by(SecurityControl.layer.asc(), SecurityControl.name.asc(), SecurityControl.id.asc())
        ).scalars().all()
    )


def family_threat_ids(db: Session, threat_id: int) -> set[int]:
    threat = get_threat(db, threat_id)
    records = [to_record(t) for t in list_threats(db, int(threat.project_id))]
    return {int(tid) for tid in resolve_family(int(threat.id), records)}


def _existing_family_ids(db: Session, threat_id: int) -> list[int]:
    threat = get_threat(db, threat_id)
    records = [to_record(t) for t in list_threats(db, int(threat.project_id))]
    present = {int(r.id) for r in records}
    # Walk-up may name parents that were deleted; only link rows that still exist.
    return sorted(int(tid) for tid in resolve_family(int(threat.id), records) if tid in present)


def family_control_ids(db: Session, threat_id: int) -> set[int]:
    ids = _existing_family_ids(db, threat_id)
    rows = db.execute(select(ThreatControl.control_id).where(ThreatControl.threat_id.in_(ids))).scalars().all()
    return {int(cid) for cid in rows}


def toggle_control(db: Session, threat_id: int, control_id: int) -> bool:
    """Link or unlink ``control_id`` across the whole threat family.

    Returns True when the control is linked after the call.
    """
    threat = get_threat(db, threat_id)
    control = db.get(SecurityControl, control_id)
    if not control or int(control.project_id) != int(threat.project_id):
        raise ControlNotFound(control_id)

    family = _existing_family_ids(db, threat_id)
    if control_id in family_control_ids(db, threat_id):
        db.execute(
            delete(ThreatControl).where(ThreatControl.threat_id.in_(family), ThreatControl.control_id == control_id)
        )
        db.commit()
        logger.info("Removed control %s from threat family %s", control_id, family)
        return False

    for tid in family:
        db.add(ThreatControl(threat_id=tid, control_id=control_id))
    db.commit()
    logger.info("Linked control %s to threat family %s", control_id, family)
    return True
