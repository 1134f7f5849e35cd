from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Project, SecurityControl, ThreatControl
from app.services.errors import ProjectNotFound
from app.services.threat_relations import resolve_family
from app.services.threat_store import list_threats, to_record
from app.utils.jsonx import to_json
from app.utils.reporting import render_threat_register_pdf

logger = logging.getLogger(__name__)


def build_register_entries(db: Session, project_id: int) -> list[dict[str, Any]]:
    threats = list_threats(db, project_id)
    records = [to_record(t) for t in threats]
    control_rows = db.execute(
        select(ThreatControl.threat_id, SecurityControl.name)
        .join(SecurityControl, SecurityControl.id == ThreatControl.control_id)
        .where(SecurityControl.project_id == project_id)
        .order_by(SecurityControl.name.asc())
    ).all()
    controls_by_threat: dict[int, list[str]] = {}
    for threat_id, name in control_rows:
        controls_by_threat.setdefault(int(threat_id), []).append(str(name))

    entries: list[dict[str, Any]] = []
    for number, threat in enumerate(threats, start=1):
        entries.append(
            {
                "number": number,
                "id": int(threat.id),
                "stage": threat.stage,
                "threat_statement": threat.threat_statement,
                "parent_threat_id": threat.parent_threat_id,
                "family_size": len(resolve_family(int(threat.id), records)),
                "controls": controls_by_threat.get(int(threat.id), []),
            }
        )
    return entries


def export_threat_register(db: Session, project_id: int) -> dict[str, Path]:
    project = db.get(Project, project_id)
    if not project:
        raise ProjectNotFound(project_id)

    entries = build_register_entries(db, project_id)
    pdf_path = render_threat_register_pdf(project, entries)
    json_path = pdf_path.with_suffix(".json")
    json_path.write_text(
        to_json({"project": {"id": project.id, "name": project.name}, "threats": entries}),
        encoding="utf-8",
    )
    logger.info("Threat register exported for project %s: %s", project_id, pdf_path)
    return {"pdf_path": pdf_path, "json_path": json_path}
