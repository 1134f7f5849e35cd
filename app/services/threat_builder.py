from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy.orm import Session

from app.models import SavedThreat
from app.services.item_store import table_contents
from app.services.threat_composer import (
    STAGE_FINAL,
    STAGE_INITIAL,
    STAGE_INTERMEDIATE,
    ComposedStatement,
    StageInputs,
    compose_statement,
    parse_stage,
    to_technique,
)
from app.services.threat_store import get_threat, save_threat, threat_payload

logger = logging.getLogger(__name__)

# Stage a base statement must have to be built upon.
_BASE_STAGE = {STAGE_INTERMEDIATE: STAGE_INITIAL, STAGE_FINAL: STAGE_INTERMEDIATE}


def _load_base(db: Session, project_id: int, stage: str, base_threat_id: int | None) -> SavedThreat | None:
    if base_threat_id is None or stage not in _BASE_STAGE:
        return None
    base = get_threat(db, base_threat_id)
    if int(base.project_id) != int(project_id):
        raise ValueError("Base threat belongs to another project")
    expected = _BASE_STAGE[stage]
    if base.stage != expected:
        raise ValueError(f"A {stage} statement must build on a {expected} statement")
    return base


def build_stage_inputs(
    db: Session,
    project_id: int,
    stage: str,
    *,
    base_threat_id: int | None = None,
    local_impact: str = "",
    techniques: Iterable[Any] = (),
) -> tuple[StageInputs, SavedThreat | None]:
    base = _load_base(db, project_id, stage, base_threat_id)
    inputs = StageInputs(
        local_impact=local_impact or "",
        selected_attack_techniques=[to_technique(t) for t in techniques if t],
    )
    if base is not None and stage == STAGE_INTERMEDIATE:
        inputs.base_threat_statement = base.threat_statement
        inputs.base_payload = threat_payload(base)
    elif base is not None and stage == STAGE_FINAL:
        inputs.base_intermediate_threat = base.threat_statement
        inputs.base_intermediate_payload = threat_payload(base)
    return inputs, base


def compose_for_project(
    db: Session,
    project_id: int,
    stage: str,
    links: Iterable[Any],
    *,
    base_threat_id: int | None = None,
    local_impact: str = "",
    techniques: Iterable[Any] = (),
) -> ComposedStatement:
    stage_key = parse_stage(stage)
    tables = table_contents(db, project_id)
    inputs, _ = build_stage_inputs(
        db,
        project_id,
        stage_key,
        base_threat_id=base_threat_id,
        local_impact=local_impact,
        techniques=techniques,
    )
    return compose_statement(stage_key, list(links), tables, inputs)


def compose_and_save(
    db: Session,
    project_id: int,
    stage: str,
    links: Iterable[Any],
    *,
    base_threat_id: int | None = None,
    local_impact: str = "",
    techniques: Iterable[Any] = (),
) -> tuple[ComposedStatement, SavedThreat]:
    composed = compose_for_project(
        db,
        project_id,
        stage,
        links,
        base_threat_id=base_threat_id,
        local_impact=local_impact,
        techniques=techniques,
    )
    if not composed.complete:
        raise ValueError(composed.text)
    if composed.conflicts:
        logger.info("Saving %s statement with overwritten roles: %s", composed.stage, ", ".join(composed.conflicts))
    parent_id = base_threat_id if composed.stage in _BASE_STAGE else None
    threat = save_threat(
        db,
        project_id,
        composed.text,
        composed.stage,
        parent_threat_id=parent_id,
        payload=composed.fields,
    )
    return composed, threat
