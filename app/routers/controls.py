from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.db import get_db
from app.dependencies import get_current_user, get_project_or_404, json_body
from app.models import Project, SecurityControl
from app.services.errors import NotFoundError
from app.services.threat_controls import (
    control_to_dict,
    create_control,
    family_control_ids,
    list_controls,
    toggle_control,
)
from app.services.threat_mitigations import mitigations_for_statement
from app.services.threat_store import get_threat

router = APIRouter(prefix="/api", tags=["controls"])


@router.get("/projects/{project_id}/controls")
def project_controls(
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    return {"items": [control_to_dict(c) for c in list_controls(db, project.id)]}


@router.post("/projects/{project_id}/controls", status_code=201)
def add_control(
    payload: dict = Depends(json_body),
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        layer = payload.get("layer")
        control = create_control(
            db,
            project.id,
            str(payload.get("name", "") or ""),
            description=str(payload.get("description", "") or ""),
            layer=int(layer) if layer not in (None, "") else None,
            control_type=str(payload.get("type", "") or ""),
            effectiveness_rating=str(payload.get("effectiveness_rating", "") or ""),
        )
    except (TypeError, ValueError) as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return control_to_dict(control)


@router.get("/threats/{threat_id}/controls")
def threat_controls(
    threat_id: int,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        threat = get_threat(db, threat_id)
        linked = family_control_ids(db, threat_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    controls = [c for c in list_controls(db, int(threat.project_id)) if int(c.id) in linked]
    return {"threat_id": threat_id, "items": [control_to_dict(c) for c in controls]}


@router.get("/threats/{threat_id}/mitigations")
def threat_mitigations(
    threat_id: int,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        threat = get_threat(db, threat_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    advice = mitigations_for_statement(str(threat.threat_statement or ""))
    return {"threat_id": threat_id, "techniques": advice["techniques"], "items": advice["mitigations"]}


@router.post("/threats/{threat_id}/controls/{control_id}/toggle")
def toggle_threat_control(
    threat_id: int,
    control_id: int,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        linked = toggle_control(db, threat_id, control_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    control = db.get(SecurityControl, control_id)
    return {"threat_id": threat_id, "control": control_to_dict(control), "linked": linked}
