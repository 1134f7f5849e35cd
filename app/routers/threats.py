from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.db import get_db
from app.dependencies import get_current_user, get_project_or_404, json_body
from app.models import Project
from app.services.errors import NotFoundError
from app.services.link_builder import LinkState, Selection, select_item
from app.services.threat_builder import compose_and_save, compose_for_project
from app.services.threat_composer import to_link
from app.services.threat_relations import resolve_family
from app.services.threat_store import (
    delete_threat,
    get_threat,
    list_threats,
    threat_to_dict,
    to_record,
    update_threat,
)

router = APIRouter(prefix="/api", tags=["threats"])


def _optional_int(value) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def _compose_args(payload: dict) -> dict:
    techniques = payload.get("selected_attack_techniques") or []
    if not isinstance(techniques, list):
        raise ValueError("selected_attack_techniques must be a list")
    return {
        "stage": str(payload.get("stage", "") or ""),
        "links": [to_link(link) for link in (payload.get("links") or [])],
        "base_threat_id": _optional_int(payload.get("base_threat_id")),
        "local_impact": str(payload.get("local_impact", "") or ""),
        "techniques": [t for t in techniques if isinstance(t, dict)],
    }


@router.post("/links/select")
def link_select(
    payload: dict = Depends(json_body),
    user=Depends(get_current_user),
):
    try:
        first = payload.get("first_selection")
        state = LinkState(
            links=tuple(to_link(link) for link in (payload.get("links") or [])),
            first_selection=(
                Selection(table_index=int(first["table_index"]), item_index=int(first["item_index"]))
                if first
                else None
            ),
            selected=tuple(payload["selected"]) if payload.get("selected") else LinkState().selected,
        )
        new_state, event = select_item(state, int(payload["table_index"]), int(payload["item_index"]))
    except (KeyError, TypeError, ValueError) as exc:
        return JSONResponse(status_code=400, content={"error": f"Invalid selection: {exc}"})

    return {
        "event": event,
        "links": [
            {"table1": link.table1, "item1": link.item1, "table2": link.table2, "item2": link.item2}
            for link in new_state.links
        ],
        "first_selection": (
            {
                "table_index": new_state.first_selection.table_index,
                "item_index": new_state.first_selection.item_index,
            }
            if new_state.first_selection
            else None
        ),
        "selected": list(new_state.selected),
    }


@router.post("/projects/{project_id}/threats/compose")
def compose_preview(
    payload: dict = Depends(json_body),
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        args = _compose_args(payload)
        composed = compose_for_project(db, project.id, args.pop("stage"), args.pop("links"), **args)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (TypeError, ValueError) as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return composed.to_payload()


@router.post("/projects/{project_id}/threats", status_code=201)
def save_composed_threat(
    payload: dict = Depends(json_body),
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        args = _compose_args(payload)
        composed, threat = compose_and_save(db, project.id, args.pop("stage"), args.pop("links"), **args)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (TypeError, ValueError) as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return {"threat": threat_to_dict(threat), "conflicts": composed.conflicts}


@router.get("/projects/{project_id}/threats")
def project_threats(
    stage: str = Query(default=""),
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        threats = list_threats(db, project.id, stage or None)
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return {"items": [threat_to_dict(t) for t in threats]}


@router.put("/threats/{threat_id}")
def edit_threat(
    threat_id: int,
    payload: dict = Depends(json_body),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        threat = update_threat(db, threat_id, str(payload.get("threat_statement", "") or ""))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return threat_to_dict(threat)


@router.delete("/threats/{threat_id}")
def remove_threat(
    threat_id: int,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        delete_threat(db, threat_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return {"status": "deleted"}


@router.get("/threats/{threat_id}/family")
def threat_family(
    threat_id: int,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        threat = get_threat(db, threat_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    threats = list_threats(db, int(threat.project_id))
    family = resolve_family(int(threat.id), [to_record(t) for t in threats])
    return {
        "threat_id": int(threat.id),
        "family": sorted(int(tid) for tid in family),
        "members": [threat_to_dict(t) for t in threats if int(t.id) in family],
    }
