from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.db import get_db
from app.dependencies import get_current_user, get_project_or_404, json_body
from app.models import Project
from app.services.errors import NotFoundError
from app.services.item_store import add_item, edit_item, remove_item, table_contents
from app.services.threat_composer import parse_stage, stage_label, tables_for_stage
from app.services.threat_relations import asset_annotations
from app.services.threat_store import list_threats
from config.table_presets import PRESET_ONLY_TABLES, TABLE_ROLES, TABLE_TITLES

router = APIRouter(prefix="/api", tags=["tables"])

ASSET_TABLE_INDEX = 3


def _stage_or_400(stage: str) -> str:
    try:
        return parse_stage(stage)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/stages/{stage}/tables")
def stage_tables(stage: str, user=Depends(get_current_user)):
    stage_key = _stage_or_400(stage)
    active = tables_for_stage(stage_key)
    return {
        "stage": stage_key,
        "label": stage_label(stage_key),
        "tables": [
            {"index": i, "title": TABLE_TITLES[i], "role": TABLE_ROLES[i]}
            for i in active
        ],
    }


@router.get("/projects/{project_id}/tables")
def project_tables(
    stage: str = Query(default=""),
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    active = set(tables_for_stage(_stage_or_400(stage))) if stage else set(range(len(TABLE_TITLES)))
    tables = table_contents(db, project.id)
    return {
        "project_id": project.id,
        "tables": [
            {
                "index": i,
                "title": table["title"],
                "role": TABLE_ROLES[i],
                "items": table["items"],
                "active": i in active,
                "editable": table["title"] not in PRESET_ONLY_TABLES,
            }
            for i, table in enumerate(tables)
        ],
    }


@router.post("/projects/{project_id}/tables/{table_index}/items", status_code=201)
def create_item(
    table_index: int,
    payload: dict = Depends(json_body),
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        row = add_item(db, project.id, table_index, str(payload.get("text", "") or ""))
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return {"id": row.id, "table_index": table_index, "text": row.item_text}


@router.put("/projects/{project_id}/tables/{table_index}/items/{item_index}")
def update_item(
    table_index: int,
    item_index: int,
    payload: dict = Depends(json_body),
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        row = edit_item(db, project.id, table_index, item_index, str(payload.get("text", "") or ""))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return {"id": row.id, "table_index": table_index, "item_index": item_index, "text": row.item_text}


@router.delete("/projects/{project_id}/tables/{table_index}/items/{item_index}")
def delete_item(
    table_index: int,
    item_index: int,
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    try:
        remove_item(db, project.id, table_index, item_index)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return {"status": "deleted"}


@router.get("/projects/{project_id}/assets/annotations")
def project_asset_annotations(
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    assets = table_contents(db, project.id)[ASSET_TABLE_INDEX]["items"]
    statements = [t.threat_statement for t in list_threats(db, project.id)]
    annotations = asset_annotations(assets, statements)
    return {
        "items": [
            {"index": i, "asset": asset, "threats": annotations.get(i, "")}
            for i, asset in enumerate(assets)
        ]
    }
