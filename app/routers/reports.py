from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db import get_db
from app.dependencies import get_current_user, get_project_or_404
from app.models import Project
from app.services.threat_register import build_register_entries, export_threat_register

router = APIRouter(prefix="/api", tags=["reports"])

_MEDIA_TYPES = {".pdf": "application/pdf", ".json": "application/json"}


@router.get("/projects/{project_id}/register")
def register_entries(
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    return {"project_id": project.id, "items": build_register_entries(db, project.id)}


@router.post("/projects/{project_id}/exports/register", status_code=201)
def export_register(
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    paths = export_threat_register(db, project.id)
    return {
        "pdf": paths["pdf_path"].name,
        "json": paths["json_path"].name,
        "pdf_url": f"/api/exports/{paths['pdf_path'].name}",
        "json_url": f"/api/exports/{paths['json_path'].name}",
    }


@router.get("/exports/{filename}")
def download_export(
    filename: str,
    user=Depends(get_current_user),
):
    export_dir = get_settings().export_dir.resolve()
    path = (export_dir / filename).resolve()
    media_type = _MEDIA_TYPES.get(Path(filename).suffix.lower())
    if path.parent != export_dir or media_type is None:
        raise HTTPException(status_code=404, detail="Export not found")
    if not path.exists():
        raise HTTPException(status_code=404, detail="Export file not found")
    return FileResponse(path, media_type=media_type, filename=path.name)
