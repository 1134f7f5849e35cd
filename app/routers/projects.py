from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.db import get_db
from app.dependencies import get_current_user, get_project_or_404, json_body
from app.models import Project, SavedThreat

router = APIRouter(prefix="/api", tags=["projects"])


def _project_context(project: Project, threat_count: int = 0) -> dict:
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "threat_count": int(threat_count),
        "created_at": project.created_at.isoformat() + "Z" if project.created_at else "",
    }


@router.get("/projects")
def list_projects(
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    counts = dict(
        db.execute(select(SavedThreat.project_id, func.count(SavedThreat.id)).group_by(SavedThreat.project_id)).all()
    )
    projects = db.execute(select(Project).order_by(Project.updated_at.desc(), Project.id.desc())).scalars().all()
    return {"items": [_project_context(p, counts.get(p.id, 0)) for p in projects]}


@router.post("/projects", status_code=201)
def create_project(
    payload: dict = Depends(json_body),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    name = str(payload.get("name", "") or "").strip()
    if not name:
        return JSONResponse(status_code=400, content={"error": "Project name is required"})
    project = Project(
        name=name[:255],
        description=str(payload.get("description", "") or "").strip(),
        created_by=user.id,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return _project_context(project)


@router.get("/projects/{project_id}")
def get_project(
    project: Project = Depends(get_project_or_404),
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    count = db.execute(
        select(func.count(SavedThreat.id)).where(SavedThreat.project_id == project.id)
    ).scalar_one()
    return _project_context(project, count)
