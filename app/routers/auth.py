from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db import get_db
from app.dependencies import get_current_user
from app.models import User
from app.security import verify_password

router = APIRouter(tags=["auth"])


def _user_context(user: User) -> dict:
    return {"id": user.id, "username": user.username}


@router.post("/login")
def login_submit(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    user = (
        db.execute(
            select(User)
            .where(User.username == username.strip())
            .order_by(User.id.desc())
            .limit(1)
        )
        .scalars()
        .first()
    )
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        return JSONResponse(status_code=400, content={"error": "Invalid username or password"})

    request.session["user_id"] = user.id
    request.session["username"] = user.username
    return _user_context(user)


@router.get("/logout")
def logout(request: Request):
    request.session.clear()
    return {"status": "logged_out"}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return _user_context(user)
