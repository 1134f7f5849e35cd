import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import User
from app.security import hash_password

logger = logging.getLogger(__name__)


def ensure_default_admin(db: Session) -> User:
    settings = get_settings()
    user = (
        db.execute(select(User).where(User.username == settings.default_admin_user).order_by(User.id.desc()).limit(1))
        .scalars()
        .first()
    )
    if user:
        return user
    user = User(
        username=settings.default_admin_user,
        password_hash=hash_password(settings.default_admin_password),
    )
    db.add(user)
    db.commit()
    logger.info("Created default admin user %r", settings.default_admin_user)
    return user
