from app.routers import auth, controls, projects, reports, tables, threats

__all__ = [
    "auth",
    "projects",
    "tables",
    "threats",
    "controls",
    "reports",
]
