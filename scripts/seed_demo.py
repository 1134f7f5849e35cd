import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.db import Base, SessionLocal, engine, ensure_runtime_schema  # noqa: E402
from app.models import Project  # noqa: E402
from app.services.item_store import add_item  # noqa: E402
from app.services.threat_builder import compose_and_save  # noqa: E402
from app.services.threat_composer import Link  # noqa: E402

DEMO_ITEMS = {
    1: ["phishing", "stolen credentials"],
    3: ["customer database", "payment gateway"],
    4: ["harvest credentials"],
    7: ["cause financial loss", "cause reputational harm"],
}


def main():
    Base.metadata.create_all(bind=engine)
    ensure_runtime_schema()
    with SessionLocal() as db:
        project = Project(name="Demo Retailer", description="Seeded threat statement walkthrough")
        db.add(project)
        db.commit()
        db.refresh(project)

        for table_index, items in DEMO_ITEMS.items():
            for text in items:
                add_item(db, project.id, table_index, text)

        # Actors[1] is "Organised Crime Group"; Local Objectives[0] is "Data Theft".
        initial_links = [Link(0, 1, 1, 0), Link(3, 0, 5, 0), Link(5, 0, 7, 0)]
        _, initial = compose_and_save(db, project.id, "initial", initial_links)
        _, intermediate = compose_and_save(
            db,
            project.id,
            "intermediate",
            [Link(2, 0, 6, 4), Link(4, 0, 3, 0)],
            base_threat_id=initial.id,
            local_impact="degraded order processing",
        )
        _, final = compose_and_save(
            db,
            project.id,
            "final",
            [],
            base_threat_id=intermediate.id,
            techniques=[{"techniqueId": "T1566", "techniqueName": "Phishing"}],
        )
        print(f"Seeded: #{project.id} - {project.name}")
        for threat in (initial, intermediate, final):
            print(f"  {threat.stage}: {threat.threat_statement}")


if __name__ == "__main__":
    main()
