from __future__ import annotations

import pytest

from app.models import Project
from app.services.errors import ProjectNotFound, ThreatNotFound
from app.services.item_store import add_item
from app.services.threat_builder import compose_and_save, compose_for_project
from app.services.threat_composer import Link
from app.services.threat_store import (
    delete_threat,
    get_threat,
    list_threats,
    save_threat,
    threat_payload,
    threat_to_dict,
    update_threat,
)

INITIAL_TEXT = (
    "A Hacker with phishing could target the database to conduct Data Theft in order to cause reputational harm"
)
INTERMEDIATE_TEXT = (
    "A Hacker with phishing could steal credentials which leads to account takeover, "
    "resulting in Data Theft impacting Integrity of database in order to cause reputational harm"
)


@pytest.fixture()
def seeded(db, project):
    add_item(db, project.id, 1, "phishing")
    add_item(db, project.id, 3, "database")
    add_item(db, project.id, 4, "steal credentials")
    add_item(db, project.id, 7, "cause reputational harm")
    return project


def _save_initial(db, project_id):
    # Actors[6] is the "Hacker" preset and Local Objectives[0] is "Data Theft".
    links = [Link(0, 6, 1, 0), Link(3, 0, 5, 0), Link(5, 0, 7, 0)]
    return compose_and_save(db, project_id, "initial", links)


def _save_intermediate(db, project_id, base_id):
    return compose_and_save(
        db,
        project_id,
        "intermediate",
        [Link(4, 0, 6, 1)],
        base_threat_id=base_id,
        local_impact="account takeover",
    )


def test_full_chain_is_saved_with_parents(db, seeded) -> None:
    _, initial = _save_initial(db, seeded.id)
    assert initial.threat_statement == INITIAL_TEXT
    assert initial.parent_threat_id is None

    _, intermediate = _save_intermediate(db, seeded.id, initial.id)
    assert intermediate.threat_statement == INTERMEDIATE_TEXT
    assert intermediate.parent_threat_id == initial.id
    assert threat_payload(intermediate)["ciana"] == "Integrity"

    _, final = compose_and_save(
        db,
        seeded.id,
        "final",
        [],
        base_threat_id=intermediate.id,
        techniques=[{"techniqueId": "T1078", "techniqueName": "Valid Accounts"}],
    )
    assert final.threat_statement == "Using Valid Accounts (T1078), a" + INTERMEDIATE_TEXT[1:]
    assert final.parent_threat_id == intermediate.id
    assert threat_payload(final)["techniques"][0]["techniqueId"] == "T1078"

    assert [t.stage for t in list_threats(db, seeded.id)] == ["initial", "intermediate", "final"]
    assert [t.id for t in list_threats(db, seeded.id, "final")] == [final.id]


def test_incomplete_statement_is_not_saved(db, seeded) -> None:
    with pytest.raises(ValueError, match="Select items from"):
        compose_and_save(db, seeded.id, "initial", [Link(0, 6, 1, 0)])
    assert list_threats(db, seeded.id) == []


def test_preview_does_not_persist(db, seeded) -> None:
    result = compose_for_project(db, seeded.id, "initial", [Link(0, 6, 1, 0), Link(3, 0, 5, 0), Link(5, 0, 7, 0)])
    assert result.complete
    assert result.text == INITIAL_TEXT
    assert list_threats(db, seeded.id) == []


def test_base_must_have_previous_stage(db, seeded) -> None:
    _, initial = _save_initial(db, seeded.id)
    _, intermediate = _save_intermediate(db, seeded.id, initial.id)
    with pytest.raises(ValueError):
        _save_intermediate(db, seeded.id, intermediate.id)
    with pytest.raises(ValueError):
        compose_for_project(db, seeded.id, "final", [], base_threat_id=initial.id)
    with pytest.raises(ThreatNotFound):
        _save_intermediate(db, seeded.id, 999)


def test_base_from_another_project_is_rejected(db, seeded) -> None:
    _, initial = _save_initial(db, seeded.id)
    other = Project(name="Other")
    db.add(other)
    db.commit()
    with pytest.raises(ValueError):
        _save_intermediate(db, other.id, initial.id)


def test_edited_base_falls_back_to_text_parsing(db, seeded) -> None:
    _, initial = _save_initial(db, seeded.id)
    edited = update_threat(db, initial.id, "A Hacker with phishing could target the database to conduct Fraud in order to profit")
    assert threat_payload(edited) == {}

    composed = compose_for_project(
        db, seeded.id, "intermediate", [Link(4, 0, 6, 1)], base_threat_id=initial.id, local_impact="chargebacks"
    )
    assert composed.text == (
        "A Hacker with phishing could steal credentials which leads to chargebacks, "
        "resulting in Fraud impacting Integrity of database in order to profit"
    )


def test_save_threat_validation(db, project) -> None:
    with pytest.raises(ValueError):
        save_threat(db, project.id, "   ")
    with pytest.raises(ValueError):
        save_threat(db, project.id, "Select an initial threat statement to build upon.", "intermediate")
    with pytest.raises(ValueError):
        save_threat(db, project.id, "text", "draft")
    with pytest.raises(ProjectNotFound):
        save_threat(db, project.id + 100, "text")


def test_update_keeps_payload_when_text_is_unchanged(db, project) -> None:
    threat = save_threat(db, project.id, "An insider could leak", payload={"actor": "insider"})
    update_threat(db, threat.id, "An insider could leak")
    assert threat_payload(get_threat(db, threat.id)) == {"actor": "insider"}
    with pytest.raises(ValueError):
        update_threat(db, threat.id, "")


def test_delete_detaches_children(db, project) -> None:
    parent = save_threat(db, project.id, "parent statement")
    child = save_threat(db, project.id, "child statement", "intermediate", parent_threat_id=parent.id)

    delete_threat(db, parent.id)
    db.expire_all()

    assert get_threat(db, child.id).parent_threat_id is None
    with pytest.raises(ThreatNotFound):
        get_threat(db, parent.id)


def test_threat_to_dict_shape(db, project) -> None:
    threat = save_threat(db, project.id, "An insider could leak", payload={"actor": "insider"})
    data = threat_to_dict(threat)
    assert data["stage"] == "initial"
    assert data["parent_threat_id"] is None
    assert data["payload"] == {"actor": "insider"}
    assert data["created_at"].endswith("Z")
