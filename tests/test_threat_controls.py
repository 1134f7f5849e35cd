from __future__ import annotations

import json

import pytest

from app.models import Project
from app.services.errors import ControlNotFound, ThreatNotFound
from app.services.threat_controls import (
    create_control,
    family_control_ids,
    family_threat_ids,
    list_controls,
    toggle_control,
)
from app.services.threat_register import build_register_entries, export_threat_register
from app.services.threat_store import save_threat


@pytest.fixture()
def chain(db, project):
    initial = save_threat(db, project.id, "initial statement")
    intermediate = save_threat(db, project.id, "intermediate statement", "intermediate", parent_threat_id=initial.id)
    final = save_threat(db, project.id, "final statement", "final", parent_threat_id=intermediate.id)
    unrelated = save_threat(db, project.id, "unrelated statement")
    return initial, intermediate, final, unrelated


def test_toggle_links_and_unlinks_whole_family(db, project, chain) -> None:
    initial, intermediate, final, unrelated = chain
    control = create_control(db, project.id, "MFA", layer=2, control_type="preventive")

    assert toggle_control(db, intermediate.id, control.id) is True
    for threat in (initial, intermediate, final):
        assert family_control_ids(db, threat.id) == {control.id}
    assert family_control_ids(db, unrelated.id) == set()

    assert toggle_control(db, final.id, control.id) is False
    assert family_control_ids(db, initial.id) == set()


def test_family_ids_follow_parent_links(db, chain) -> None:
    initial, intermediate, final, unrelated = chain
    assert family_threat_ids(db, final.id) == {initial.id, intermediate.id, final.id}
    assert family_threat_ids(db, unrelated.id) == {unrelated.id}


def test_toggle_rejects_unknown_or_foreign_controls(db, project, chain) -> None:
    initial = chain[0]
    other = Project(name="Other")
    db.add(other)
    db.commit()
    foreign = create_control(db, other.id, "WAF")

    with pytest.raises(ControlNotFound):
        toggle_control(db, initial.id, foreign.id)
    with pytest.raises(ControlNotFound):
        toggle_control(db, initial.id, 999)
    with pytest.raises(ThreatNotFound):
        toggle_control(db, 999, foreign.id)


def test_controls_require_a_name(db, project) -> None:
    with pytest.raises(ValueError):
        create_control(db, project.id, "  ")
    create_control(db, project.id, "Logging", layer=3)
    create_control(db, project.id, "MFA", layer=1)
    assert [c.name for c in list_controls(db, project.id)] == ["MFA", "Logging"]


def test_register_lists_every_statement(db, project, chain, tmp_path, monkeypatch) -> None:
    initial = chain[0]
    control = create_control(db, project.id, "MFA")
    toggle_control(db, initial.id, control.id)

    entries = build_register_entries(db, project.id)
    assert [e["number"] for e in entries] == [1, 2, 3, 4]
    assert entries[0]["family_size"] == 3
    assert entries[0]["controls"] == ["MFA"]
    assert entries[3]["controls"] == []

    monkeypatch.setenv("RUNTIME_DIR", str(tmp_path / "runtime"))
    from app.config import get_settings

    get_settings.cache_clear()
    try:
        paths = export_threat_register(db, project.id)
    finally:
        get_settings.cache_clear()
    assert paths["pdf_path"].exists()
    assert paths["pdf_path"].read_bytes().startswith(b"%PDF")
    data = json.loads(paths["json_path"].read_text(encoding="utf-8"))
    assert data["project"]["name"] == "ACME"
    assert len(data["threats"]) == 4
