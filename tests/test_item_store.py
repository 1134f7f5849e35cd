from __future__ import annotations

import pytest

from app.models import Project
from app.services.errors import ItemNotFound, ProjectNotFound
from app.services.item_store import add_item, edit_item, get_item, remove_item, table_contents, table_entries
from config.table_presets import TABLE_PRESETS, TABLE_TITLES


def test_tables_start_with_presets(db, project) -> None:
    tables = table_contents(db, project.id)
    assert [t["title"] for t in tables] == TABLE_TITLES
    assert tables[0]["items"] == TABLE_PRESETS["Actors"]
    assert tables[1]["items"] == []
    assert tables[6]["items"][4] == "Authentication"


def test_add_item_appends_after_presets(db, project) -> None:
    add_item(db, project.id, 5, "Ransom")
    add_item(db, project.id, 1, "phishing")
    add_item(db, project.id, 1, "phishing")

    tables = table_contents(db, project.id)
    assert tables[5]["items"][-1] == "Ransom"
    assert tables[5]["items"][: len(TABLE_PRESETS["Local Objectives"])] == TABLE_PRESETS["Local Objectives"]
    # Plain tables keep duplicates; only preset-merged tables hide them.
    assert tables[1]["items"] == ["phishing", "phishing"]


def test_duplicate_of_preset_is_hidden(db, project) -> None:
    add_item(db, project.id, 5, "Data Theft")
    assert table_contents(db, project.id)[5]["items"].count("Data Theft") == 1


def test_preset_only_tables_reject_items(db, project) -> None:
    for table_index in (0, 2, 6):
        with pytest.raises(ValueError):
            add_item(db, project.id, table_index, "custom")


def test_invalid_input_is_rejected(db, project) -> None:
    with pytest.raises(ValueError):
        add_item(db, project.id, 1, "   ")
    with pytest.raises(ValueError):
        add_item(db, project.id, 8, "phishing")
    with pytest.raises(ProjectNotFound):
        add_item(db, project.id + 100, 1, "phishing")


def test_edit_and_remove_items_by_position(db, project) -> None:
    add_item(db, project.id, 3, "database")
    add_item(db, project.id, 3, "laptop")

    edit_item(db, project.id, 3, 1, "field laptop")
    assert get_item(db, project.id, 3, 1) == "field laptop"

    remove_item(db, project.id, 3, 0)
    assert table_contents(db, project.id)[3]["items"] == ["field laptop"]

    with pytest.raises(ItemNotFound):
        get_item(db, project.id, 3, 5)


def test_preset_entries_cannot_be_edited(db, project) -> None:
    with pytest.raises(ValueError):
        edit_item(db, project.id, 5, 0, "Something else")
    with pytest.raises(ValueError):
        remove_item(db, project.id, 5, 0)


def test_items_are_scoped_to_project(db, project) -> None:
    other = Project(name="Other")
    db.add(other)
    db.commit()
    add_item(db, other.id, 1, "usb drop")

    assert table_contents(db, project.id)[1]["items"] == []
    entries = table_entries(db, other.id)[1]
    assert entries[0].text == "usb drop"
    assert entries[0].row_id is not None
