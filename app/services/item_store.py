from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Project, TableItem
from app.services.errors import ItemNotFound, ProjectNotFound
from config.table_presets import PRESET_ONLY_TABLES, TABLE_PRESETS, TABLE_TITLES, table_title

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TableEntry:
    text: str
    # None for preset entries that only exist in config.
    row_id: int | None = None


def _require_project(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if not project:
        raise ProjectNotFound(project_id)
    return project


def _require_table(table_index: int) -> str:
    title = table_title(table_index)
    if not title:
        raise ValueError(f"Unknown table index: {table_index}")
    return title


def _rows_by_table(db: Session, project_id: int) -> dict[str, list[TableItem]]:
    rows = db.execute(
        select(TableItem)
        .where(TableItem.project_id == project_id)
        .order_by(TableItem.created_at.asc(), TableItem.id.asc())
    ).scalars().all()
    grouped: dict[str, list[TableItem]] = {title: [] for title in TABLE_TITLES}
    for row in rows:
        grouped.setdefault(row.table_type, []).append(row)
    return grouped


def table_entries(db: Session, project_id: int) -> list[list[TableEntry]]:
    _require_project(db, project_id)
    grouped = _rows_by_table(db, project_id)
    tables: list[list[TableEntry]] = []
    for title in TABLE_TITLES:
        presets = TABLE_PRESETS.get(title, [])
        entries = [TableEntry(text=text) for text in presets]
        if title not in PRESET_ONLY_TABLES:
            seen = {entry.text for entry in entries}
            for row in grouped.get(title, []):
                # Tables merged with presets hide duplicate project rows.
                if presets and row.item_text in seen:
                    continue
                seen.add(row.item_text)
                entries.append(TableEntry(text=row.item_text, row_id=int(row.id)))
        tables.append(entries)
    return tables


def table_contents(db: Session, project_id: int) -> list[dict[str, Any]]:
    return [
        {"title": title, "items": [entry.text for entry in entries]}
        for title, entries in zip(TABLE_TITLES, table_entries(db, project_id))
    ]


def get_item(db: Session, project_id: int, table_index: int, item_index: int) -> str:
    _require_table(table_index)
    entries = table_entries(db, project_id)[table_index]
    if item_index < 0 or item_index >= len(entries):
        raise ItemNotFound(f"{table_index}:{item_index}")
    return entries[item_index].text


def _editable_row(db: Session, project_id: int, table_index: int, item_index: int) -> TableItem:
    _require_table(table_index)
    entries = table_entries(db, project_id)[table_index]
    if item_index < 0 or item_index >= len(entries):
        raise ItemNotFound(f"{table_index}:{item_index}")
    entry = entries[item_index]
    if entry.row_id is None:
        raise ValueError("Preset items cannot be changed")
    row = db.get(TableItem, entry.row_id)
    if row is None:
        raise ItemNotFound(entry.row_id)
    return row


def add_item(db: Session, project_id: int, table_index: int, text: str) -> TableItem:
    title = _require_table(table_index)
    _require_project(db, project_id)
    if title in PRESET_ONLY_TABLES:
        raise ValueError(f"{title} only offers preset items")
    value = (text or "").strip()
    if not value:
        raise ValueError("Item text is required")

    row = TableItem(project_id=project_id, table_type=title, item_text=value)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Added %s item for project %s: %r", title, project_id, value)
    return row


def edit_item(db: Session, project_id: int, table_index: int, item_index: int, text: str) -> TableItem:
    value = (text or "").strip()
    if not value:
        raise ValueError("Item text is required")
    row = _editable_row(db, project_id, table_index, item_index)
    row.item_text = value
    db.commit()
    db.refresh(row)
    return row


def remove_item(db: Session, project_id: int, table_index: int, item_index: int) -> None:
    row = _editable_row(db, project_id, table_index, item_index)
    db.delete(row)
    db.commit()
    logger.info("Removed %s item %s from project %s", row.table_type, row.id, project_id)
