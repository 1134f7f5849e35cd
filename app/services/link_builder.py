from __future__ import annotations

from dataclasses import dataclass, field, replace

from app.services.threat_composer import Link
from config.table_presets import CIANA_TABLE_INDEX, STRIDE_TABLE_INDEX, STRIDE_TO_CIANA, TABLE_TITLES

EVENT_PENDING = "pending"
EVENT_LINKED = "linked"
EVENT_RESELECTED = "reselected"
EVENT_AUTO_LINKED = "auto_linked"


def _empty_selection() -> list[int | None]:
    return [None] * len(TABLE_TITLES)


@dataclass(slots=True, frozen=True)
class Selection:
    table_index: int
    item_index: int


@dataclass(slots=True, frozen=True)
class LinkState:
    links: tuple[Link, ...] = ()
    first_selection: Selection | None = None
    selected: tuple[int | None, ...] = field(default_factory=lambda: tuple(_empty_selection()))


def _mark(selected: tuple[int | None, ...], table_index: int, item_index: int) -> tuple[int | None, ...]:
    values = list(selected)
    if 0 <= table_index < len(values):
        values[table_index] = item_index
    return tuple(values)


def select_item(state: LinkState, table_index: int, item_index: int) -> tuple[LinkState, str]:
    selected = _mark(state.selected, table_index, item_index)

    ciana_item = STRIDE_TO_CIANA.get(item_index) if table_index == STRIDE_TABLE_INDEX else None
    if ciana_item is not None:
        link = Link(table1=STRIDE_TABLE_INDEX, item1=item_index, table2=CIANA_TABLE_INDEX, item2=ciana_item)
        return (
            LinkState(
                links=state.links + (link,),
                first_selection=None,
                selected=_mark(selected, CIANA_TABLE_INDEX, ciana_item),
            ),
            EVENT_AUTO_LINKED,
        )

    current = Selection(table_index=table_index, item_index=item_index)
    first = state.first_selection
    if first is None:
        return replace(state, first_selection=current, selected=selected), EVENT_PENDING
    if first.table_index == table_index:
        return replace(state, first_selection=current, selected=selected), EVENT_RESELECTED

    link = Link(table1=first.table_index, item1=first.item_index, table2=table_index, item2=item_index)
    return LinkState(links=state.links + (link,), first_selection=None, selected=selected), EVENT_LINKED


def clear_links() -> LinkState:
    return LinkState()
