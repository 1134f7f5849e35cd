from __future__ import annotations

from app.services.link_builder import (
    EVENT_AUTO_LINKED,
    EVENT_LINKED,
    EVENT_PENDING,
    EVENT_RESELECTED,
    LinkState,
    Selection,
    clear_links,
    select_item,
)
from app.services.threat_composer import Link


def test_two_clicks_in_different_tables_create_a_link() -> None:
    state, event = select_item(LinkState(), 0, 2)
    assert event == EVENT_PENDING
    assert state.first_selection == Selection(table_index=0, item_index=2)
    assert state.links == ()

    state, event = select_item(state, 1, 0)
    assert event == EVENT_LINKED
    assert state.links == (Link(0, 2, 1, 0),)
    assert state.first_selection is None
    assert state.selected[0] == 2
    assert state.selected[1] == 0


def test_second_click_in_same_table_reselects() -> None:
    state, _ = select_item(LinkState(), 3, 0)
    state, event = select_item(state, 3, 1)
    assert event == EVENT_RESELECTED
    assert state.first_selection == Selection(table_index=3, item_index=1)
    assert state.links == ()
    assert state.selected[3] == 1


def test_stride_pick_links_matching_ciana_item() -> None:
    pending, _ = select_item(LinkState(), 0, 0)
    state, event = select_item(pending, 2, 3)
    assert event == EVENT_AUTO_LINKED
    assert state.links == (Link(2, 3, 6, 0),)
    assert state.selected[6] == 0
    # The automatic link replaces any pending selection.
    assert state.first_selection is None


def test_stride_items_without_ciana_mapping_behave_normally() -> None:
    state, event = select_item(LinkState(), 2, 6)
    assert event == EVENT_PENDING
    assert state.links == ()


def test_links_accumulate_and_clear() -> None:
    state = LinkState()
    for table_index, item_index in ((0, 0), (1, 0), (3, 0), (5, 0)):
        state, _ = select_item(state, table_index, item_index)
    assert state.links == (Link(0, 0, 1, 0), Link(3, 0, 5, 0))

    cleared = clear_links()
    assert cleared.links == ()
    assert cleared.first_selection is None
    assert all(value is None for value in cleared.selected)
