import pytest

from src.services.page_index import PageIndex
from src.services.selection_set import SelectionSet


def _labels(index: PageIndex) -> list[str]:
    return [f"{page.source_document_id}{page.source_page_number}" for page in index.pages]


@pytest.fixture
def index() -> PageIndex:
    page_index = PageIndex()
    page_index.append("X", 3)
    page_index.append("Y", 2)
    return page_index


def _page_id(index: PageIndex, label: str) -> str:
    for page in index.pages:
        if f"{page.source_document_id}{page.source_page_number}" == label:
            return page.page_id
    raise AssertionError(f"missing page {label}")


@pytest.mark.unit
def test_append_numbers_pages_in_order(index: PageIndex) -> None:
    assert _labels(index) == ["X1", "X2", "X3", "Y1", "Y2"]
    assert len(index.page_ids) == 5


@pytest.mark.unit
def test_append_returns_only_new_pages() -> None:
    page_index = PageIndex()
    first = page_index.append("A", 2)
    second = page_index.append("A", 2)
    assert [page.source_page_number for page in second] == [1, 2]
    assert {page.page_id for page in first}.isdisjoint({page.page_id for page in second})


@pytest.mark.unit
def test_append_rejects_negative_count() -> None:
    with pytest.raises(ValueError):
        PageIndex().append("A", -1)


@pytest.mark.unit
def test_reorder_moves_page_and_keeps_others(index: PageIndex) -> None:
    assert index.reorder(_page_id(index, "Y1"), 0)
    assert _labels(index) == ["Y1", "X1", "X2", "X3", "Y2"]

    assert index.reorder(_page_id(index, "X1"), 3)
    assert _labels(index) == ["Y1", "X2", "X3", "X1", "Y2"]


@pytest.mark.unit
def test_reorder_clamps_position(index: PageIndex) -> None:
    index.reorder(_page_id(index, "X1"), 99)
    assert _labels(index) == ["X2", "X3", "Y1", "Y2", "X1"]

    index.reorder(_page_id(index, "Y2"), -5)
    assert _labels(index) == ["Y2", "X2", "X3", "Y1", "X1"]


@pytest.mark.unit
def test_reorder_to_current_position_is_noop(index: PageIndex) -> None:
    before = index.pages
    assert not index.reorder(_page_id(index, "X2"), 1)
    assert index.pages == before


@pytest.mark.unit
def test_reorder_absent_id_is_noop(index: PageIndex) -> None:
    before = index.pages
    assert not index.reorder("missing", 0)
    assert index.pages == before


@pytest.mark.unit
def test_reorder_keeps_page_identity(index: PageIndex) -> None:
    original = {page.page_id: page for page in index.pages}
    index.reorder(_page_id(index, "Y2"), 0)
    index.reorder(_page_id(index, "X1"), 4)
    for page in index.pages:
        assert original[page.page_id] == page


@pytest.mark.unit
def test_delete_one_and_absent_id(index: PageIndex) -> None:
    assert index.delete_one(_page_id(index, "X2"))
    assert _labels(index) == ["X1", "X3", "Y1", "Y2"]

    before = index.pages
    assert not index.delete_one("missing")
    assert index.pages == before


@pytest.mark.unit
def test_delete_many_preserves_survivor_order(index: PageIndex) -> None:
    removed = index.delete_many({_page_id(index, "X1"), _page_id(index, "Y1"), "missing"})
    assert removed == 2
    assert _labels(index) == ["X2", "X3", "Y2"]


@pytest.mark.unit
def test_delete_many_notifies_listeners_once_with_final_state(index: PageIndex) -> None:
    seen: list[frozenset[str]] = []
    index.add_removal_listener(seen.append)

    index.delete_many([_page_id(index, "X1"), _page_id(index, "X2"), _page_id(index, "X3")])

    assert len(seen) == 1
    assert seen[0] == index.page_ids
    assert len(seen[0]) == 2


@pytest.mark.unit
def test_delete_by_document_removes_only_that_document(index: PageIndex) -> None:
    assert index.delete_by_document("X") == 3
    assert _labels(index) == ["Y1", "Y2"]
    assert index.pages_for_document("X") == []


@pytest.mark.unit
def test_position_lookup(index: PageIndex) -> None:
    y1 = _page_id(index, "Y1")
    assert index.position_of(y1) == 3
    assert index.get(y1) is not None
    assert y1 in index
    assert index.position_of("missing") is None
    assert index.get("missing") is None


@pytest.mark.unit
def test_snapshot_is_detached_from_later_edits(index: PageIndex) -> None:
    snapshot = index.snapshot()
    index.delete_one(_page_id(index, "X1"))
    index.reorder(_page_id(index, "Y2"), 0)
    assert [f"{p.source_document_id}{p.source_page_number}" for p in snapshot] == [
        "X1",
        "X2",
        "X3",
        "Y1",
        "Y2",
    ]


@pytest.mark.unit
def test_selection_toggle_and_delete_selected(index: PageIndex) -> None:
    selection = SelectionSet(index)
    x1 = _page_id(index, "X1")
    y2 = _page_id(index, "Y2")

    assert selection.toggle(x1)
    assert selection.toggle(y2)
    assert not selection.toggle("missing")
    assert selection.selected == {x1, y2}

    assert not selection.toggle(y2)
    assert selection.selected == {x1}

    assert selection.delete_selected() == 1
    assert len(selection) == 0
    assert _labels(index) == ["X2", "X3", "Y1", "Y2"]


@pytest.mark.unit
def test_selection_pruned_on_every_removal_path(index: PageIndex) -> None:
    selection = SelectionSet(index)
    for page in index.pages:
        selection.toggle(page.page_id)

    index.delete_one(_page_id(index, "X1"))
    assert selection.selected <= index.page_ids
    assert len(selection) == 4

    index.delete_many([_page_id(index, "Y1")])
    assert selection.selected <= index.page_ids
    assert len(selection) == 3

    index.delete_by_document("X")
    assert selection.selected == index.page_ids
    assert len(selection) == 1


@pytest.mark.unit
def test_delete_selected_with_nothing_selected_is_noop(index: PageIndex) -> None:
    selection = SelectionSet(index)
    before = index.pages
    assert selection.delete_selected() == 0
    assert index.pages == before
