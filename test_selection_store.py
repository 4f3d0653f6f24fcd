from slide_restore.domain.editing.selection_store import MAX_CHAR_LIMIT, MAX_SELECTIONS, SelectionStore
from slide_restore.domain.models.region_model import Region


def draw(store, start, end):
    region = store.begin_region(start)
    store.update_active_region(end)
    store.end_region()
    return region


def test_drag_is_normalized_whatever_the_direction():
    store = SelectionStore()
    region = draw(store, (100, 50), (60, 150))

    assert store.count == 1
    assert (region.x, region.y, region.w, region.h) == (60, 50, 40, 100)


def test_begin_creates_zero_size_region_and_gesture():
    store = SelectionStore()
    region = store.begin_region((10, 10))

    assert region.rect == (10, 10, 0, 0)
    assert store.is_drawing
    assert store.end_region() is True
    assert not store.is_drawing
    assert store.end_region() is False


def test_update_without_gesture_is_noop():
    store = SelectionStore()
    draw(store, (0, 0), (10, 10))

    assert store.update_active_region((50, 50)) is None
    assert store.regions[0].rect == (0, 0, 10, 10)


def test_eleventh_region_is_rejected():
    store = SelectionStore()
    for i in range(MAX_SELECTIONS):
        assert draw(store, (i, i), (i + 5, i + 5)) is not None

    assert store.is_full
    assert store.begin_region((200, 200)) is None
    assert store.count == MAX_SELECTIONS
    assert not store.is_drawing


def test_no_region_while_restoring():
    store = SelectionStore()
    assert store.begin_region((1, 1), restoring=True) is None
    assert store.count == 0


def test_ids_are_unique_and_stable():
    store = SelectionStore()
    first = draw(store, (0, 0), (5, 5))
    second = draw(store, (10, 10), (20, 20))
    store.remove_region(first.id)
    third = draw(store, (30, 30), (40, 40))

    assert len({first.id, second.id, third.id}) == 3
    assert [region.id for region in store.regions] == [second.id, third.id]


def test_replacement_length_limit():
    store = SelectionStore()
    region = draw(store, (0, 0), (5, 5))

    assert store.set_replacement(region.id, "a" * MAX_CHAR_LIMIT)
    assert not store.set_replacement(region.id, "b" * (MAX_CHAR_LIMIT + 1))
    assert store.get_replacement(region.id) == "a" * MAX_CHAR_LIMIT


def test_too_long_text_leaves_absent_entry_absent():
    store = SelectionStore()
    region = draw(store, (0, 0), (5, 5))

    assert not store.set_replacement(region.id, "x" * 301)
    assert region.id not in store.replacements


def test_empty_text_removes_the_entry():
    store = SelectionStore()
    region = draw(store, (0, 0), (5, 5))
    store.set_replacement(region.id, "a")

    assert store.set_replacement(region.id, "")
    assert store.replacements == {}
    assert store.get_replacement(region.id) == ""


def test_remove_region_drops_its_text():
    store = SelectionStore()
    region = draw(store, (0, 0), (5, 5))
    store.set_replacement(region.id, "Hello")

    assert store.remove_region(region.id)
    assert store.count == 0
    assert store.replacements == {}
    assert not store.remove_region(region.id)


def test_restore_state_copies_input():
    store = SelectionStore()
    regions = [Region(7, 1, 2, 3, 4)]
    store.restore_state(regions, {7: "text"})

    regions[0].x = 99
    assert store.regions[0].x == 1
    assert store.get_replacement(7) == "text"
