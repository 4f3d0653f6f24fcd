import pytest
from PIL import Image

from slide_restore.domain.common.errors import EmptyInstructionError
from slide_restore.domain.common.result import Result
from slide_restore.domain.editing.geometry import normalize, to_canvas_coords
from slide_restore.domain.editing.session import EditorSession
from slide_restore.domain.models.restore_model import QualityTier, RestoreOutcome


@pytest.fixture
def session(logger):
    session = EditorSession(logger)
    session.load_source(Image.new("RGB", (800, 600), "white"))
    return session


def drag(session, start, end):
    region = session.begin_drag(start)
    session.drag_to(end)
    session.end_drag()
    return region


def outcome(size=(800, 600)):
    return Result.ok(RestoreOutcome(image=Image.new("RGB", size, "black"), regions_applied=(),
                                    quality_tier=QualityTier.ONE_K))


def test_no_drawing_without_source(logger):
    session = EditorSession(logger)
    assert session.begin_drag((1, 1)) is None
    assert not session.end_drag()


def test_end_of_drag_commits(session):
    drag(session, (100, 50), (60, 150))

    assert len(session.history) == 1
    assert session.history.current.selections[0].rect == (60, 50, 40, 100)


def test_drag_leaving_the_image_stays_inside_it(session):
    # 800x600 source letterboxed at (100, 0) with size 400x300
    display = (100, 0, 400, 300)
    start = to_canvas_coords((150, 10), display, (800, 600))
    end = to_canvas_coords((700, 350), display, (800, 600))

    region = drag(session, start, end)

    assert region.rect == (100, 20, 700, 580)
    x, y, w, h = normalize(region, 800, 600)
    assert x + w <= 1000 and y + h <= 1000


def test_limit_is_logged(session, logger):
    for i in range(10):
        drag(session, (i, i), (i + 4, i + 4))

    assert session.begin_drag((300, 300)) is None
    assert session.store.count == 10
    assert logger.messages("WARNING")


def test_text_edit_commits_on_blur_only_when_changed(session):
    region = drag(session, (0, 0), (50, 50))
    assert session.edit_text(region.id, "Hello")
    assert len(session.history) == 1

    assert session.commit_text(region.id)
    assert len(session.history) == 2
    assert session.history.current.replacements == {region.id: "Hello"}

    # Blur without further changes does not add a snapshot
    assert not session.commit_text(region.id)
    assert len(session.history) == 2


def test_typed_then_erased_text_is_not_committed(session):
    region = drag(session, (0, 0), (50, 50))
    session.edit_text(region.id, "a")
    session.edit_text(region.id, "")

    assert not session.commit_text(region.id)
    assert len(session.history) == 1


def test_erasing_committed_text_commits_once(session):
    region = drag(session, (0, 0), (50, 50))
    session.edit_text(region.id, "Hello")
    session.commit_text(region.id)
    session.edit_text(region.id, "")

    assert session.commit_text(region.id)
    assert session.history.current.replacements == {}
    assert len(session.history) == 3


def test_rejected_text_is_not_committed(session):
    region = drag(session, (0, 0), (50, 50))
    assert not session.edit_text(region.id, "x" * 301)
    assert not session.commit_text(region.id)


def test_blur_after_undo_commits_divergent_state(session):
    region = drag(session, (0, 0), (50, 50))
    session.edit_text(region.id, "A")
    session.commit_text(region.id)
    session.undo()

    assert session.store.get_replacement(region.id) == ""
    session.edit_text(region.id, "B")
    assert session.commit_text(region.id)
    assert not session.history.can_redo


def test_remove_commits(session):
    first = drag(session, (0, 0), (10, 10))
    drag(session, (20, 20), (30, 30))

    assert session.remove_region(first.id)
    assert len(session.history) == 3
    assert session.store.count == 1


def test_undo_redo_round_trip(session):
    region = drag(session, (0, 0), (10, 10))
    session.edit_text(region.id, "one")
    session.commit_text(region.id)

    assert session.undo()
    assert session.store.get_replacement(region.id) == ""
    assert session.undo()
    assert session.store.count == 0
    assert not session.undo()

    assert session.redo()
    assert session.redo()
    assert session.store.get_replacement(region.id) == "one"
    assert not session.redo()


def test_undo_does_not_alias_history(session):
    drag(session, (0, 0), (10, 10))
    session.undo()
    session.redo()

    session.store.regions[0].w = 999
    assert session.history.current.selections[0].w == 10


def test_load_source_resets_state(session):
    region = drag(session, (0, 0), (10, 10))
    session.edit_text(region.id, "x")
    token = session.begin_restore()
    session.finish_restore(token, outcome())
    assert session.result_image is not None

    session.load_source(Image.new("RGB", (100, 100)), page_number=2, page_count=3)

    assert session.store.count == 0
    assert session.store.replacements == {}
    assert len(session.history) == 0
    assert session.result_image is None
    assert session.is_paginated
    assert session.can_change_page(3)
    assert not session.can_change_page(4)


def test_single_restore_in_flight(session):
    drag(session, (0, 0), (10, 10))

    token = session.begin_restore()
    assert token is not None
    assert session.is_restoring
    assert session.begin_restore() is None


def test_restore_blocks_editing(session):
    region = drag(session, (0, 0), (10, 10))
    session.begin_restore()

    assert session.begin_drag((50, 50)) is None
    assert not session.remove_region(region.id)
    assert not session.undo()
    assert session.store.count == 1


def test_restore_needs_regions(session):
    assert not session.can_restore
    assert session.begin_restore() is None


def test_failed_restore_sets_no_result(session):
    drag(session, (0, 0), (10, 10))
    token = session.begin_restore()

    assert not session.finish_restore(token, Result.fail(EmptyInstructionError()))
    assert session.result_image is None
    assert not session.is_restoring


def test_successful_restore_sets_result(session):
    drag(session, (0, 0), (10, 10))
    token = session.begin_restore()

    assert session.finish_restore(token, outcome())
    assert session.result_image.size == (800, 600)


def test_stale_restore_is_discarded(session):
    drag(session, (0, 0), (10, 10))
    token = session.begin_restore()
    session.load_source(Image.new("RGB", (640, 480)))

    assert not session.finish_restore(token, outcome())
    assert session.result_image is None
    assert not session.is_restoring


def test_unknown_token_is_ignored(session):
    drag(session, (0, 0), (10, 10))
    token = session.begin_restore()

    assert not session.finish_restore(token + 100, outcome())
    assert session.is_restoring
