from slide_restore.domain.services.i_ui_service import IUIService
from slide_restore.infrastructure.ui.qt_ui_service import QtUIService


def test_parent_is_part_of_the_interface():
    assert "set_parent" in IUIService.__abstractmethods__


def test_set_parent_is_used_for_dialogs(logger):
    service = QtUIService(logger)
    assert service.parent is None

    window = object()
    service.set_parent(window)

    assert service.parent is window
