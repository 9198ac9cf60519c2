import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from physicsexplorer.controller.session import ExplorerSession  # noqa: E402
from physicsexplorer.view.main_window import MainWindow  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


@pytest.fixture
def window(qapp, scheduler_factory):
    win = MainWindow(ExplorerSession(scheduler_factory))
    win.topic_combo.setCurrentIndex(win.topic_combo.findData("direct-current"))
    yield win
    win.session.close()
    win.deleteLater()


def test_calculate_shows_the_result(window):
    window.on_calculate()
    assert window.result_label.text().startswith("Result: 3.000 A")


def test_editing_a_field_clears_the_shown_result(window):
    window.on_calculate()
    window.form._edits["voltage"].textEdited.emit("24")
    assert window.session.raw_fields["voltage"] == "24"
    assert window.session.result is None
    assert window.result_label.text() == ""


def test_an_error_colour_does_not_outlive_the_edit(window):
    window.form._edits["resistance"].textEdited.emit("0")
    window.on_calculate()
    assert window.result_label.text().startswith("Error:")
    assert window.result_label.styleSheet() != ""
    window.form._edits["resistance"].textEdited.emit("4")
    assert window.result_label.text() == ""
    assert window.result_label.styleSheet() == ""


def test_simulate_explains_a_still_frame(window):
    window.topic_combo.setCurrentIndex(window.topic_combo.findData("inductance"))
    window.form._edits["current_change_rate"].textEdited.emit("")
    window.on_calculate()
    window.toggle_play()
    assert not window.session.animation.is_running()
    assert "Nothing moves" in window.result_label.text()
