"""
Tests for the processing worker thread.
"""

import pytest

QtCore = pytest.importorskip("PyQt6.QtCore")

from gazepoint.core.state import AppState  # noqa: E402

app_window = pytest.importorskip("gazepoint.gui.app_window")


class FailingController:
    """Reports TRACKING and fails on the first frame."""

    state = AppState.TRACKING

    def process_frame(self):
        raise RuntimeError("camera unplugged")


@pytest.fixture(scope="module")
def qt_app():
    app = QtCore.QCoreApplication.instance()
    if app is None:
        app = QtCore.QCoreApplication([])
    return app


class TestProcessingWorker:
    """Tests for ProcessingWorker and worker restarts."""

    def test_no_worker_needs_start(self):
        assert app_window.worker_needs_restart(None)

    def test_worker_exits_on_error_and_needs_restart(self, qt_app):
        errors = []
        worker = app_window.ProcessingWorker(FailingController())
        worker.error_occurred.connect(errors.append)

        worker.start()
        assert worker.wait(5000)
        qt_app.processEvents()

        assert worker.isFinished()
        assert app_window.worker_needs_restart(worker)
        assert errors == ["camera unplugged"]

    def test_replacement_worker_runs(self, qt_app):
        first = app_window.ProcessingWorker(FailingController())
        first.start()
        first.wait(5000)

        class IdleController:
            state = AppState.IDLE

        second = app_window.ProcessingWorker(IdleController())
        second.start()
        try:
            assert not app_window.worker_needs_restart(second)
        finally:
            second.stop()
            second.wait(5000)

        assert app_window.worker_needs_restart(second)
