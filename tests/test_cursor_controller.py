"""
Tests for cursor moves and clicks, with a fake pynput mouse.
"""

import pytest

# pynput needs a display backend on Linux
pytest.importorskip("pynput.mouse")

from gazepoint.os_control.cursor_controller import CursorController  # noqa: E402


class FakeMouse:
    def __init__(self):
        self.position = (0, 0)
        self.clicks = []

    def click(self, button, count=1):
        self.clicks.append((button, count))


@pytest.fixture
def mouse():
    return FakeMouse()


@pytest.fixture
def cursor(mouse):
    return CursorController(1920, 1080, min_update_interval=0.0, mouse=mouse)


class TestCursorController:
    """Tests for CursorController."""

    def test_move(self, cursor, mouse):
        assert cursor.move_to(100, 200)
        assert mouse.position == (100, 200)

    def test_move_clamped_to_screen(self, cursor, mouse):
        cursor.move_to(5000, -20)

        assert mouse.position == (1919, 0)

    def test_click(self, cursor, mouse):
        assert cursor.click()

        assert len(mouse.clicks) == 1
        assert cursor.statistics["total_clicks"] == 1

    def test_disabled_suppresses_moves_and_clicks(self, cursor, mouse):
        cursor.disable()

        assert not cursor.move_to(10, 10)
        assert not cursor.click()
        assert mouse.position == (0, 0)
        assert mouse.clicks == []

        cursor.enable()
        assert cursor.is_enabled()
        assert cursor.move_to(10, 10)

    def test_rate_limit(self, mouse):
        cursor = CursorController(1920, 1080, min_update_interval=60.0, mouse=mouse)

        assert cursor.move_to(1, 1)
        assert not cursor.move_to(2, 2)
        assert cursor.statistics["skipped_moves"] == 1

    def test_update_screen_size(self, cursor, mouse):
        cursor.update_screen_size(800, 600)
        cursor.move_to(1000, 1000)

        assert cursor.screen_size == (800, 600)
        assert mouse.position == (799, 599)
