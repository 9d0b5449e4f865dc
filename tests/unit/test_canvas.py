"""
Unit tests for the canvas interaction layer.

Tests:
- Virtual <-> rendered coordinate mapping
- Hit-testing in rendered pixel space
- Drawing state machine (start, add, close, cancel)
- Hover and preview helpers
"""

import pytest

from frontend.canvas import (
    BASE_HEIGHT, BASE_WIDTH, COLORS, POINT_CLICK_THRESHOLD,
    CanvasGeometry, ClickOutcome, DrawingSession, DrawingState, polygon_color
)


class TestCoordinateMapping:
    """Tests for CanvasGeometry conversions."""

    def test_identity_at_virtual_size(self, geometry):
        assert geometry.to_virtual(120, 80) == (120.0, 80.0)
        assert geometry.to_actual((120, 80)) == (120.0, 80.0)

    def test_scaled_and_offset_surface(self):
        """Half-size canvas placed at (10, 20) on screen."""
        g = CanvasGeometry(400, 300, left=10, top=20)

        assert g.to_virtual(210, 170) == (400.0, 300.0)
        assert g.to_actual((400, 300)) == (200.0, 150.0)

    def test_per_axis_scale(self):
        g = CanvasGeometry(1600, 300)
        assert g.to_virtual(1600, 300) == (BASE_WIDTH, BASE_HEIGHT)

    def test_resize_keeps_origin(self):
        g = CanvasGeometry(800, 600, left=5, top=5)
        g.resize(400, 300)

        assert (g.left, g.top) == (5.0, 5.0)
        assert g.to_actual((800, 600)) == (400.0, 300.0)

    @pytest.mark.parametrize("width,height", [(0, 600), (800, 0), (-1, 600)])
    def test_non_positive_size_rejected(self, width, height):
        with pytest.raises(ValueError):
            CanvasGeometry(width, height)


class TestHitTesting:
    """Tests for proximity checks."""

    def test_within_threshold(self, geometry):
        assert geometry.is_point_near((100, 100), (100 + POINT_CLICK_THRESHOLD, 100))

    def test_beyond_threshold(self, geometry):
        assert not geometry.is_point_near((100, 100), (100 + POINT_CLICK_THRESHOLD + 1, 100))

    def test_symmetric(self, geometry):
        a, b = (100, 100), (110, 112)
        assert geometry.is_point_near(a, b) == geometry.is_point_near(b, a)

    def test_measured_in_rendered_pixels(self):
        """On a half-size canvas 30 virtual units are 15 rendered pixels."""
        g = CanvasGeometry(400, 300)

        assert g.is_point_near((100, 100), (130, 100))
        assert not g.is_point_near((100, 100), (134, 100))

    def test_find_point_index(self, geometry):
        points = [(0, 0), (200, 0), (200, 200)]

        assert geometry.find_point_index((195, 5), points) == 1
        assert geometry.find_point_index((100, 100), points) == -1
        assert geometry.find_point_index((0, 0), []) == -1


class TestDrawingSession:
    """Tests for the draw-to-close state machine."""

    def _draw_triangle(self, session):
        session.start()
        for x, y in [(100, 100), (300, 100), (200, 300)]:
            assert session.click(x, y) == ClickOutcome.ADDED

    def test_initial_state(self, session):
        assert session.state == DrawingState.IDLE
        assert session.point_count == 0

    def test_click_when_idle_is_noop(self, session):
        assert session.click(100, 100) == ClickOutcome.IGNORED
        assert session.point_count == 0
        assert session.state == DrawingState.IDLE

    def test_states_while_drawing(self, session):
        session.start()
        assert session.state == DrawingState.DRAWING

        session.click(100, 100)
        session.click(300, 100)
        assert session.state == DrawingState.DRAWING
        assert not session.can_close

        session.click(200, 300)
        assert session.state == DrawingState.CLOSABLE

    def test_close_near_first_point(self, session):
        """Three points then a click near the first closes the polygon."""
        self._draw_triangle(session)

        assert session.click(110, 105) == ClickOutcome.CLOSED
        assert session.state == DrawingState.IDLE
        assert session.closed == [[(100.0, 100.0), (300.0, 100.0), (200.0, 300.0)]]
        assert session.last_finished == [(100.0, 100.0), (300.0, 100.0), (200.0, 300.0)]
        assert session.point_count == 0

    def test_click_beyond_threshold_adds_point(self, session):
        self._draw_triangle(session)

        assert session.click(100 + POINT_CLICK_THRESHOLD + 4, 100) == ClickOutcome.ADDED
        assert session.point_count == 4
        assert session.state == DrawingState.CLOSABLE
        assert session.closed == []

    def test_cannot_close_with_two_points(self, session):
        session.start()
        session.click(100, 100)
        session.click(300, 100)

        assert session.click(102, 101) == ClickOutcome.ON_EXISTING
        assert session.point_count == 2
        assert session.state == DrawingState.DRAWING

    def test_click_on_other_point_not_added(self, session):
        self._draw_triangle(session)

        assert session.click(298, 102) == ClickOutcome.ON_EXISTING
        assert session.point_count == 3

    def test_far_from_first_but_on_another_point(self, session):
        """Beyond the close threshold of the first point, but on the second one: nothing is added."""
        self._draw_triangle(session)

        assert session.click(305, 100) == ClickOutcome.ON_EXISTING
        assert session.point_count == 3
        assert session.state == DrawingState.CLOSABLE
        assert session.closed == []

    def test_cancel_discards_points(self, session):
        self._draw_triangle(session)

        session.cancel()

        assert session.state == DrawingState.IDLE
        assert session.point_count == 0
        assert session.closed == []

    def test_cancel_when_idle(self, session):
        session.cancel()
        assert session.state == DrawingState.IDLE

    def test_clicks_map_through_geometry(self):
        closed = []
        s = DrawingSession(CanvasGeometry(400, 300, left=50, top=50), on_close=closed.append)
        s.start()
        for x, y in [(100, 100), (250, 100), (150, 250)]:
            s.click(x, y)

        s.click(104, 98)

        assert closed == [[(100.0, 100.0), (400.0, 100.0), (200.0, 400.0)]]

    def test_start_again_resets(self, session):
        self._draw_triangle(session)
        session.start()
        assert session.point_count == 0
        assert session.state == DrawingState.DRAWING


class TestHoverAndPreview:
    """Tests for hover highlighting and the rubber-band preview."""

    def test_hover_first_point_when_closable(self, session):
        session.start()
        for x, y in [(100, 100), (300, 100), (200, 300)]:
            session.click(x, y)

        assert session.hover(105, 105) == 0
        assert session.hover(400, 400) == -1

    def test_hover_ignored_before_closable(self, session):
        session.start()
        session.click(100, 100)
        assert session.hover(100, 100) == -1

    def test_preview_from_last_point(self, session):
        session.start()
        session.click(100, 100)
        session.click(300, 100)

        assert session.preview_segments(250, 250) == [((300.0, 100.0), (250.0, 250.0))]

    def test_preview_adds_closing_segment(self, session):
        session.start()
        for x, y in [(100, 100), (300, 100), (200, 300)]:
            session.click(x, y)
        session.hover(105, 100)

        segments = session.preview_segments(105, 100)

        assert segments == [
            ((200.0, 300.0), (105.0, 100.0)),
            ((105.0, 100.0), (100.0, 100.0)),
        ]

    def test_no_preview_without_points(self, session):
        assert session.preview_segments(10, 10) == []
        session.start()
        assert session.preview_segments(10, 10) == []


def test_polygon_color_wraps():
    assert polygon_color(0) == COLORS[0]
    assert polygon_color(len(COLORS)) == COLORS[0]
    assert polygon_color(len(COLORS) + 2) == COLORS[2]
