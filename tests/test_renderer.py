"""
Tests for line geometry and the console preview.
"""
import numpy as np
import pytest

from bargraph.analyser import Channel
from bargraph.config import ConfigurationError
from bargraph.renderer import BAR_GLYPHS, BarGraphRenderer, render_console

BUFFER = (Channel(10.0, 10.0), Channel(20.0, 20.0), Channel(5.0, 5.0))


class TestLinePoints:
    """Buffer to line segment mapping."""

    def test_bottom_anchored(self):
        points = BarGraphRenderer(divisions=2).line_points(BUFFER, height=100)
        np.testing.assert_array_equal(points, [
            [0, 100, 0, 90],
            [8, 100, 8, 80],
            [16, 100, 16, 95],
        ])

    def test_top_anchored(self):
        points = BarGraphRenderer(divisions=1, top=True).line_points(BUFFER, height=100)
        np.testing.assert_array_equal(points[:, 1], [0, 0, 0])
        np.testing.assert_array_equal(points[:, 3], [10, 20, 5])
        np.testing.assert_array_equal(points[:, 0], [0, 4, 8])

    def test_capacity_limits_bars(self):
        points = BarGraphRenderer().line_points(BUFFER, height=50, capacity=8)
        assert points.shape == (2, 4)

    def test_empty_buffer(self):
        assert BarGraphRenderer().line_points((), height=50).shape == (0, 4)

    def test_divisions_must_be_power_of_two(self):
        with pytest.raises(ConfigurationError):
            BarGraphRenderer(divisions=3)


class TestRenderConsole:
    """Terminal bar preview."""

    def test_scaled_to_peak(self):
        assert render_console([0.0, 4.0, 8.0]) == " " + BAR_GLYPHS[3] + BAR_GLYPHS[7]

    def test_silence_is_blank(self):
        assert render_console([0.0, 0.0, 0.0]) == "   "

    def test_negative_values_blank(self):
        assert render_console([-3.0, 2.0]) == " " + BAR_GLYPHS[-1]

    def test_compressed_to_width(self):
        assert len(render_console(np.arange(1, 107), width=53)) == 53

    def test_empty(self):
        assert render_console([]) == ""
