"""Geometry for the drawing surface, plus a terminal preview.

BarGraphRenderer maps a spectrum buffer to line segments in the flat
x0, y0, x1, y1 layout a canvas drawLines() call expects. Painting itself
belongs to the host surface.
"""

import math

import numpy as np

from bargraph.config import ConfigurationError, is_power_of_two

BAR_GLYPHS = "▁▂▃▄▅▆▇█"


class BarGraphRenderer:
    """Lays out one vertical line per spectrum buffer entry."""

    def __init__(self, divisions: int = 1, top: bool = False):
        """
        Args:
            divisions: Horizontal spacing multiplier, power of two
            top:       Hang bars from the top edge instead of the bottom
        """
        if not is_power_of_two(divisions):
            raise ConfigurationError(
                f"divisions must be a power of two, got {divisions!r}")
        self._divisions = divisions
        self._top = top

    @property
    def divisions(self) -> int:
        return self._divisions

    @property
    def top(self) -> bool:
        return self._top

    def line_points(self, buffer, height: float,
                    capacity: int | None = None) -> np.ndarray:
        """Compute line endpoints for a spectrum buffer.

        Args:
            buffer:   sequence of Channel (only `left` is drawn)
            height:   surface height in pixels
            capacity: size of the caller's flat point array; entries with
                      i * 4 >= capacity are dropped. None = no limit.

        Returns:
            np.ndarray of float32, shape (M, 4): x0, y0, x1, y1 per bar
        """
        count = len(buffer)
        if capacity is not None:
            count = min(count, max(0, (capacity + 3) // 4))

        points = np.empty((count, 4), dtype=np.float32)
        if count == 0:
            return points
        left = np.fromiter((ch.left for ch in buffer[:count]),
                           dtype=np.float32, count=count)
        x = np.arange(count, dtype=np.float32) * 4 * self._divisions

        points[:, 0] = x
        points[:, 2] = x
        if self._top:
            points[:, 1] = 0.0
            points[:, 3] = left
        else:
            points[:, 1] = height
            points[:, 3] = height - left
        return points


def render_console(values, width: int = 53) -> str:
    """Render values as one row of block glyphs at most `width` wide.

    Values are scaled against the row's own peak; zero or negative
    values show as blanks.
    """
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0 or width <= 0:
        return ""
    stride = max(1, math.ceil(values.size / width))
    compressed = values[::stride]

    peak = float(np.max(compressed))
    if peak <= 0:
        return " " * compressed.size
    levels = np.clip(np.round(compressed / peak * len(BAR_GLYPHS)), 0, len(BAR_GLYPHS))
    return "".join(BAR_GLYPHS[int(v) - 1] if v > 0 else " " for v in levels)
