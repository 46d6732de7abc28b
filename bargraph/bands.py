"""Log-spaced frequency bands and per-band peak reduction.

Bands grow by a constant ratio 2^n, n = log2(end / start) / band_count,
so each band covers the same fraction of an octave.
"""

import logging
import math
from typing import NamedTuple

import numpy as np

from bargraph.config import (
    BAND_COUNT,
    BAND_GAIN,
    END_FREQUENCY,
    START_FREQUENCY,
    validate_band_range,
)

logger = logging.getLogger(__name__)


class Band(NamedTuple):
    lower_frequency: float
    upper_frequency: float


def partition_bands(start_frequency: float, end_frequency: float,
                    band_count: int) -> list[Band]:
    """Split [start_frequency, end_frequency] into contiguous log bands.

    The last upper edge is pinned to end_frequency so float drift never
    leaves a gap at the top of the range.
    """
    validate_band_range(start_frequency, end_frequency, band_count)
    n = math.log2(end_frequency / start_frequency) / band_count
    ratio = 2 ** n

    bands = []
    lower = start_frequency
    for k in range(band_count):
        upper = end_frequency if k == band_count - 1 else lower * ratio
        bands.append(Band(lower, upper))
        lower = upper
    return bands


class BandPartitioner:
    """Band partition cached on (start_frequency, end_frequency, band_count).

    Any change to those inputs marks the cache dirty; the partition is
    rebuilt on the next access to `bands`.
    """

    def __init__(self, start_frequency: float = START_FREQUENCY,
                 end_frequency: float = END_FREQUENCY,
                 band_count: int = BAND_COUNT):
        validate_band_range(start_frequency, end_frequency, band_count)
        self._start = start_frequency
        self._end = end_frequency
        self._count = band_count
        self._bands: tuple[Band, ...] | None = None

    @property
    def start_frequency(self) -> float:
        return self._start

    @property
    def end_frequency(self) -> float:
        return self._end

    @property
    def band_count(self) -> int:
        return self._count

    @property
    def key(self) -> tuple[float, float, int]:
        return self._start, self._end, self._count

    def reconfigure(self, start_frequency: float | None = None,
                    end_frequency: float | None = None,
                    band_count: int | None = None):
        """Update any subset of the inputs, validated together."""
        new_key = (
            self._start if start_frequency is None else start_frequency,
            self._end if end_frequency is None else end_frequency,
            self._count if band_count is None else band_count,
        )
        if new_key == self.key:
            return
        validate_band_range(*new_key)
        self._start, self._end, self._count = new_key
        self._bands = None

    @property
    def dirty(self) -> bool:
        return self._bands is None

    @property
    def bands(self) -> tuple[Band, ...]:
        if self._bands is None:
            logger.debug("[bands] Partitioning %g-%g Hz into %d bands",
                         self._start, self._end, self._count)
            self._bands = tuple(partition_bands(self._start, self._end, self._count))
        return self._bands

    def __len__(self):
        return self._count

    def __iter__(self):
        return iter(self.bands)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def bin_range(band: Band, bin_width: float, length: int) -> tuple[int, int]:
    """Inclusive (start, end) bin indices covered by `band`.

    Both ends are clamped into [0, length - 1]; a band narrower than one
    bin collapses to the single index (start, start).
    """
    last = length - 1
    start = min(max(_round_half_up(band.lower_frequency / bin_width), 0), last)
    end = min(max(_round_half_up(band.upper_frequency / bin_width), 0), last)
    if start > end:
        end = start
    return start, end


def reduce_band(band: Band, magnitude: np.ndarray, bin_width: float,
                gain: float = BAND_GAIN) -> float:
    """Peak magnitude within the band's bins, scaled by `gain`."""
    if len(magnitude) == 0:
        return 0.0
    start, end = bin_range(band, bin_width, len(magnitude))
    return float(np.max(magnitude[start:end + 1])) * gain


def reduce_bands(bands, magnitude: np.ndarray, bin_width: float,
                 gain: float = BAND_GAIN) -> np.ndarray:
    """Banded summary: one scaled peak per band.

    Args:
        bands:      iterable of Band
        magnitude:  weighted dB spectrum
        bin_width:  sample_rate / fft_size, in Hz

    Returns:
        np.ndarray of float64, one value per band
    """
    magnitude = np.asarray(magnitude, dtype=np.float64)
    return np.array([reduce_band(b, magnitude, bin_width, gain) for b in bands],
                    dtype=np.float64)
