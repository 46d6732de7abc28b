"""Per-bin A-weighting curve for a given FFT size and sample rate."""

import logging

import numpy as np

from bargraph.config import FFT_SIZE, SAMPLE_RATE, validate_fft

logger = logging.getLogger(__name__)

# IEC 61672 A-weighting pole frequencies, squared
C1 = 12194.217 ** 2
C2 = 20.598997 ** 2
C3 = 107.65265 ** 2
C4 = 737.86223 ** 2

# +2 dB normalisation so the curve is unity at 1 kHz
A_WEIGHT_GAIN = 1.2589


def a_weighting(fft_size: int, sample_rate: float) -> np.ndarray:
    """Compute the linear A-weighting gain for bins 0 .. fft_size/2 - 1.

    Args:
        fft_size:    FFT length, power of two
        sample_rate: Sample rate in Hz

    Returns:
        np.ndarray of float64, shape (fft_size // 2,). Bin 0 is exactly 0.
    """
    bins = fft_size // 2
    f = np.arange(bins, dtype=np.float64) * (sample_rate / fft_size)
    f2 = f * f

    num = C1 * f2 * f2
    den = (f2 + C2) * np.sqrt((f2 + C3) * (f2 + C4)) * (f2 + C1)
    # den > 0 for every bin, so DC gives 0 / den == 0
    return A_WEIGHT_GAIN * num / den


class WeightTable:
    """Lazily built A-weighting table, rebuilt when its inputs change."""

    def __init__(self, fft_size: int = FFT_SIZE, sample_rate: float = SAMPLE_RATE):
        validate_fft(fft_size, sample_rate)
        self._fft_size = fft_size
        self._sample_rate = sample_rate
        self._weights: np.ndarray | None = None

    @property
    def fft_size(self) -> int:
        return self._fft_size

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    def reconfigure(self, fft_size: int | None = None,
                    sample_rate: float | None = None):
        """Change the table inputs. Marks the table dirty if either differs."""
        new_size = self._fft_size if fft_size is None else fft_size
        new_rate = self._sample_rate if sample_rate is None else sample_rate
        if new_size == self._fft_size and new_rate == self._sample_rate:
            return
        validate_fft(new_size, new_rate)
        self._fft_size, self._sample_rate = new_size, new_rate
        self._weights = None

    @property
    def dirty(self) -> bool:
        return self._weights is None

    @property
    def weights(self) -> np.ndarray:
        if self._weights is None:
            logger.debug("[weights] Building A-weighting table: fft_size=%d sample_rate=%g",
                         self._fft_size, self._sample_rate)
            self._weights = a_weighting(self._fft_size, self._sample_rate)
            self._weights.setflags(write=False)
        return self._weights

    def __len__(self):
        return self._fft_size // 2
