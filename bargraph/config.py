"""Analyser configuration: defaults, validation and the configuration error.

Defaults match a 2048-point FFT at 44.1 kHz split into 80 bands between
100 Hz and 18 kHz.
"""

import math
import numbers
import sys
from dataclasses import dataclass, fields

SAMPLE_RATE = 44100.0
FFT_SIZE = 2048
BAND_COUNT = 80
START_FREQUENCY = 100.0
END_FREQUENCY = 18000.0

# Centre-weighted moving average, must be odd length
KERNEL = (1, 2, 3, 5, 3, 2, 1)

# Visual emphasis only
BAND_GAIN = 5.0
BUFFER_GAIN = 5.0

WEIGHT_OVERFLOW_POLICIES = ("clamp", "zero")


class ConfigurationError(ValueError):
    """Raised when analyser options would make the pipeline undefined."""


def is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def is_power_of_two(value: int) -> bool:
    return is_integer(value) and value > 0 and value & (value - 1) == 0


@dataclass(frozen=True)
class AnalyserConfig:
    """Immutable snapshot of every analyser option."""

    band_count: int = BAND_COUNT
    start_frequency: float = START_FREQUENCY
    end_frequency: float = END_FREQUENCY
    fft_size: int = FFT_SIZE
    sample_rate: float = SAMPLE_RATE
    kernel: tuple = KERNEL
    band_gain: float = BAND_GAIN
    buffer_gain: float = BUFFER_GAIN
    weight_overflow: str = "clamp"

    def __post_init__(self):
        object.__setattr__(self, "kernel", tuple(self.kernel))

    def validate(self) -> "AnalyserConfig":
        """Raise ConfigurationError on the first invalid option.

        Returns self so construction can be chained.
        """
        validate_band_range(self.start_frequency, self.end_frequency, self.band_count)
        validate_fft(self.fft_size, self.sample_rate)
        validate_kernel(self.kernel)
        if self.weight_overflow not in WEIGHT_OVERFLOW_POLICIES:
            raise ConfigurationError(
                f"weight_overflow must be one of {WEIGHT_OVERFLOW_POLICIES}, "
                f"got {self.weight_overflow!r}")
        return self

    def changed_fields(self, other: "AnalyserConfig") -> set[str]:
        """Names of the options whose values differ from `other`."""
        return {f.name for f in fields(self)
                if getattr(self, f.name) != getattr(other, f.name)}


def validate_band_range(start_frequency: float, end_frequency: float, band_count: int):
    if not is_integer(band_count) or band_count <= 0:
        raise ConfigurationError(
            f"band_count must be a positive integer, got {band_count!r}")
    if not (math.isfinite(start_frequency) and math.isfinite(end_frequency)):
        raise ConfigurationError(
            f"band edges must be finite, got {start_frequency}-{end_frequency} Hz")
    if start_frequency <= 0:
        raise ConfigurationError(
            f"start_frequency must be > 0 Hz, got {start_frequency}")
    if start_frequency >= end_frequency:
        raise ConfigurationError(
            f"start_frequency ({start_frequency}) must be below "
            f"end_frequency ({end_frequency})")
    # Each band must still be wider than the float drift of the edge chain
    ratio = 2 ** (math.log2(end_frequency / start_frequency) / band_count)
    if ratio - 1.0 <= 4 * band_count * sys.float_info.epsilon:
        raise ConfigurationError(
            f"{start_frequency}-{end_frequency} Hz is too narrow for {band_count} bands")


def validate_fft(fft_size: int, sample_rate: float):
    if not is_power_of_two(fft_size):
        raise ConfigurationError(
            f"fft_size must be a power of two, got {fft_size!r}")
    if not math.isfinite(sample_rate) or sample_rate <= 0:
        raise ConfigurationError(f"sample_rate must be a finite value > 0 Hz, got {sample_rate}")


def validate_kernel(kernel) -> tuple:
    """Check a smoothing kernel and return it as a tuple of floats."""
    kernel = tuple(float(k) for k in kernel)
    if len(kernel) == 0 or len(kernel) % 2 == 0:
        raise ConfigurationError(
            f"kernel must have an odd number of weights, got {len(kernel)}")
    if sum(kernel) == 0:
        raise ConfigurationError("kernel weights must not sum to zero")
    return kernel
