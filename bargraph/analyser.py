"""Spectrum analyser: raw FFT frames to bar-graph amplitude pairs.

Per call:
  samples -> weighted dB magnitudes -> smoothing -> spectrum buffer
  samples -> weighted dB magnitudes -> per-band peaks -> banded summary

The weight table, band partition and smoother are cached and rebuilt only
when the options feeding them change. Calls must be serialised by the
caller (one analysis per drawing tick); the buffer itself is a new tuple
each call, so a reader holding the previous one never sees it change.
"""

import dataclasses
import logging
from typing import NamedTuple

import numpy as np

from bargraph.bands import Band, BandPartitioner, reduce_bands
from bargraph.config import AnalyserConfig
from bargraph.magnitude import to_weighted_db
from bargraph.smoothing import Smoother
from bargraph.weighting import WeightTable

logger = logging.getLogger(__name__)

_BAND_FIELDS = {"start_frequency", "end_frequency", "band_count"}
_WEIGHT_FIELDS = {"fft_size", "sample_rate"}


class Channel(NamedTuple):
    left: float
    right: float


class SpectrumAnalyser:
    """Turns raw FFT frames into a smoothed, A-weighted bar spectrum."""

    def __init__(self, config: AnalyserConfig | None = None, **options):
        """
        Args:
            config:  Full option set. Defaults to AnalyserConfig().
            options: Individual overrides applied on top of `config`.
        """
        config = config or AnalyserConfig()
        if options:
            config = dataclasses.replace(config, **options)
        self._config = config.validate()

        self._weights = WeightTable(config.fft_size, config.sample_rate)
        self._partitioner = BandPartitioner(
            config.start_frequency, config.end_frequency, config.band_count)
        self._smoother = Smoother(config.kernel)

        self._spectrum_buffer: tuple[Channel, ...] = ()
        self._banded_spectrum = np.zeros(config.band_count, dtype=np.float64)

    # -- configuration ------------------------------------------------------

    @property
    def config(self) -> AnalyserConfig:
        return self._config

    def configure(self, **changes) -> AnalyserConfig:
        """Apply option changes atomically and invalidate affected caches.

        The new option set is validated as a whole before anything is
        touched, so a ConfigurationError leaves the analyser unchanged.
        """
        new = dataclasses.replace(self._config, **changes).validate()
        changed = new.changed_fields(self._config)
        if not changed:
            return self._config

        if changed & _BAND_FIELDS:
            self._partitioner.reconfigure(
                new.start_frequency, new.end_frequency, new.band_count)
        if changed & _WEIGHT_FIELDS:
            self._weights.reconfigure(new.fft_size, new.sample_rate)
        if "kernel" in changed:
            self._smoother = Smoother(new.kernel)

        logger.debug("[analyser] Reconfigured: %s",
                     ", ".join(f"{k}={getattr(new, k)!r}" for k in sorted(changed)))
        self._config = new
        return new

    def _option(name):
        def getter(self):
            return getattr(self._config, name)

        def setter(self, value):
            self.configure(**{name: value})

        return property(getter, setter, doc=f"Analyser option `{name}`.")

    band_count = _option("band_count")
    start_frequency = _option("start_frequency")
    end_frequency = _option("end_frequency")
    fft_size = _option("fft_size")
    sample_rate = _option("sample_rate")
    kernel = _option("kernel")
    del _option

    @property
    def bin_width(self) -> float:
        """Width of one FFT bin in Hz."""
        return self._config.sample_rate / self._config.fft_size

    @property
    def bands(self) -> tuple[Band, ...]:
        return self._partitioner.bands

    @property
    def weights(self) -> np.ndarray:
        return self._weights.weights

    # -- analysis -----------------------------------------------------------

    def magnitudes(self, samples) -> np.ndarray:
        """Weighted dB magnitude for every input sample index."""
        return to_weighted_db(samples, self._weights.weights,
                              self._config.weight_overflow)

    def analyse(self, samples) -> tuple[Channel, ...]:
        """Run one frame through the pipeline and publish the results.

        Args:
            samples: 1-D raw frequency-domain samples for one frame

        Returns:
            The new spectrum buffer: one Channel per input sample, with
            left == right == smoothed value * buffer_gain.
        """
        cfg = self._config
        magnitude = self.magnitudes(samples)

        banded = reduce_bands(self._partitioner.bands, magnitude,
                              self.bin_width, cfg.band_gain)
        smoothed = self._smoother.smooth(magnitude) * cfg.buffer_gain
        buffer = tuple(Channel(v, v) for v in smoothed.tolist())

        # Publish only once both outputs are complete
        self._banded_spectrum = banded
        self._spectrum_buffer = buffer
        return buffer

    @property
    def spectrum_buffer(self) -> tuple[Channel, ...]:
        """Amplitude pairs from the most recent analyse() call."""
        return self._spectrum_buffer

    @property
    def banded_spectrum(self) -> np.ndarray:
        """Per-band peak values from the most recent analyse() call."""
        return self._banded_spectrum
