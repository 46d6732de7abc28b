"""A-weighted, log-banded, smoothed bar spectrum from raw FFT frames."""

from bargraph.analyser import Channel, SpectrumAnalyser
from bargraph.bands import Band, BandPartitioner, partition_bands, reduce_band, reduce_bands
from bargraph.config import AnalyserConfig, ConfigurationError
from bargraph.magnitude import to_weighted_db
from bargraph.renderer import BarGraphRenderer, render_console
from bargraph.smoothing import DEFAULT_KERNEL, Smoother
from bargraph.weighting import WeightTable, a_weighting

__all__ = [
    "AnalyserConfig",
    "Band",
    "BandPartitioner",
    "BarGraphRenderer",
    "Channel",
    "ConfigurationError",
    "DEFAULT_KERNEL",
    "SpectrumAnalyser",
    "Smoother",
    "WeightTable",
    "a_weighting",
    "partition_bands",
    "reduce_band",
    "reduce_bands",
    "render_console",
    "to_weighted_db",
]

__version__ = "0.1.0"
