"""Raw FFT samples to A-weighted decibel magnitudes.

Each index is paired with its right-hand neighbour (re = s[i], im = s[i+1],
im = 0 for the last index), so the output has one value per input sample.
This is a sliding pairing, not the disjoint (re, im) stepping of a packed
real FFT; upstream layouts should be checked against it.
"""

import numpy as np

from bargraph.config import ConfigurationError, WEIGHT_OVERFLOW_POLICIES


def power(samples: np.ndarray) -> np.ndarray:
    """re^2 + im^2 over the sliding neighbour pairing."""
    re = np.asarray(samples, dtype=np.float64)
    im = np.zeros_like(re)
    im[:-1] = re[1:]
    return re * re + im * im


def to_db(magnitude: np.ndarray) -> np.ndarray:
    """10*log10(magnitude) with non-finite results coerced to 0."""
    with np.errstate(divide="ignore", invalid="ignore"):
        db = 10.0 * np.log10(magnitude)
    db[~np.isfinite(db)] = 0.0
    return db


def fit_weights(weights: np.ndarray, length: int, overflow: str = "clamp") -> np.ndarray:
    """Return `length` weights, extending past the table end per `overflow`.

    "clamp" repeats the last table entry, "zero" pads with 0.
    """
    if overflow not in WEIGHT_OVERFLOW_POLICIES:
        raise ConfigurationError(f"Unknown weight overflow policy: {overflow!r}")
    if length <= len(weights):
        return weights[:length]
    fill = weights[-1] if overflow == "clamp" and len(weights) else 0.0
    return np.pad(weights, (0, length - len(weights)), constant_values=fill)


def to_weighted_db(samples, weights: np.ndarray, overflow: str = "clamp") -> np.ndarray:
    """Convert one frame of raw FFT samples to weighted dB magnitudes.

    Args:
        samples:  1-D sequence of raw frequency-domain samples, length N
        weights:  per-bin weight table (see WeightTable)
        overflow: weight policy for indices past the end of the table

    Returns:
        np.ndarray of float64, shape (N,), all finite
    """
    samples = np.asarray(samples)
    if samples.ndim != 1:
        raise ValueError(f"Expected a 1-D frame of samples, got shape {samples.shape}")
    db = to_db(power(samples))
    return db * fit_weights(weights, len(db), overflow)
