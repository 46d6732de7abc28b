"""
Tests for raw sample to weighted dB conversion.
"""
import math

import numpy as np
import pytest

from bargraph.config import ConfigurationError
from bargraph.magnitude import fit_weights, power, to_db, to_weighted_db
from bargraph.weighting import a_weighting


class TestPower:
    """Sliding neighbour pairing."""

    def test_pairs_with_next_sample(self):
        np.testing.assert_array_equal(power([3, 4, 0]), [25.0, 16.0, 0.0])

    def test_last_index_has_zero_imaginary(self):
        np.testing.assert_array_equal(power([0, 0, 2]), [0.0, 4.0, 4.0])

    def test_int8_input_does_not_overflow(self):
        samples = np.array([127, 127], dtype=np.int8)
        np.testing.assert_array_equal(power(samples), [32258.0, 16129.0])


class TestToDb:
    """Decibel conversion with coercion."""

    def test_zero_power_becomes_zero(self):
        db = to_db(np.array([0.0, 100.0]))
        np.testing.assert_allclose(db, [0.0, 20.0])

    def test_no_warnings_on_zero(self):
        with np.errstate(all="raise"):
            to_db(np.zeros(4))


class TestFitWeights:
    """Weight lookup past the end of the table."""

    def test_truncates_to_length(self):
        weights = np.array([0.0, 0.5, 1.0, 2.0])
        np.testing.assert_array_equal(fit_weights(weights, 2), [0.0, 0.5])

    def test_clamp_repeats_last(self):
        weights = np.array([0.0, 0.5])
        np.testing.assert_array_equal(fit_weights(weights, 4, "clamp"), [0.0, 0.5, 0.5, 0.5])

    def test_zero_pads(self):
        weights = np.array([0.0, 0.5])
        np.testing.assert_array_equal(fit_weights(weights, 4, "zero"), [0.0, 0.5, 0.0, 0.0])

    def test_unknown_policy(self):
        with pytest.raises(ConfigurationError):
            fit_weights(np.ones(2), 4, "wrap")


class TestToWeightedDb:
    """Full conversion."""

    def test_all_zero_input(self):
        out = to_weighted_db(np.zeros(16), a_weighting(2048, 44100.0))
        np.testing.assert_array_equal(out, np.zeros(16))

    def test_output_length_matches_input(self):
        out = to_weighted_db(np.arange(10), np.ones(4))
        assert out.shape == (10,)
        assert np.all(np.isfinite(out))

    def test_applies_weights(self):
        out = to_weighted_db([3, 4, 0], np.array([1.0, 2.0, 3.0]))
        expected = [10 * math.log10(25), 2 * 10 * math.log10(16), 0.0]
        np.testing.assert_allclose(out, expected)

    def test_dc_weight_zeroes_first_value(self):
        out = to_weighted_db([50, 50, 50], a_weighting(2048, 44100.0))
        assert out[0] == 0.0

    def test_rejects_2d(self):
        with pytest.raises(ValueError):
            to_weighted_db(np.zeros((2, 4)), np.ones(4))
