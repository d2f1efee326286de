"""
Rate limiter tests.
"""

import pytest
import numpy as np
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from turbosim.core.seek import seek, clamp


class TestSeek:
    """Test bounded-rate approach to a target."""

    def test_accelerates_at_accel_rate(self):
        """Rising values move by accel * dt."""
        assert np.isclose(seek(10.0, 20.0, 2.0, 5.0, 0.5), 11.0)

    def test_decelerates_at_decel_rate(self):
        """Falling values move by decel * dt."""
        assert np.isclose(seek(20.0, 10.0, 2.0, 5.0, 0.5), 17.5)

    def test_never_overshoots(self):
        """Large steps stop exactly on the target."""
        assert seek(10.0, 12.0, 100.0, 100.0, 1.0) == 12.0
        assert seek(12.0, 10.0, 100.0, 100.0, 1.0) == 10.0

    def test_result_between_current_and_target(self):
        """Result always lies between current and target inclusive."""
        rng = np.random.default_rng(42)
        for _ in range(200):
            current, target = rng.uniform(-100, 100, size=2)
            accel, decel = rng.uniform(0, 50, size=2)
            dt = rng.uniform(0, 2)
            value = seek(current, target, accel, decel, dt)
            assert min(current, target) <= value <= max(current, target)

    def test_at_target_unchanged(self):
        """Value already on target stays there."""
        assert seek(5.0, 5.0, 1.0, 1.0, 1.0) == 5.0

    def test_zero_time_step(self):
        """Zero dt leaves the value unchanged."""
        assert seek(5.0, 50.0, 10.0, 10.0, 0.0) == 5.0

    def test_negative_rates_do_not_move(self):
        """Negative rates are treated as zero."""
        assert seek(5.0, 50.0, -10.0, 10.0, 1.0) == 5.0
        assert seek(50.0, 5.0, 10.0, -10.0, 1.0) == 50.0

    def test_negative_time_step_does_not_move(self):
        """Negative dt is treated as zero."""
        assert seek(5.0, 50.0, 10.0, 10.0, -1.0) == 5.0


class TestClamp:
    """Test interval clamping."""

    @pytest.mark.parametrize("value,expected", [(-1.0, 0.0), (0.5, 0.5), (3.0, 1.0)])
    def test_clamp(self, value, expected):
        assert clamp(value, 0.0, 1.0) == expected
