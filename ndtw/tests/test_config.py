"""
Tests for the configuration system
"""

import logging

import numpy as np
import pytest
from testfixtures import LogCapture

from ndtw import SeriesVariable
from ndtw.config import (
    describe_option,
    get_option,
    option_context,
    reset_option,
    set_option,
)
from ndtw.dtw import DTW


class TestConfig:
    """Test suite for the ndtw configuration system."""

    def test_get_option_exact_match(self):
        assert get_option("dtw.warn_cells") == 10**6
        assert get_option("dtw.max_cells") is None

    def test_get_option_empty_pattern(self):
        with pytest.raises(ValueError, match="Pattern must be non-empty"):
            get_option("")

    def test_get_option_invalid_pattern(self):
        with pytest.raises(ValueError, match="No option found matching pattern"):
            get_option("invalid.option")

    def test_get_option_ambiguous_pattern(self):
        with pytest.raises(ValueError, match="matches multiple options"):
            get_option("dtw")

    def test_set_option_valid(self):
        set_option("dtw.warn_cells", 20)
        assert get_option("dtw.warn_cells") == 20

        set_option("dtw.max_cells", 100)
        assert get_option("dtw.max_cells") == 100
        set_option("dtw.max_cells", None)
        assert get_option("dtw.max_cells") is None

    def test_set_option_invalid_value(self):
        with pytest.raises(ValueError, match="must be a positive integer"):
            set_option("dtw.warn_cells", -5)

        with pytest.raises(ValueError, match="must be a positive integer"):
            set_option("dtw.warn_cells", 0)

        with pytest.raises(ValueError, match="must be a positive integer"):
            set_option("dtw.warn_cells", None)

        with pytest.raises(ValueError, match="must be a positive integer or None"):
            set_option("dtw.max_cells", "invalid")

        with pytest.raises(ValueError, match="must be a positive integer or None"):
            set_option("dtw.max_cells", True)

    def test_reset_option(self):
        set_option("dtw.warn_cells", 5)
        set_option("dtw.max_cells", 5)
        reset_option("dtw")
        assert get_option("dtw.warn_cells") == 10**6
        assert get_option("dtw.max_cells") is None

    def test_describe_option(self):
        description = describe_option("dtw.max_cells")
        assert description.startswith("dtw.max_cells : int")
        assert "[default: None] [currently: None]" in description

        both = describe_option("all")
        assert "dtw.max_cells" in both and "dtw.warn_cells" in both

    def test_option_context(self):
        set_option("dtw.warn_cells", 50)
        with option_context("dtw.warn_cells", 10, "dtw.max_cells", 1000):
            assert get_option("dtw.warn_cells") == 10
            assert get_option("dtw.max_cells") == 1000
        assert get_option("dtw.warn_cells") == 50
        assert get_option("dtw.max_cells") is None

    def test_option_context_odd_arguments(self):
        with pytest.raises(ValueError, match="even number of arguments"):
            with option_context("dtw.warn_cells"):
                pass

    def test_option_context_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with option_context("dtw.warn_cells", 3):
                raise RuntimeError("boom")
        assert get_option("dtw.warn_cells") == 10**6


class TestEngineOptions:
    values_a = np.arange(10, dtype=float)
    values_b = np.arange(12, dtype=float)

    def test_max_cells_rejects_large_problem(self):
        variable = SeriesVariable(self.values_a, self.values_b)
        with option_context("dtw.max_cells", 119):
            with pytest.raises(ValueError, match="exceeds the `dtw.max_cells` limit"):
                DTW(variable)
        with option_context("dtw.max_cells", 120):
            DTW(variable)

    def test_max_cells_counts_slope_leaps(self):
        variable = SeriesVariable(self.values_a, self.values_b)
        with option_context("dtw.max_cells", 120 * 5 - 1):
            with pytest.raises(ValueError):
                DTW(variable, slope_step_diagonal=1, slope_step_aside=2)
        with option_context("dtw.max_cells", 120 * 5):
            DTW(variable, slope_step_diagonal=1, slope_step_aside=2)

    def test_warn_cells(self):
        logging.disable(logging.NOTSET)
        try:
            variable = SeriesVariable(self.values_a, self.values_b)
            with LogCapture(level=logging.WARNING) as lc:
                with option_context("dtw.warn_cells", 100):
                    DTW(variable)
                    # a band disables the warning
                    DTW(variable, sakoe_chiba_max_shift=3)
            assert len(lc.records) == 1
            assert "poor performance" in lc.records[0].getMessage()
        finally:
            logging.disable(logging.CRITICAL)
