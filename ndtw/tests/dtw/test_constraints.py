import numpy as np
import pytest

from ndtw.dtw import NoWindow, SakoeChiba, SlopeConstraint


class TestWindows:
    def test_no_window(self):
        window = NoWindow()
        window.init_size(3, 4)

        assert len(window) == 12
        assert (0, 0) in window
        assert (2, 3) in window
        assert (3, 0) not in window
        assert window.mask().all()

    def test_sakoe_chiba_longer_x(self):
        window = SakoeChiba(max_shift=1)
        window.init_size(5, 3)

        # towards the shorter series the shift is 1, towards the longer one 1 + (5 - 3)
        assert (0, 1) in window
        assert (0, 2) not in window
        assert (3, 0) in window
        assert (4, 0) not in window
        assert (4, 2) in window

    def test_sakoe_chiba_longer_y(self):
        window = SakoeChiba(max_shift=1)
        window.init_size(3, 5)

        assert (1, 0) in window
        assert (2, 0) not in window
        assert (0, 3) in window
        assert (0, 4) not in window
        assert (2, 4) in window

    @pytest.mark.parametrize("n,m", [(5, 3), (3, 5), (4, 4), (1, 6)])
    @pytest.mark.parametrize("max_shift", [0, 1, 3])
    def test_sakoe_chiba_mask_matches_membership(self, n, m, max_shift):
        window = SakoeChiba(max_shift)
        window.init_size(n, m)
        mask = window.mask()

        expected = np.array([[(i, j) in window for j in range(m)] for i in range(n)])
        np.testing.assert_array_equal(mask, expected)
        assert len(window) == expected.sum()

        # the band always connects both corners
        assert mask[0, 0] and mask[n - 1, m - 1]

    def test_sakoe_chiba_wide_band_covers_grid(self):
        window = SakoeChiba(max_shift=7)
        window.init_size(7, 4)
        assert window.mask().all()

    @pytest.mark.parametrize("max_shift", [-1, 1.5, True])
    def test_sakoe_chiba_invalid(self, max_shift):
        with pytest.raises(ValueError):
            SakoeChiba(max_shift)


class TestSlopeConstraint:
    def test_leaps(self):
        slope = SlopeConstraint(diagonal=2, aside=2)

        assert slope.padding == 4
        assert slope.x_leaps[1] == ((1, 0), (1, 1), (1, 1))
        assert slope.x_leaps[2] == ((1, 0), (1, 0), (1, 1), (1, 1))
        assert slope.y_leaps[1] == ((0, 1), (1, 1), (1, 1))
        assert slope.y_leaps[2] == ((0, 1), (0, 1), (1, 1), (1, 1))

    def test_no_side_steps(self):
        slope = SlopeConstraint(diagonal=1, aside=0)
        assert slope.padding == 1
        assert slope.x_leaps == [()]
        assert slope.y_leaps == [()]

    def test_equality(self):
        assert SlopeConstraint(1, 2) == SlopeConstraint(1, 2)
        assert SlopeConstraint(1, 2) != SlopeConstraint(2, 1)
        assert len({SlopeConstraint(1, 2), SlopeConstraint(1, 2)}) == 1

    @pytest.mark.parametrize(
        "diagonal,aside,match",
        [
            (0, 1, "must be greater than 0"),
            (1, -1, "greater or equal to 0"),
            (1.5, 1, "must be an integer"),
        ],
    )
    def test_invalid(self, diagonal, aside, match):
        with pytest.raises(ValueError, match=match):
            SlopeConstraint(diagonal, aside)
