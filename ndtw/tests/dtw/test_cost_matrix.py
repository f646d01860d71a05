import numpy as np
import pytest

from ndtw.dtw import CostMatrix, SlopeConstraint
from ndtw.dtw.cost_matrix import DIAGONAL, NO_STEP, TERMINAL, X_MOVE, Y_MOVE


class TestCostMatrix:
    def test_unconstrained_layout(self):
        matrix = CostMatrix(3, 2)

        assert matrix.padding == 1
        assert matrix.distances.shape == (4, 3)
        assert np.all(matrix.distances == 0)
        assert np.all(np.isinf(matrix.costs))
        assert np.all(matrix.steps == NO_STEP)
        assert matrix.steps.dtype == np.int32
        assert len(matrix.step_table) == 4

    def test_step_codes(self):
        matrix = CostMatrix(2, 2)
        matrix.steps[0, 0] = DIAGONAL
        matrix.steps[0, 1] = X_MOVE
        matrix.steps[1, 0] = Y_MOVE
        matrix.steps[1, 1] = TERMINAL

        assert matrix.moves(0, 0) == ((1, 1),)
        assert matrix.moves(0, 1) == ((1, 0),)
        assert matrix.moves(1, 0) == ((0, 1),)
        assert matrix.moves(1, 1) == ()
        assert matrix.moves(2, 2) == ()

    def test_leap_codes(self):
        slope = SlopeConstraint(diagonal=1, aside=2)
        matrix = CostMatrix(4, 4, slope)

        assert matrix.padding == 3
        assert len(matrix.step_table) == 4 + 2 * 2
        for aside in (1, 2):
            assert matrix.step_table[CostMatrix.x_leap_code(aside)] == slope.x_leaps[aside]
            assert matrix.step_table[CostMatrix.y_leap_code(aside)] == slope.y_leaps[aside]

    def test_local_distances(self):
        matrix = CostMatrix(2, 3)
        local = np.arange(6, dtype=float).reshape(2, 3)
        matrix.set_local_distances(local)

        np.testing.assert_array_equal(matrix.distances[:2, :3], local)
        assert np.all(matrix.distances[2, :] == 0)
        assert np.all(matrix.distances[:, 3] == 0)

    def test_freeze(self):
        matrix = CostMatrix(2, 2)
        matrix.freeze()
        for array in (matrix.distances, matrix.costs, matrix.steps):
            with pytest.raises(ValueError):
                array[0, 0] = 1
