from typing import Optional

import numpy as np

from .slope import DIAGONAL_STEP, X_STEP, Y_STEP, SlopeConstraint, Step

NO_STEP = -1
TERMINAL = 0
DIAGONAL = 1
X_MOVE = 2
Y_MOVE = 3


class CostMatrix:
    """
    (n+padding) x (m+padding) matrices of a DTW computation.

    Cell (i,j) of `costs` holds the minimum cumulative cost of an admissible path from element i of series A and
    element j of series B to the end of the alignment. The recurrence looks ahead, so the matrices carry a band of
    `padding` sentinel rows and columns past the data region: `distances` is 0 there and `costs` is infinite.

    Every visited cell stores one small integer code in `steps`, indexing `step_table`, the ordered moves that lead
    from the cell to its successor on the optimal path:

    - ``NO_STEP`` (-1): cell never reached by the recurrence (sentinel band or pruned by the window)
    - ``TERMINAL`` (0): the path may end in this cell
    - ``DIAGONAL``, ``X_MOVE``, ``Y_MOVE``: single unit moves
    - further codes: slope constraint leaps, see :meth:`x_leap_code` and :meth:`y_leap_code`
    """

    def __init__(self, n: int, m: int, slope: Optional[SlopeConstraint] = None):
        self.n = n
        self.m = m
        self.padding = 1 if slope is None else slope.padding

        shape = (n + self.padding, m + self.padding)
        self.distances = np.zeros(shape, dtype=float)
        self.costs = np.full(shape, np.inf, dtype=float)
        self.steps = np.full(shape, NO_STEP, dtype=np.int32)

        self.step_table: list[tuple[Step, ...]] = [
            (),
            (DIAGONAL_STEP,),
            (X_STEP,),
            (Y_STEP,),
        ]
        if slope is not None:
            for aside in range(1, slope.aside + 1):
                self.step_table.append(slope.x_leaps[aside])
                self.step_table.append(slope.y_leaps[aside])

    @staticmethod
    def x_leap_code(aside: int) -> int:
        return Y_MOVE + 2 * aside - 1

    @staticmethod
    def y_leap_code(aside: int) -> int:
        return Y_MOVE + 2 * aside

    def set_local_distances(self, local: np.ndarray):
        self.distances[: self.n, : self.m] = local

    def moves(self, i: int, j: int) -> tuple[Step, ...]:
        """The moves recorded for cell (i,j), empty if the path cannot continue from it."""
        code = self.steps[i, j]
        if code == NO_STEP:
            return ()
        return self.step_table[code]

    def freeze(self):
        """Makes all matrices read-only."""
        for matrix in (self.distances, self.costs, self.steps):
            matrix.flags.writeable = False
