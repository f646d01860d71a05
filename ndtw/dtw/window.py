from abc import ABC, abstractmethod

import numpy as np

from ndtw.logging import get_logger, raise_if, raise_if_not

logger = get_logger(__name__)


class Window(ABC):
    """
    Global constraint on the cells `(i, j)` an alignment path may visit,
    where `i` indexes series A (length `n`) and `j` indexes series B (length `m`).
    """

    n: int
    m: int

    def init_size(self, n: int, m: int):
        """
        Called by the DTW engine to initialize the window to a certain size.

        Parameters
        ----------
        n
            The length of series A
        m
            The length of series B
        """
        self.n = n
        self.m = m

    @abstractmethod
    def __contains__(self, elem: tuple[int, int]) -> bool:
        """
        Parameters
        ----------
        elem
            (i,j) index, where i indexes series A and j series B

        Returns
        -------
        bool
            Whether the alignment path may pass through the cell.
        """

    @abstractmethod
    def mask(self) -> np.ndarray:
        """
        Returns
        -------
        np.ndarray of shape (n, m)
            Boolean array, True for every admissible cell.
        """

    def __len__(self) -> int:
        return int(np.count_nonzero(self.mask()))


class NoWindow(Window):
    """
    Window covers the entire grid,
    meaning every possible alignment between series A and series B is considered.
    """

    def __contains__(self, elem: tuple[int, int]) -> bool:
        i, j = elem
        return 0 <= i < self.n and 0 <= j < self.m

    def mask(self) -> np.ndarray:
        return np.ones((self.n, self.m), dtype=bool)

    def __len__(self):
        return self.n * self.m

    def __repr__(self):
        return "NoWindow()"


class SakoeChiba(Window):
    """
    Forms a diagonal band where `max_shift` controls the maximum allowed shift between the two series.

    When the series have different lengths, the band is widened by the length difference on the side of the
    longer series, so that the band still connects cell `(0, 0)` with cell `(n-1, m-1)`.

    For ``n >= m`` a cell `(i, j)` is outside the band when ``j - i > max_shift`` or
    ``i - j > max_shift + (n - m)``; for ``n < m`` the roles of `i` and `j` are swapped.
    """

    def __init__(self, max_shift: int):
        raise_if(
            isinstance(max_shift, bool) or int(max_shift) != max_shift,
            f"Sakoe-Chiba max shift must be an integer, received {max_shift}.",
            logger,
        )
        raise_if_not(
            max_shift >= 0,
            "Sakoe-Chiba max shift value should be positive or None.",
            logger,
        )
        self.max_shift = int(max_shift)

    def init_size(self, n: int, m: int):
        super().init_size(n, m)
        self.length_difference = abs(n - m)
        self.x_longer = n >= m

    def __contains__(self, elem: tuple[int, int]) -> bool:
        i, j = elem
        if not (0 <= i < self.n and 0 <= j < self.m):
            return False

        # shift measured towards the shorter series, then towards the longer one
        if self.x_longer:
            ahead, behind = j - i, i - j
        else:
            ahead, behind = i - j, j - i

        if ahead > self.max_shift:
            return False
        if behind > self.max_shift + self.length_difference:
            return False
        return True

    def mask(self) -> np.ndarray:
        shift = np.arange(self.n)[:, np.newaxis] - np.arange(self.m)[np.newaxis, :]
        if not self.x_longer:
            shift = -shift
        return (-shift <= self.max_shift) & (
            shift <= self.max_shift + self.length_difference
        )

    def __repr__(self):
        return f"SakoeChiba(max_shift={self.max_shift})"
