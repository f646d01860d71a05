import copy
import threading
from collections.abc import Sequence
from typing import Optional, Union

import numpy as np
import pandas as pd
import xarray as xr

from ndtw.config import get_option
from ndtw.logging import get_logger, raise_if, raise_if_not, raise_log, time_log
from ndtw.preprocessing import Preprocessor
from ndtw.series import SeriesVariable

from .cost_matrix import DIAGONAL, TERMINAL, X_MOVE, Y_MOVE, CostMatrix
from .distance import DistanceMeasure
from .slope import SlopeConstraint
from .window import NoWindow, SakoeChiba, Window

logger = get_logger(__name__)

INF = float("inf")

DIMS = ("time", "component")


# CORE ALGORITHM
def _fill_without_slope(
    matrix: CostMatrix, admissible: np.ndarray, boundary_end: bool
):
    """Backward recurrence over single diagonal, x and y moves.

    Ties are broken in the order diagonal, x move, y move.
    """
    n, m = matrix.n, matrix.m
    end_offset = n - m
    open_end = not boundary_end

    # PERFORMANCE: hot loop, work on nested lists rather than numpy scalars
    dist = matrix.distances.tolist()
    cost = matrix.costs.tolist()
    steps = matrix.steps.tolist()
    admissible = admissible.tolist()

    for i in range(n - 1, -1, -1):
        row_dist = dist[i]
        row_cost = cost[i]
        next_row_cost = cost[i + 1]
        row_steps = steps[i]
        row_admissible = admissible[i]

        for j in range(m - 1, -1, -1):
            if not row_admissible[j]:
                row_cost[j] = INF
                continue

            diagonal = next_row_cost[j + 1]
            x_neighbour = next_row_cost[j]
            y_neighbour = row_cost[j + 1]

            if diagonal == INF and (open_end or i - j == end_offset):
                row_cost[j] = row_dist[j]
                row_steps[j] = TERMINAL
            elif diagonal <= x_neighbour and diagonal <= y_neighbour:
                row_cost[j] = diagonal + row_dist[j]
                row_steps[j] = DIAGONAL
            elif x_neighbour <= y_neighbour:
                row_cost[j] = x_neighbour + row_dist[j]
                row_steps[j] = X_MOVE
            else:
                row_cost[j] = y_neighbour + row_dist[j]
                row_steps[j] = Y_MOVE

    matrix.costs[:] = cost
    matrix.steps[:] = steps


def _fill_with_slope(
    matrix: CostMatrix,
    admissible: np.ndarray,
    boundary_end: bool,
    slope: SlopeConstraint,
):
    """Backward recurrence over single diagonal moves and slope constrained leaps.

    The diagonal move is evaluated first; a leap only replaces the current best candidate when strictly cheaper.
    """
    n, m = matrix.n, matrix.m
    end_offset = n - m
    open_end = not boundary_end
    diagonal_steps = slope.diagonal
    aside_steps = slope.aside

    dist = matrix.distances.tolist()
    cost = matrix.costs.tolist()
    steps = matrix.steps.tolist()
    admissible = admissible.tolist()

    x_leap_codes = [CostMatrix.x_leap_code(a) for a in range(aside_steps + 1)]
    y_leap_codes = [CostMatrix.y_leap_code(a) for a in range(aside_steps + 1)]

    for i in range(n - 1, -1, -1):
        row_dist = dist[i]
        row_cost = cost[i]
        row_steps = steps[i]
        row_admissible = admissible[i]

        for j in range(m - 1, -1, -1):
            if not row_admissible[j]:
                row_cost[j] = INF
                continue

            lowest_cost = cost[i + 1][j + 1]
            lowest_code = DIAGONAL

            x_side_cost = 0.0
            y_side_cost = 0.0
            for aside in range(1, aside_steps + 1):
                # side steps are shared by all longer leaps, accumulate them once
                x_side_cost += dist[i + aside][j]
                y_side_cost += row_dist[j + aside]

                x_leap_cost = x_side_cost
                y_leap_cost = y_side_cost
                for forward in range(1, diagonal_steps):
                    x_leap_cost += dist[i + aside + forward][j + forward]
                    y_leap_cost += dist[i + forward][j + aside + forward]

                x_leap_cost += cost[i + aside + diagonal_steps][j + diagonal_steps]
                y_leap_cost += cost[i + diagonal_steps][j + aside + diagonal_steps]

                if x_leap_cost < lowest_cost:
                    lowest_cost = x_leap_cost
                    lowest_code = x_leap_codes[aside]

                if y_leap_cost < lowest_cost:
                    lowest_cost = y_leap_cost
                    lowest_code = y_leap_codes[aside]

            if lowest_cost == INF and (open_end or i - j == end_offset):
                lowest_cost = 0.0
                lowest_code = TERMINAL

            row_cost[j] = lowest_cost + row_dist[j]
            row_steps[j] = lowest_code

    matrix.costs[:] = cost
    matrix.steps[:] = steps


# Public API
class DTW:
    def __init__(
        self,
        series_variables: Union[SeriesVariable, Sequence[SeriesVariable]],
        distance_measure: Union[DistanceMeasure, str] = DistanceMeasure.EUCLIDEAN,
        boundary_start: bool = True,
        boundary_end: bool = True,
        slope_step_diagonal: Optional[int] = None,
        slope_step_aside: Optional[int] = None,
        sakoe_chiba_max_shift: Optional[int] = None,
        window: Optional[Window] = None,
    ):
        """
        Dynamic Time Warping between two (possibly multivariate) series.

        All inputs are validated at construction. The distance and cost matrices are computed once, on the first
        request of a result (:meth:`cost`, :meth:`path`, :meth:`distance_matrix`, :meth:`cost_matrix`), and reused
        afterwards. The first computation is guarded by a lock, so an engine can be shared between threads.

        Parameters
        ----------
        series_variables
            One or more `SeriesVariable`. All variables must have the same length of series A and the same length
            of series B (series A and B may differ in length).
        distance_measure
            How per-variable differences are combined into the local distance, see :class:`DistanceMeasure`.
        boundary_start
            If True, the path must start at cell (0, 0). Otherwise it may start anywhere on the first row or the
            first column.
        boundary_end
            If True, the path must end at cell (x_length-1, y_length-1). Otherwise it may end anywhere on the last
            row or the last column.
        slope_step_diagonal
            Diagonal steps forced after a run of side steps. Use together with `slope_step_aside`.
            Leave None for no slope constraint.
        slope_step_aside
            Maximum number of consecutive side steps. Use together with `slope_step_diagonal`.
            Leave None for no slope constraint.
        sakoe_chiba_max_shift
            Sakoe-Chiba max shift constraint, see :class:`SakoeChiba`. Leave None for no band.
        window
            Alternatively to `sakoe_chiba_max_shift`, a :class:`Window` defining the admissible cells.

        Raises
        ------
        ValueError
            If no variable is given, if the variables' lengths differ, if the slope parameters are only partially
            given or out of range, if the max shift is negative, or if the estimated work exceeds the
            ``dtw.max_cells`` option.
        """
        if isinstance(series_variables, SeriesVariable):
            series_variables = [series_variables]
        series_variables = list(series_variables)

        raise_if(
            len(series_variables) == 0,
            "Series should have values for at least one variable.",
            logger,
        )
        for variable in series_variables:
            if not isinstance(variable, SeriesVariable):
                raise_log(
                    TypeError(
                        f"Expected SeriesVariable instances, received {type(variable).__name__}."
                    ),
                    logger,
                )

        x_length = len(series_variables[0].original_x)
        y_length = len(series_variables[0].original_y)
        for variable in series_variables:
            raise_if_not(
                len(variable.original_x) == x_length
                and len(variable.original_y) == y_length,
                "All variables within a series should have the same number of values.",
                logger,
            )

        self._series_variables = tuple(series_variables)
        self._x_length = x_length
        self._y_length = y_length
        self._distance_measure = DistanceMeasure.from_name(distance_measure)
        self._boundary_start = bool(boundary_start)
        self._boundary_end = bool(boundary_end)

        if slope_step_diagonal is not None or slope_step_aside is not None:
            raise_if(
                slope_step_diagonal is None or slope_step_aside is None,
                "Both values or none for slope constraint must be specified.",
                logger,
            )
            self._slope = SlopeConstraint(slope_step_diagonal, slope_step_aside)
        else:
            self._slope = None

        if sakoe_chiba_max_shift is not None:
            raise_if(
                window is not None,
                "Specify either `sakoe_chiba_max_shift` or `window`, not both.",
                logger,
            )
            window = SakoeChiba(sakoe_chiba_max_shift)
        elif window is None:
            window = NoWindow()
        elif not isinstance(window, Window):
            raise_log(
                TypeError(
                    f"`window` must be a Window instance, received {type(window).__name__}."
                ),
                logger,
            )

        window = copy.deepcopy(window)
        window.init_size(x_length, y_length)
        self._window = window

        aside = 0 if self._slope is None else self._slope.aside
        work = x_length * y_length * (1 + 2 * aside)
        max_cells = get_option("dtw.max_cells")
        raise_if(
            max_cells is not None and work > max_cells,
            f"Estimated DTW work of {work} cells exceeds the `dtw.max_cells` limit of {max_cells}.",
            logger,
        )

        if (
            type(window) is NoWindow
            and self._slope is None
            and x_length * y_length > get_option("dtw.warn_cells")
        ):
            logger.warning(
                "Exact evaluation will result in poor performance on large datasets."
                " Consider using a Sakoe-Chiba band or a slope constraint."
            )

        self._matrix: Optional[CostMatrix] = None
        self._lock = threading.Lock()

    # metadata
    @property
    def x_length(self) -> int:
        return self._x_length

    @property
    def y_length(self) -> int:
        return self._y_length

    @property
    def series_variables(self) -> tuple[SeriesVariable, ...]:
        return self._series_variables

    @property
    def distance_measure(self) -> DistanceMeasure:
        return self._distance_measure

    @property
    def boundary_start(self) -> bool:
        return self._boundary_start

    @property
    def boundary_end(self) -> bool:
        return self._boundary_end

    @property
    def window(self) -> Window:
        return self._window

    @property
    def slope_constraint(self) -> Optional[SlopeConstraint]:
        return self._slope

    @property
    def is_calculated(self) -> bool:
        return self._matrix is not None

    # calculation
    def _calculated(self) -> CostMatrix:
        if self._matrix is None:
            with self._lock:
                if self._matrix is None:
                    self._matrix = self._calculate()
        return self._matrix

    @time_log(logger)
    def _calculate(self) -> CostMatrix:
        matrix = CostMatrix(self._x_length, self._y_length, self._slope)

        xs, ys, weights = [], [], []
        for variable in self._series_variables:
            x = variable.preprocessed_x()
            y = variable.preprocessed_y()
            raise_if_not(
                len(x) == self._x_length and len(y) == self._y_length,
                f"Preprocessor of variable '{variable.name}' changed the length of the series.",
                logger,
            )
            xs.append(x)
            ys.append(y)
            weights.append(variable.weight)

        matrix.set_local_distances(
            self._distance_measure.local_distances(xs, ys, weights)
        )

        admissible = self._window.mask()
        if self._slope is None:
            _fill_without_slope(matrix, admissible, self._boundary_end)
        else:
            _fill_with_slope(matrix, admissible, self._boundary_end, self._slope)

        matrix.freeze()
        return matrix

    def _start(self, matrix: CostMatrix) -> tuple[int, int]:
        if self._boundary_start:
            return 0, 0

        # scan the first row, then the first column; the first minimum wins
        costs = matrix.costs
        best = (0, 0)
        best_cost = costs[0, 0]
        for k in range(1, self._y_length):
            if costs[0, k] < best_cost:
                best, best_cost = (0, k), costs[0, k]
        for k in range(1, self._x_length):
            if costs[k, 0] < best_cost:
                best, best_cost = (k, 0), costs[k, 0]
        return best

    def _is_end(self, x: int, y: int) -> bool:
        last_x = x == self._x_length - 1
        last_y = y == self._y_length - 1
        if self._boundary_end:
            return last_x and last_y
        return last_x or last_y

    # results
    def cost(self) -> float:
        """
        Returns
        -------
        float
            The cost of the optimal alignment. `inf` if the constraints leave no admissible path.
        """
        matrix = self._calculated()
        start = self._start(matrix)
        return float(matrix.costs[start])

    def path(self) -> np.ndarray:
        """
        Returns
        -------
        np.ndarray of shape `(len(path), 2)`
            An array of indices [[x0,y0], [x1,y1], [x2,y2], ...], where x indexes into series A
            and y indexes into series B.
            Indices are in monotonic order, path[k] >= path[k-1]

        Raises
        ------
        ValueError
            If the constraints leave no admissible path (the cost is infinite).
        """
        matrix = self._calculated()
        x, y = self._start(matrix)

        raise_if(
            np.isinf(matrix.costs[x, y]),
            "No admissible alignment path exists for the given constraints.",
            logger,
        )

        path = [(x, y)]
        while not self._is_end(x, y):
            moves = matrix.moves(x, y)
            if not moves:
                raise_log(
                    ValueError(
                        f"Alignment path is interrupted at cell ({x}, {y}) before reaching the end boundary."
                    ),
                    logger,
                )
            for dx, dy in moves:
                x += dx
                y += dy
                path.append((x, y))

        return np.array(path, dtype=int)

    def mean_cost(self) -> float:
        """
        Returns
        -------
        float
            The alignment cost divided by the number of cells on the path.
        """
        return self.cost() / len(self.path())

    def distance_matrix(self) -> np.ndarray:
        """
        Returns
        -------
        np.ndarray of shape `(x_length + padding, y_length + padding)`
            Read-only local distances. The sentinel band past the data region holds zeros.
        """
        return self._calculated().distances

    def cost_matrix(self) -> np.ndarray:
        """
        Returns
        -------
        np.ndarray of shape `(x_length + padding, y_length + padding)`
            Read-only cumulative costs towards the end of the alignment. The sentinel band and the cells pruned
            by the window hold `inf`.
        """
        return self._calculated().costs

    def path_frame(self) -> pd.DataFrame:
        """
        Returns
        -------
        pd.DataFrame
            The alignment path with columns `x` and `y`.
        """
        return pd.DataFrame(self.path(), columns=["x", "y"])

    def warped(self) -> tuple[xr.DataArray, xr.DataArray]:
        """
        Warps the two series according to the path returned by :meth:`path`.
        This brings two series that are out-of-phase back into phase.

        The raw (not preprocessed) values are warped.

        Returns
        -------
        (xr.DataArray, xr.DataArray)
            Two arrays of the same length with dims `("time", "component")`, indexed by pd.RangeIndex along time
            and by the variable names along component.
        """
        path = self.path()
        components = pd.Index(
            [
                variable.name if variable.name is not None else f"variable_{k}"
                for k, variable in enumerate(self._series_variables)
            ]
        )

        values_x = np.stack([v.original_x for v in self._series_variables], axis=1)
        values_y = np.stack([v.original_y for v in self._series_variables], axis=1)

        warped = []
        for values, index in ((values_x, path[:, 0]), (values_y, path[:, 1])):
            warped_values = values[index]
            warped.append(
                xr.DataArray(
                    data=warped_values,
                    dims=DIMS,
                    coords={
                        DIMS[0]: pd.RangeIndex(warped_values.shape[0]),
                        DIMS[1]: components,
                    },
                )
            )
        return warped[0], warped[1]

    def __repr__(self):
        return (
            f"DTW(x_length={self._x_length}, y_length={self._y_length}, "
            f"variables={len(self._series_variables)}, distance_measure={self._distance_measure.name}, "
            f"boundary_start={self._boundary_start}, boundary_end={self._boundary_end}, "
            f"slope_constraint={self._slope}, window={self._window})"
        )


def _to_variables(
    series_a,
    series_b,
    names: Optional[Sequence[str]],
    preprocessor: Optional[Preprocessor],
    weights: Optional[Sequence[float]],
) -> list[SeriesVariable]:
    if isinstance(series_a, pd.DataFrame) or isinstance(series_b, pd.DataFrame):
        raise_if_not(
            isinstance(series_a, pd.DataFrame) and isinstance(series_b, pd.DataFrame),
            "Either both or none of the series must be DataFrames.",
            logger,
        )
        columns = (
            list(names)
            if names is not None
            else [col for col in series_a.columns if col in series_b.columns]
        )
        return SeriesVariable.from_dataframes(
            series_a,
            series_b,
            columns=columns,
            preprocessors=(
                {col: preprocessor for col in columns}
                if preprocessor is not None
                else None
            ),
            weights=dict(zip(columns, weights)) if weights is not None else None,
        )

    values_a = np.asarray(series_a, dtype=float)
    values_b = np.asarray(series_b, dtype=float)
    raise_if_not(
        values_a.ndim in (1, 2) and values_b.ndim in (1, 2),
        "Expected 1-D arrays (univariate) or 2-D arrays of shape (time, variables).",
        logger,
    )
    if values_a.ndim == 1:
        values_a = values_a[:, np.newaxis]
    if values_b.ndim == 1:
        values_b = values_b[:, np.newaxis]

    n_variables = values_a.shape[1]
    raise_if_not(
        values_b.shape[1] == n_variables,
        "Both series should have the same numbers of variables.",
        logger,
    )
    names = list(names) if names is not None else [None] * n_variables
    weights = list(weights) if weights is not None else [1.0] * n_variables
    raise_if_not(
        len(names) == n_variables and len(weights) == n_variables,
        "Expected one name and one weight per variable.",
        logger,
    )

    return [
        SeriesVariable(
            values_a[:, k],
            values_b[:, k],
            name=names[k],
            preprocessor=preprocessor,
            weight=weights[k],
        )
        for k in range(n_variables)
    ]


def dtw(
    series_a: Union[np.ndarray, Sequence[float], pd.DataFrame],
    series_b: Union[np.ndarray, Sequence[float], pd.DataFrame],
    distance_measure: Union[DistanceMeasure, str] = DistanceMeasure.EUCLIDEAN,
    boundary_start: bool = True,
    boundary_end: bool = True,
    slope_step_diagonal: Optional[int] = None,
    slope_step_aside: Optional[int] = None,
    sakoe_chiba_max_shift: Optional[int] = None,
    window: Optional[Window] = None,
    names: Optional[Sequence[str]] = None,
    preprocessor: Optional[Preprocessor] = None,
    weights: Optional[Sequence[float]] = None,
) -> DTW:
    """
    Determines the optimal alignment between two series series_a and series_b,
    according to the Dynamic Time Warping algorithm.

    Dynamic Time Warping can be applied to determine how closely two series correspond,
    irrespective of phase, length or speed differences.

    Parameters
    ----------
    series_a
        A 1-D array (univariate), a 2-D array of shape `(time, variables)` or a DataFrame with one column per
        variable.
    series_b
        Same as `series_a`, with the same variables. The length may differ.
    distance_measure
        How per-variable differences are combined into the local distance.
    boundary_start
        Whether the path must start at the first element of both series.
    boundary_end
        Whether the path must end at the last element of both series.
    slope_step_diagonal
        Diagonal steps of the slope constraint, see :class:`DTW`.
    slope_step_aside
        Side steps of the slope constraint, see :class:`DTW`.
    sakoe_chiba_max_shift
        Sakoe-Chiba band max shift.
    window
        Alternatively to `sakoe_chiba_max_shift`, a :class:`Window`.
    names
        Optionally, the variable names. For DataFrames, the columns to use.
    preprocessor
        Optionally, a preprocessor applied to every variable.
    weights
        Optionally, one weight per variable.

    Returns
    -------
    DTW
        Engine exposing cost, path, matrices and warped series.
    """
    variables = _to_variables(series_a, series_b, names, preprocessor, weights)
    return DTW(
        variables,
        distance_measure=distance_measure,
        boundary_start=boundary_start,
        boundary_end=boundary_end,
        slope_step_diagonal=slope_step_diagonal,
        slope_step_aside=slope_step_aside,
        sakoe_chiba_max_shift=sakoe_chiba_max_shift,
        window=window,
    )
