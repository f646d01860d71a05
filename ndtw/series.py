"""
Series Variable
---------------

A ``SeriesVariable`` bundles the two sequences (series A and series B) of one variable taking part in a
(multivariate) Dynamic Time Warping alignment, together with an optional preprocessor, a display name and a weight.
"""

from collections.abc import Mapping, Sequence
from typing import Optional, Union

import numpy as np
import pandas as pd

from ndtw.logging import get_logger, raise_if, raise_if_not, raise_log
from ndtw.preprocessing import Preprocessor

logger = get_logger(__name__)


def _frozen_values(values, label: str) -> np.ndarray:
    values = np.array(values, dtype=float)
    raise_if_not(
        values.ndim == 1,
        f"Series {label} must be a 1-D sequence, received an array with shape {values.shape}.",
        logger,
    )
    raise_if(
        len(values) == 0,
        f"Series {label} should have at least one value.",
        logger,
    )
    raise_if(
        not np.all(np.isfinite(values)),
        f"Series {label} contains nan or infinite values. Dynamic Time Warping only supports finite values.",
        logger,
    )
    values.flags.writeable = False
    return values


class SeriesVariable:
    def __init__(
        self,
        x: Union[Sequence[float], np.ndarray],
        y: Union[Sequence[float], np.ndarray],
        name: Optional[str] = None,
        preprocessor: Optional[Preprocessor] = None,
        weight: float = 1.0,
    ):
        """One variable of a DTW problem.

        Both sequences are copied into read-only arrays, so later changes to the inputs do not affect the variable.

        Parameters
        ----------
        x
            The values of the variable in series A.
        y
            The values of the variable in series B. May differ in length from `x`.
        name
            Optionally, a display name for the variable.
        preprocessor
            Optionally, a :class:`Preprocessor` applied to each sequence before distances are computed.
        weight
            Multiplicative weight applied to the variable's per-cell difference before the distance
            measure combines the variables. Must be finite and non-negative.
        """
        self._x = _frozen_values(x, "A")
        self._y = _frozen_values(y, "B")

        if preprocessor is not None and not isinstance(preprocessor, Preprocessor):
            raise_log(
                TypeError(
                    f"`preprocessor` must be a Preprocessor instance, received {type(preprocessor).__name__}."
                ),
                logger,
            )

        weight = float(weight)
        raise_if_not(
            np.isfinite(weight) and weight >= 0,
            f"Variable weight must be finite and non-negative, received {weight}.",
            logger,
        )

        self._name = name
        self._preprocessor = preprocessor
        self._weight = weight

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def weight(self) -> float:
        return self._weight

    @property
    def preprocessor(self) -> Optional[Preprocessor]:
        return self._preprocessor

    @property
    def original_x(self) -> np.ndarray:
        """The raw values of series A."""
        return self._x

    @property
    def original_y(self) -> np.ndarray:
        """The raw values of series B."""
        return self._y

    def preprocessed_x(self) -> np.ndarray:
        """Series A after the preprocessor, or the raw values if no preprocessor is set."""
        return self._preprocess(self._x)

    def preprocessed_y(self) -> np.ndarray:
        """Series B after the preprocessor, or the raw values if no preprocessor is set."""
        return self._preprocess(self._y)

    def _preprocess(self, values: np.ndarray) -> np.ndarray:
        if self._preprocessor is None:
            return values
        return np.asarray(self._preprocessor.preprocess(values), dtype=float)

    def __len__(self):
        return len(self._x)

    def __repr__(self):
        return (
            f"SeriesVariable(name={self._name!r}, x_length={len(self._x)}, y_length={len(self._y)}, "
            f"preprocessor={self._preprocessor}, weight={self._weight})"
        )

    @classmethod
    def from_dataframes(
        cls,
        df_a: pd.DataFrame,
        df_b: pd.DataFrame,
        columns: Optional[Sequence[str]] = None,
        preprocessors: Optional[Mapping[str, Preprocessor]] = None,
        weights: Optional[Mapping[str, float]] = None,
    ) -> list["SeriesVariable"]:
        """Builds one variable per column shared by two DataFrames.

        Rows are the time axis, columns are variables. The index of the DataFrames is ignored.

        Parameters
        ----------
        df_a
            The DataFrame holding series A.
        df_b
            The DataFrame holding series B.
        columns
            Optionally, the columns to use (in this order). Defaults to the columns of `df_a` that are also
            present in `df_b`.
        preprocessors
            Optionally, a preprocessor per column name.
        weights
            Optionally, a weight per column name. Missing columns get a weight of 1.

        Returns
        -------
        list[SeriesVariable]
            The variables, named after their columns.
        """
        if columns is None:
            columns = [col for col in df_a.columns if col in df_b.columns]
        else:
            columns = list(columns)

        missing = [col for col in columns if col not in df_a.columns or col not in df_b.columns]
        raise_if(
            len(missing) > 0,
            f"Columns {missing} are not present in both DataFrames.",
            logger,
        )
        raise_if(
            len(columns) == 0,
            "The DataFrames do not share any column.",
            logger,
        )

        preprocessors = preprocessors or {}
        weights = weights or {}

        return [
            cls(
                df_a[col].to_numpy(dtype=float),
                df_b[col].to_numpy(dtype=float),
                name=str(col),
                preprocessor=preprocessors.get(col),
                weight=weights.get(col, 1.0),
            )
            for col in columns
        ]
