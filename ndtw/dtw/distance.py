from collections.abc import Sequence
from enum import Enum
from typing import Union

import numpy as np

from ndtw.logging import get_logger, raise_log

logger = get_logger(__name__)


class DistanceMeasure(Enum):
    """
    How the per-variable differences at one index pair are combined into a single local distance.

    With ``d_v = weight_v * (a_v[i] - b_v[j])`` for every variable `v`:

    - ``MANHATTAN``: ``sum(|d_v|)``
    - ``EUCLIDEAN``: ``sqrt(sum(d_v ** 2))``
    - ``SQUARED_EUCLIDEAN``: ``sum(d_v ** 2)``
    - ``MAXIMUM``: ``max(|d_v|)``
    """

    MANHATTAN = "manhattan"
    EUCLIDEAN = "euclidean"
    SQUARED_EUCLIDEAN = "squared_euclidean"
    MAXIMUM = "maximum"

    @classmethod
    def from_name(cls, measure: Union[str, "DistanceMeasure"]) -> "DistanceMeasure":
        """Resolves a measure from its member, member name or value (case-insensitive)."""
        if isinstance(measure, cls):
            return measure
        if not isinstance(measure, str):
            raise_log(
                TypeError(
                    f"Distance measure must be a DistanceMeasure or a string, received {type(measure).__name__}."
                ),
                logger,
            )
        key = measure.strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise_log(
            ValueError(
                f"Unknown distance measure '{measure}'. Expected one of {[m.value for m in cls]}."
            ),
            logger,
        )

    def local_distances(
        self,
        xs: Sequence[np.ndarray],
        ys: Sequence[np.ndarray],
        weights: Sequence[float],
    ) -> np.ndarray:
        """
        Computes the local distance matrix between two multivariate series.

        Parameters
        ----------
        xs
            For each variable, the (preprocessed) values of series A, all of length `n`.
        ys
            For each variable, the (preprocessed) values of series B, all of length `m`.
        weights
            For each variable, the weight applied to its differences.

        Returns
        -------
        np.ndarray of shape `(n, m)`
            The local distance for every index pair.
        """
        n, m = len(xs[0]), len(ys[0])
        distances = np.zeros((n, m), dtype=float)

        for x, y, weight in zip(xs, ys, weights):
            diff = weight * (np.asarray(x)[:, np.newaxis] - np.asarray(y)[np.newaxis, :])

            if self is DistanceMeasure.MANHATTAN:
                distances += np.abs(diff)
            elif self is DistanceMeasure.MAXIMUM:
                np.maximum(distances, np.abs(diff), out=distances)
            else:
                distances += diff * diff

        # square root only once all variables have been summed
        if self is DistanceMeasure.EUCLIDEAN:
            np.sqrt(distances, out=distances)

        return distances

    def __call__(self, x, y) -> float:
        """Local distance between two single observations (scalars or per-variable vectors)."""
        x = np.atleast_1d(np.asarray(x, dtype=float))
        y = np.atleast_1d(np.asarray(y, dtype=float))
        return float(
            self.local_distances(
                [x[[k]] for k in range(len(x))],
                [y[[k]] for k in range(len(y))],
                [1.0] * len(x),
            )[0, 0]
        )
