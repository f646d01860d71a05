"""
Preprocessors
-------------

Stateless transforms applied to a raw sequence before local distances are computed.
Every preprocessor returns a new array of the same length and never mutates its input.
"""

from abc import ABC, abstractmethod

import numpy as np
from sklearn.preprocessing import minmax_scale

from ndtw.logging import get_logger, raise_if, raise_if_not

logger = get_logger(__name__)


def _as_values(data) -> np.ndarray:
    values = np.asarray(data, dtype=float)
    raise_if_not(
        values.ndim == 1,
        f"Preprocessors expect a 1-D sequence, received an array with shape {values.shape}.",
        logger,
    )
    return values


class Preprocessor(ABC):
    """Base class of all preprocessors.

    Subclasses implement :meth:`preprocess`, which maps a 1-D sequence to a new 1-D sequence of equal length.
    Instances are callable, ``preprocessor(values)`` is equivalent to ``preprocessor.preprocess(values)``.
    """

    name: str = "Preprocessor"

    @abstractmethod
    def preprocess(self, data) -> np.ndarray:
        pass

    def __call__(self, data) -> np.ndarray:
        return self.preprocess(data)

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"{type(self).__name__}()"


class NonePreprocessor(Preprocessor):
    """Identity transform."""

    name = "None"

    def preprocess(self, data) -> np.ndarray:
        return _as_values(data).copy()


class CentralizationPreprocessor(Preprocessor):
    """Subtracts the arithmetic mean of the sequence from every element."""

    name = "Centralization"

    def preprocess(self, data) -> np.ndarray:
        values = _as_values(data)
        return values - values.mean()


class NormalizationPreprocessor(Preprocessor):
    name = "Normalization"

    def __init__(self, min_boundary: float = 0.0, max_boundary: float = 1.0):
        """Linear rescaling of a sequence to the range `[min_boundary, max_boundary]`.

        The minimum of the sequence is mapped to `min_boundary` and its maximum to `max_boundary`.

        Parameters
        ----------
        min_boundary
            The value the minimum of the sequence is mapped to.
        max_boundary
            The value the maximum of the sequence is mapped to. Must be greater than `min_boundary`.

        Raises
        ------
        ValueError
            At construction if `min_boundary >= max_boundary`, and in :meth:`preprocess` if the sequence has a
            zero range (all elements equal), as the rescaling would divide by zero.
        """
        raise_if_not(
            min_boundary < max_boundary,
            f"Normalization requires `min_boundary < max_boundary`, received ({min_boundary}, {max_boundary}).",
            logger,
        )
        self.min_boundary = float(min_boundary)
        self.max_boundary = float(max_boundary)

    def preprocess(self, data) -> np.ndarray:
        values = _as_values(data)
        raise_if(
            values.size == 0 or np.ptp(values) == 0,
            "Cannot normalize a sequence with zero range (all values are equal).",
            logger,
        )
        return minmax_scale(values, feature_range=(self.min_boundary, self.max_boundary))

    def __repr__(self):
        return f"NormalizationPreprocessor(min_boundary={self.min_boundary}, max_boundary={self.max_boundary})"


class StandardizationPreprocessor(Preprocessor):
    """Z-score standardization.

    Subtracts the mean and divides by the sample standard deviation (Bessel-corrected, divisor ``n - 1``).
    Sequences with fewer than two elements or with zero variance raise a `ValueError`.
    """

    name = "Standardization"

    def preprocess(self, data) -> np.ndarray:
        values = _as_values(data)
        raise_if(
            values.size < 2,
            "Standardization requires at least two values to estimate the standard deviation.",
            logger,
        )
        raise_if(
            np.ptp(values) == 0,
            "Cannot standardize a sequence with zero variance (all values are equal).",
            logger,
        )
        return (values - values.mean()) / values.std(ddof=1)
