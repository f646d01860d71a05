"""
Series Generation
-----------------

Utilities for creating value sequences, for example to build alignment problems with a known answer.
"""

from numbers import Integral
from typing import Optional

import numpy as np

from ndtw.logging import get_logger, raise_if_not

logger = get_logger(__name__)


def _check_length(length: int):
    raise_if_not(
        isinstance(length, Integral)
        and not isinstance(length, bool)
        and length >= 1,
        f"`length` must be a positive integer, received {length}.",
        logger,
    )


def linear_values(
    start_value: float = 0,
    end_value: float = 1,
    length: int = 10,
    dtype: np.dtype = np.float64,
) -> np.ndarray:
    """
    Creates a sequence with a starting value of `start_value` that increases linearly such that
    it takes on the value `end_value` at the last entry. This means that
    the difference between two adjacent entries will be equal to
    (`end_value` - `start_value`) / (`length` - 1).

    Parameters
    ----------
    start_value
        The value of the first entry.
    end_value
        The value of the last entry.
    length
        The length of the returned sequence.
    dtype
        The desired NumPy dtype (np.float32 or np.float64) for the resulting sequence

    Returns
    -------
    np.ndarray
        A linearly increasing sequence.
    """
    _check_length(length)
    return np.linspace(start_value, end_value, length, dtype=dtype)


def sine_values(
    value_frequency: float = 0.1,
    value_amplitude: float = 1.0,
    value_phase: float = 0.0,
    value_y_offset: float = 0.0,
    length: int = 10,
    dtype: np.dtype = np.float64,
) -> np.ndarray:
    """
    Creates a sequence with a sinusoidal value progression with a given frequency, amplitude,
    phase and y offset.

    Parameters
    ----------
    value_frequency
        The number of periods that take place within one step.
    value_amplitude
        The maximum  difference between any value of the returned sequence and `y_offset`.
    value_phase
        The relative position within one period of the first value (in radians).
    value_y_offset
        The shift of the sine function along the y axis.
    length
        The length of the returned sequence.
    dtype
        The desired NumPy dtype (np.float32 or np.float64) for the resulting sequence

    Returns
    -------
    np.ndarray
        A sinusoidal sequence parametrized as indicated above.
    """
    _check_length(length)
    values = np.arange(length, dtype=dtype)
    return (
        value_amplitude * np.sin(2 * np.pi * value_frequency * values + value_phase)
        + value_y_offset
    )


def random_walk_values(
    mean: float = 0.0,
    std: float = 1.0,
    length: int = 10,
    random_state: Optional[int] = None,
    dtype: np.dtype = np.float64,
) -> np.ndarray:
    """
    Creates a random walk, where each step is obtained by sampling a gaussian distribution
    with mean `mean` and standard deviation `std`.

    Parameters
    ----------
    mean
        The mean of the gaussian distribution that is sampled at each step.
    std
        The standard deviation of the gaussian distribution that is sampled at each step.
    length
        The length of the returned sequence.
    random_state
        Optionally, a seed for reproducible walks.
    dtype
        The desired NumPy dtype (np.float32 or np.float64) for the resulting sequence

    Returns
    -------
    np.ndarray
        A random walk created as indicated above.
    """
    _check_length(length)
    rng = np.random.default_rng(random_state)
    return np.cumsum(rng.normal(mean, std, size=length), dtype=dtype)
