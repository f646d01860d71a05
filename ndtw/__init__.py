"""
ndtw
----
"""

from ndtw.config import (
    describe_option,
    get_option,
    option_context,
    reset_option,
    set_option,
)
from ndtw.dtw import DTW, DistanceMeasure, dtw
from ndtw.series import SeriesVariable

__version__ = "0.3.0"

__all__ = [
    "DTW",
    "DistanceMeasure",
    "SeriesVariable",
    "dtw",
    "describe_option",
    "get_option",
    "option_context",
    "reset_option",
    "set_option",
]
