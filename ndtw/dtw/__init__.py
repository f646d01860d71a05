"""
Dynamic Time Warping (DTW)
--------------------------

Constrained Dynamic Time Warping between two (possibly multivariate) series, including distance measures,
the Sakoe-Chiba band, local slope constraints and open or closed boundaries.
"""

from ndtw.dtw.cost_matrix import CostMatrix
from ndtw.dtw.distance import DistanceMeasure
from ndtw.dtw.dtw import DTW, dtw
from ndtw.dtw.slope import SlopeConstraint
from ndtw.dtw.window import NoWindow, SakoeChiba, Window

__all__ = [
    "CostMatrix",
    "DistanceMeasure",
    "DTW",
    "dtw",
    "SlopeConstraint",
    "NoWindow",
    "SakoeChiba",
    "Window",
]
