"""
Preprocessing
-------------
"""

from ndtw.preprocessing.preprocessors import (
    CentralizationPreprocessor,
    NonePreprocessor,
    NormalizationPreprocessor,
    Preprocessor,
    StandardizationPreprocessor,
)

__all__ = [
    "Preprocessor",
    "NonePreprocessor",
    "CentralizationPreprocessor",
    "NormalizationPreprocessor",
    "StandardizationPreprocessor",
]
