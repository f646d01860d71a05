import numpy as np
import pandas as pd
import pytest

from ndtw import SeriesVariable
from ndtw.preprocessing import (
    CentralizationPreprocessor,
    NormalizationPreprocessor,
    Preprocessor,
)


class _CountingPreprocessor(Preprocessor):
    name = "Counting"

    def __init__(self):
        self.calls = 0

    def preprocess(self, data):
        self.calls += 1
        return np.asarray(data, dtype=float) * 2


class TestSeriesVariable:
    def test_raw_and_preprocessed_views(self):
        variable = SeriesVariable(
            [1.0, 2.0, 3.0],
            [2.0, 4.0],
            name="load",
            preprocessor=CentralizationPreprocessor(),
            weight=0.5,
        )

        assert variable.name == "load"
        assert variable.weight == 0.5
        assert isinstance(variable.preprocessor, CentralizationPreprocessor)
        np.testing.assert_array_equal(variable.original_x, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(variable.original_y, [2.0, 4.0])
        np.testing.assert_allclose(variable.preprocessed_x(), [-1.0, 0.0, 1.0])
        np.testing.assert_allclose(variable.preprocessed_y(), [-1.0, 1.0])
        assert len(variable) == 3

    def test_without_preprocessor(self):
        variable = SeriesVariable([1, 2], [3])
        assert variable.name is None
        assert variable.weight == 1.0
        assert variable.preprocessor is None
        np.testing.assert_array_equal(variable.preprocessed_x(), variable.original_x)
        np.testing.assert_array_equal(variable.preprocessed_y(), [3.0])

    def test_preprocessing_is_computed_on_demand(self):
        preprocessor = _CountingPreprocessor()
        variable = SeriesVariable([1.0, 2.0], [3.0], preprocessor=preprocessor)
        assert preprocessor.calls == 0
        np.testing.assert_array_equal(variable.preprocessed_x(), [2.0, 4.0])
        assert preprocessor.calls == 1

    def test_inputs_are_copied_and_frozen(self):
        values = np.array([1.0, 2.0, 3.0])
        variable = SeriesVariable(values, values)
        values[0] = 100.0

        assert variable.original_x[0] == 1.0
        with pytest.raises(ValueError):
            variable.original_x[0] = 5.0

    @pytest.mark.parametrize(
        "x,y,match",
        [
            ([], [1.0], "Series A should have at least one value"),
            ([1.0], [], "Series B should have at least one value"),
            ([[1.0, 2.0]], [1.0], "must be a 1-D sequence"),
            ([1.0, np.nan], [1.0], "nan or infinite"),
            ([1.0], [np.inf], "nan or infinite"),
        ],
    )
    def test_invalid_sequences(self, x, y, match):
        with pytest.raises(ValueError, match=match):
            SeriesVariable(x, y)

    @pytest.mark.parametrize("weight", [-1.0, np.nan, np.inf])
    def test_invalid_weight(self, weight):
        with pytest.raises(ValueError, match="weight must be finite and non-negative"):
            SeriesVariable([1.0], [1.0], weight=weight)

    def test_invalid_preprocessor(self):
        with pytest.raises(TypeError):
            SeriesVariable([1.0], [1.0], preprocessor=lambda x: x)

    def test_from_dataframes(self):
        df_a = pd.DataFrame({"gdp": [1.0, 2.0, 3.0], "cpi": [0.0, 1.0, 0.0], "a_only": 1.0})
        df_b = pd.DataFrame({"cpi": [1.0, 1.0], "gdp": [2.0, 3.0]})
        normalization = NormalizationPreprocessor()

        variables = SeriesVariable.from_dataframes(
            df_a,
            df_b,
            preprocessors={"cpi": normalization},
            weights={"gdp": 2.0},
        )

        assert [v.name for v in variables] == ["gdp", "cpi"]
        assert [v.weight for v in variables] == [2.0, 1.0]
        assert variables[0].preprocessor is None
        assert variables[1].preprocessor is normalization
        np.testing.assert_array_equal(variables[0].original_y, [2.0, 3.0])

    def test_from_dataframes_column_selection(self):
        df_a = pd.DataFrame({"x": [1.0], "y": [2.0]})
        df_b = pd.DataFrame({"x": [1.0], "y": [2.0]})

        variables = SeriesVariable.from_dataframes(df_a, df_b, columns=["y"])
        assert [v.name for v in variables] == ["y"]

        with pytest.raises(ValueError, match="not present in both DataFrames"):
            SeriesVariable.from_dataframes(df_a, df_b, columns=["z"])

        with pytest.raises(ValueError, match="do not share any column"):
            SeriesVariable.from_dataframes(df_a, pd.DataFrame({"w": [1.0]}))
