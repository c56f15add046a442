"""
Tests for DataFrame adapters and result views.
"""

import numpy as np
import pandas as pd
import pytest

from mca_analysis import fit_mca
from mca_analysis.utils import (
    infer_categories,
    interpret_dimension,
    results_to_frames,
    rows_from_frame,
    to_response_payload,
)


@pytest.fixture
def wine_result(wine_rows, wine_categories):
    return fit_mca(wine_rows, wine_categories)


class TestFrameAdapters:

    def test_infer_categories_in_order_of_appearance(self):
        df = pd.DataFrame({'size': ['M', 'S', None, 'M', 'L'], 'flag': [True, False, True, True, False]})
        categories = infer_categories(df)

        assert categories == {'size': ['M', 'S', 'L'], 'flag': [True, False]}
        assert all(type(v) is bool for v in categories['flag'])

    def test_infer_categories_subset(self):
        df = pd.DataFrame({'a': [1, 2], 'b': ['x', 'y']})
        assert infer_categories(df, ['b']) == {'b': ['x', 'y']}

    def test_rows_skip_nulls(self):
        df = pd.DataFrame({'a': ['x', None], 'b': [1.0, np.nan]})
        assert rows_from_frame(df) == [{'a': 'x', 'b': 1.0}, {}]


class TestResultViews:

    def test_variance_table(self, wine_result):
        frames = results_to_frames(wine_result)
        variance = frames['variance']

        assert list(variance.columns) == ['Eigenvalue', 'Explained Variance', 'Cumulative Explained Variance']
        assert len(variance) == wine_result['rank']
        assert variance['Cumulative Explained Variance'].iloc[-1] == pytest.approx(
            wine_result['explained_variance'].sum()
        )

    def test_row_factor_table_uses_index(self, wine_result):
        index = pd.Index([f"W{i}" for i in range(1, 7)])
        row_factors = results_to_frames(wine_result, index=index)['row_factors']

        assert list(row_factors.index) == list(index)
        assert row_factors.shape == (6, wine_result['rank'])

    def test_category_weights_long_table(self, wine_result):
        weights = results_to_frames(wine_result)['category_weights']

        first = weights[weights['Component'] == 'Dim 1']
        oak = first[first['Variable'] == 'oak'].set_index('Category')['Weight']
        assert oak.loc[1] == pytest.approx(wine_result['column_factors'][0]['oak'][1])

    def test_category_weights_empty_without_column_factors(self, wine_rows, wine_categories):
        result = fit_mca(wine_rows, wine_categories, column_factors=False)
        weights = results_to_frames(result)['category_weights']

        assert weights.empty
        assert list(weights.columns) == ['Component', 'Variable', 'Category', 'Weight']


class TestInterpretDimension:

    def test_top_categories_ranked_by_magnitude(self, wine_result):
        summary = interpret_dimension(wine_result, dimension=0, top_n=4)

        magnitudes = [abs(w) for w in summary['top_weights']]
        assert magnitudes == sorted(magnitudes, reverse=True)
        assert len(summary['top_categories']) == 4
        assert all(variable != 'expert3:fruity' for variable, _ in summary['top_categories'])


class TestResponsePayload:

    def test_json_friendly(self, wine_result):
        payload = to_response_payload(wine_result)

        assert isinstance(payload['explained_variance'], list)
        assert isinstance(payload['row_factors'][0], list)
        assert payload['column_factors'][0]['oak'].keys() <= {'1', '2'}
        assert payload['column_factors'][0]['expert1:fruity'].keys() <= {'True', 'False'}
        assert payload['rank'] == wine_result['rank']
