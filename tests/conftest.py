"""
Pytest fixtures for the MCA test suite.

The wine panel is the classic six-wine / three-expert example: each expert
rates every wine on a few binary or ternary descriptors, and wines are aged
in one of two kinds of oak.
"""

import pandas as pd
import pytest

from mca_analysis.config import get_settings


# =============================================================================
# SETTINGS ISOLATION
# =============================================================================

@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment overrides never leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def wine_rows() -> list:
    """Six wines; 'name' and 'expert1:coffee' are not part of the schema."""
    return [
        {
            'name': 'W1', 'oak': 1,
            'expert1:fruity': True, 'expert1:woody': 3, 'expert1:coffee': False,
            'expert2:fruity': True, 'expert2:roasted': False, 'expert2:vanillin': 3, 'expert2:woody': False,
            'expert3:fruity': False, 'expert3:buttery': False, 'expert3:woody': False,
        },
        {
            'name': 'W2', 'oak': 2,
            'expert1:fruity': False, 'expert1:woody': 2, 'expert1:coffee': True,
            'expert2:fruity': False, 'expert2:roasted': True, 'expert2:vanillin': 2, 'expert2:woody': True,
            'expert3:fruity': False, 'expert3:buttery': True, 'expert3:woody': True,
        },
        {
            'name': 'W3', 'oak': 2,
            'expert1:fruity': False, 'expert1:woody': 1, 'expert1:coffee': True,
            'expert2:fruity': False, 'expert2:roasted': True, 'expert2:vanillin': 1, 'expert2:woody': True,
            'expert3:fruity': False, 'expert3:buttery': True, 'expert3:woody': True,
        },
        {
            'name': 'W4', 'oak': 2,
            'expert1:fruity': False, 'expert1:woody': 1, 'expert1:coffee': True,
            'expert2:fruity': False, 'expert2:roasted': True, 'expert2:vanillin': 1, 'expert2:woody': True,
            'expert3:fruity': True, 'expert3:buttery': True, 'expert3:woody': True,
        },
        {
            'name': 'W5', 'oak': 1,
            'expert1:fruity': True, 'expert1:woody': 3, 'expert1:coffee': False,
            'expert2:fruity': True, 'expert2:roasted': False, 'expert2:vanillin': 3, 'expert2:woody': False,
            'expert3:fruity': True, 'expert3:buttery': False, 'expert3:woody': False,
        },
        {
            'name': 'W6', 'oak': 1,
            'expert1:fruity': True, 'expert1:woody': 2, 'expert1:coffee': False,
            'expert2:fruity': True, 'expert2:roasted': False, 'expert2:vanillin': 2, 'expert2:woody': False,
            'expert3:fruity': True, 'expert3:buttery': False, 'expert3:woody': False,
        },
    ]


@pytest.fixture
def wine_categories() -> dict:
    """Ten variables, 22 categories in total."""
    return {
        'expert1:fruity': [True, False],
        'expert1:woody': [1, 2, 3],
        'expert2:fruity': [True, False],
        'expert2:roasted': [True, False],
        'expert2:vanillin': [1, 2, 3],
        'expert2:woody': [True, False],
        'expert3:fruity': [True, False],
        'expert3:buttery': [True, False],
        'expert3:woody': [True, False],
        'oak': [1, 2],
    }


@pytest.fixture
def wine_frame(wine_rows) -> pd.DataFrame:
    """Wine panel as a DataFrame indexed by wine name."""
    return pd.DataFrame(wine_rows).set_index('name')


@pytest.fixture
def small_categories() -> dict:
    """A ternary and a binary variable, plus one with a single category."""
    return {
        'a': ['x', 'y', 'z'],
        'b': ['only'],
        'c': ['p', 'q'],
    }


@pytest.fixture
def small_rows() -> list:
    return [
        {'a': 'x', 'b': 'only', 'c': 'p'},
        {'a': 'y', 'c': 'q'},
        {'a': 'z', 'b': 'only', 'c': 'p'},
        {'a': 'x', 'c': 'q'},
        {'a': 'y', 'b': 'only', 'c': 'q'},
    ]
