"""
MCA Analysis Package
====================

Multiple Correspondence Analysis (MCA) for tables of categorical observations.

Given rows of categorical values (missing entries allowed) and the allowed
categories per variable, the package places observations and categories in
a shared low-dimensional factor space:

- **Indicator coding**: one-hot blocks per variable, uniform for missing values
- **Stabilized SVD**: wide-matrix transposition, descending order, self-check
- **Benzécri / Greenacre corrections**: less inflated explained variance
- **Category weights**: each component attributed to named categories

Quick Start
-----------
```python
from mca_analysis import fit_mca

rows = [{'colour': 'red', 'size': 'S'}, {'colour': 'blue'}, ...]
categories = {'colour': ['red', 'blue'], 'size': ['S', 'M', 'L']}

result = fit_mca(rows, categories, n_components=2)
result['explained_variance']   # share of inertia per component
result['row_factors']          # observation coordinates
result['column_factors']       # {variable: {category: weight}} per component
```

Package Structure
-----------------
- `config`: Environment-backed settings and defaults
- `schemas`: Analysis options and API schemas
- `models`: Indicator coding, stabilized SVD and factor projection
- `plotting`: Plotly visualizations
- `utils`: DataFrame adapters and result views
- `api`: FastAPI application
"""

__version__ = "0.1.0"

from .config import Settings, get_settings
from .exceptions import (
    MCAError,
    MalformedInputError,
    MalformedSchemaError,
    DecompositionIntegrityError,
)
from .schemas import MCAOptions, resolve_options

from . import models
from . import plotting

from .models import fit_mca, fit_mca_frame, stabilized_svd
from .utils import infer_categories, rows_from_frame, results_to_frames, interpret_dimension

__all__ = [
    # Version
    '__version__',
    # Config
    'Settings',
    'get_settings',
    'MCAOptions',
    'resolve_options',
    # Errors
    'MCAError',
    'MalformedInputError',
    'MalformedSchemaError',
    'DecompositionIntegrityError',
    # Subpackages
    'models',
    'plotting',
    # Commonly used functions
    'fit_mca',
    'fit_mca_frame',
    'stabilized_svd',
    'infer_categories',
    'rows_from_frame',
    'results_to_frames',
    'interpret_dimension',
]
