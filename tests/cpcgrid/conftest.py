import pytest

from cpcgrid.catalog import (
    GRID_CATALOG,
    GridPreset,
)
from cpcgrid.grid import Grid

TINY_VALUES = [1.0, 2.0, -999.0, 4.0, -3.0, 0.5]
"Values of the `tiny` grid fixture. Index 2 is missing."


@pytest.fixture
def catalog():
    """The built-in catalog with a 2x3 preset added."""
    return GRID_CATALOG.extend({"tiny": GridPreset(0.0, 1.0, 2, 0.0, 1.0, 3)})


@pytest.fixture
def tiny(catalog):
    return (
        Grid("tiny", catalog=catalog)
        .set_missing_value(-999.0)
        .set_values(TINY_VALUES)
    )
