import numpy as np

from cpcgrid.grid import Grid
from cpcgrid.statistics import (
    iqr,
    summary,
)


def test_iqr():
    x = np.arange(5) * 5.
    assert iqr(x) == 10.0
    assert iqr(np.append(x, np.nan)) == 10.0


def test_summary(tiny):
    result = summary(tiny)

    assert result["count"] == 5
    assert result["missing"] == 1
    assert result["min"] == -3.0
    assert result["max"] == 4.0
    assert result["mean"] == 4.5 / 5


def test_summary_all_missing(catalog):
    grid = Grid("tiny", catalog=catalog).init_values(np.nan)

    result = summary(grid)

    assert result["count"] == 0
    assert result["missing"] == 6
    assert np.isnan(result["mean"])
