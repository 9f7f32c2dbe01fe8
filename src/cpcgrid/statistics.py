from typing import Dict

import numpy as np

from cpcgrid.grid import Grid


def iqr(a: np.ndarray) -> float:
    """
    Calculate the range covered by the middle 50 % of the input values, ignoring NaN.

    Using statistical terms, calculate the difference between the third
    and the first quartiles (the inter-quartile range, IQR).

    Example
    -------

    >>> x = np.arange(5) * 5.
    # array([ 0.,  5., 10., 15., 20.])
    >>> a, b = np.nanpercentile(x, [25, 75])
    >>> (a, b)
    # (5.0, 15.0)
    >>> IQR = b - a
    >>> IQR
    # 10.0

    """
    a, b = np.nanpercentile(np.asarray(a, dtype=np.float64), [25, 75])
    return b - a


def summary(grid: Grid) -> Dict[str, float]:
    """
    Return count, missing count, mean, min, max and IQR of the grid values.

    Statistics of a grid where every value is missing are NaN.

    """
    values = grid.get_values_raw()
    present = values[~np.isnan(values)]
    stats = dict(
        count=int(present.size),
        missing=int(values.size - present.size),
    )
    if present.size == 0:
        stats.update(mean=np.nan, min=np.nan, max=np.nan, iqr=np.nan)
        return stats
    stats.update(
        mean=float(present.mean()),
        min=float(present.min()),
        max=float(present.max()),
        iqr=float(iqr(present)),
    )
    return stats
