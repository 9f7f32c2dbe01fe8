"""
Translation between the external missing-value sentinel and NaN.

Inside a grid, missing values are always NaN so that floating-point NaN
propagation carries them through arithmetic. Callers see and supply a
numeric sentinel instead. A value `v` counts as the sentinel `m` when

    |m - v| <= |0.001 * m|

The tolerance scales with the sentinel, not the value. With `m == 0`
only an exact zero matches, and an undefined (NaN) sentinel matches nothing.

"""
import math
import numbers

import numpy as np

from cpcgrid.errors import MissingValueTypeError

TOLERANCE_FACTOR: float = 0.001
"Relative tolerance applied to the sentinel's magnitude."

BOUNDARY_SLACK: float = 1e-9
"Relative widening of the tolerance that absorbs float64 rounding of boundary values."


def is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def validate_missing(value) -> float:
    """
    Return the sentinel as a float.

    Raises:
        MissingValueTypeError: If the value is not a finite real number.

    """
    if not is_number(value):
        raise MissingValueTypeError(f"Non-numeric missing value {value!r} is not allowed")
    if not math.isfinite(value):
        raise MissingValueTypeError(f"Non-finite missing value {value!r} is not allowed")
    return float(value)


def is_missing_equivalent(values: np.ndarray, missing: float) -> np.ndarray:
    """
    Return a boolean mask of the values that match the sentinel.

    """
    values = np.asarray(values, dtype=np.float64)
    tolerance = abs(TOLERANCE_FACTOR * missing)
    # Values written in decimal exactly on the boundary (e.g. -998.001 for -999.0)
    # must match after binary rounding.
    tolerance += tolerance * BOUNDARY_SLACK
    with np.errstate(invalid="ignore"):
        return np.abs(missing - values) <= tolerance


def internalize(values: np.ndarray, missing: float) -> np.ndarray:
    """Return a copy of the values with sentinel matches replaced by NaN."""
    result = np.array(values, dtype=np.float64)
    result[is_missing_equivalent(result, missing)] = np.nan
    return result


def externalize(values: np.ndarray, missing: float) -> np.ndarray:
    """Return a copy of the values with NaN replaced by the sentinel."""
    result = np.array(values, dtype=np.float64)
    result[np.isnan(result)] = missing
    return result
