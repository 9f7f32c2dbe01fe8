import math

import numpy as np
import pytest

from cpcgrid import arithmetic
from cpcgrid.arithmetic import (
    GRID,
    NUMBER,
    resolve_operand,
)
from cpcgrid.errors import (
    FatalConfigurationError,
    GridSizeMismatchError,
    InvalidOperandError,
    UnsupportedOperatorError,
)
from cpcgrid.grid import Grid

VALUES = np.array([1.0, 2.0, np.nan, 4.0, -3.0, 0.5])
"Raw values of the `tiny` fixture."

PRESENT = ~np.isnan(VALUES)


def assert_values(grid, expected):
    result = grid.get_values_raw()
    np.testing.assert_allclose(result, expected, equal_nan=True)


def test_daily_accumulation():
    # Arrange
    total = Grid("global1deg").init_values(0.0)
    days = [Grid("global1deg").set_values([1.0] * 65160) for _ in range(10)]

    # Act
    for daily in days:
        total = total + daily

    # Assert
    assert total.valset
    assert total.get_gridtype() == "global1deg"
    np.testing.assert_array_equal(total.get_values_raw(), np.full(65160, 10.0))


def test_add_scalar(tiny):
    result = tiny + 2.5

    assert_values(result, VALUES + 2.5)
    assert np.isnan(result.get_values_raw()[2]), "Expected missing values to stay missing"


@pytest.mark.parametrize("operation, expected", [
    (lambda g: g - 1.0, VALUES - 1.0),
    (lambda g: 5 - g, 5 - VALUES),
    (lambda g: g * 3, VALUES * 3),
    (lambda g: 3 * g, VALUES * 3),
    (lambda g: g / 2, VALUES / 2),
    (lambda g: 2 / g, 2 / VALUES),
    (lambda g: g % 3, np.mod(VALUES, 3)),
    (lambda g: 7 % g, np.mod(7, VALUES)),
    (lambda g: g ** 2, VALUES ** 2),
    (lambda g: 2 ** g, 2 ** VALUES),
    (lambda g: 1 + g, VALUES + 1),
    (lambda g: -g, -VALUES),
])
def test_operators_with_scalars(tiny, operation, expected):
    assert_values(operation(tiny), expected)


def test_reflected_subtraction(tiny):
    result = (5 - tiny).get_values_raw()
    assert result[0] == 4.0
    assert result[4] == 8.0
    assert np.isnan(result[2])


def test_numpy_scalars_defer_to_the_grid(tiny):
    result = np.float64(5) - tiny
    assert isinstance(result, Grid)
    assert_values(result, 5 - VALUES)


def test_grid_with_grid(tiny, catalog):
    other = Grid("tiny", catalog=catalog).set_values([np.nan, 1.0, 1.0, 2.0, 2.0, 2.0])

    assert_values(tiny + other, VALUES + other.get_values_raw())
    assert_values(tiny - other, VALUES - other.get_values_raw())
    assert_values(other - tiny, other.get_values_raw() - VALUES)
    assert_values(tiny / other, VALUES / other.get_values_raw())

    result = (tiny * other).get_values_raw()
    assert np.isnan(result[0]) and np.isnan(result[2])
    assert not np.isnan(result[[1, 3, 4, 5]]).any()


def test_named_methods(tiny):
    assert_values(tiny.add(1), VALUES + 1)
    assert_values(tiny.subtract(1, reflected=True), 1 - VALUES)
    assert_values(tiny.divide(4, reflected=True), 4 / VALUES)
    assert_values(tiny.power(0.5, reflected=True), 0.5 ** VALUES)
    assert_values(tiny.mod(2), np.mod(VALUES, 2))


@pytest.mark.parametrize("name, func", [
    ("cos", np.cos),
    ("sin", np.sin),
    ("exp", np.exp),
    ("abs", np.abs),
    ("int", np.trunc),
])
def test_unary(tiny, name, func):
    result = getattr(tiny, name)()
    assert_values(result, func(VALUES))
    assert np.isnan(result.get_values_raw()[2])


def test_log_and_sqrt_of_negative_values_are_missing(tiny):
    log = tiny.log().get_values_raw()
    sqrt = tiny.sqrt().get_values_raw()

    assert log[0] == 0.0
    assert sqrt[3] == 2.0
    assert np.isnan(log[4]) and np.isnan(sqrt[4])
    assert np.isnan(log[2]) and np.isnan(sqrt[2])


def test_builtin_abs_and_trunc(tiny):
    assert_values(abs(tiny), np.abs(VALUES))
    truncated = math.trunc(tiny * 1.5)
    assert isinstance(truncated, Grid)
    assert_values(truncated, np.trunc(VALUES * 1.5))


def test_free_functions(tiny):
    assert_values(arithmetic.cos(tiny), np.cos(VALUES))
    assert_values(arithmetic.sqrt(abs(tiny)), np.sqrt(np.abs(VALUES)))
    assert_values(arithmetic.trunc(tiny), np.trunc(VALUES))
    assert_values(arithmetic.atan2(tiny, 2.0), np.arctan2(VALUES, 2.0))
    assert_values(arithmetic.atan2(2.0, tiny), np.arctan2(2.0, VALUES))
    with pytest.raises(InvalidOperandError):
        arithmetic.atan2(1.0, 2.0)


def test_division_by_zero_follows_ieee(tiny):
    result = (tiny / 0).get_values_raw()
    assert result[0] == np.inf
    assert result[4] == -np.inf
    assert np.isnan(result[2])


def test_operands_are_not_modified(tiny):
    before = tiny.get_values_raw()
    result = tiny * 10
    assert result is not tiny
    np.testing.assert_array_equal(tiny.get_values_raw(), before)
    assert tiny.get_missing_value() == -999.0


def test_result_has_default_missing_value(tiny):
    result = tiny + 1

    assert np.isnan(result.get_missing_value())
    assert result.valset
    # The missing point survives as NaN, visible as NaN since the sentinel is undefined.
    assert np.isnan(result.get_values()[2])


def test_result_has_catalog_of_operand(tiny, catalog):
    result = tiny + 1
    assert result.get_gridtype() == "tiny"
    assert result.catalog is catalog


def test_size_mismatch(tiny):
    with pytest.raises(GridSizeMismatchError):
        tiny + Grid("global1deg").init_values(1.0)
    with pytest.raises(FatalConfigurationError):
        Grid("global1deg").init_values(1.0) - tiny


@pytest.mark.parametrize("operand", ["1", None, [1.0] * 6, True, np.ones(6)])
def test_invalid_operand(tiny, operand):
    with pytest.raises(InvalidOperandError):
        tiny + operand


def test_invalid_reflected_operand(tiny):
    with pytest.raises(InvalidOperandError):
        "precip" + tiny


@pytest.mark.parametrize("operation, symbol", [
    (lambda g: g == g, "=="),
    (lambda g: g != 1, "!="),
    (lambda g: g < 1, "<"),
    (lambda g: g >= 1, ">="),
    (lambda g: g // 2, "//"),
    (lambda g: 2 // g, "//"),
    (lambda g: g @ g, "@"),
    (lambda g: ~g, "~"),
    (lambda g: pow(g, 2, 3), "pow() with modulo"),
    (lambda g: int(g), "int()"),
])
def test_unsupported_operators(tiny, operation, symbol):
    with pytest.raises(UnsupportedOperatorError) as info:
        operation(tiny)
    assert info.value.operator == symbol


def test_grids_are_unhashable(tiny):
    with pytest.raises(TypeError):
        hash(tiny)


def test_resolve_operand(tiny):
    values = tiny.get_values_raw()

    number = resolve_operand(values, 2)
    assert number.kind == NUMBER
    np.testing.assert_array_equal(number.values, np.full(6, 2.0))

    grid = resolve_operand(values, tiny)
    assert grid.kind == GRID
    np.testing.assert_array_equal(grid.values, values)


def test_unknown_operator_name(tiny):
    operand = resolve_operand(tiny.get_values_raw(), 1)
    with pytest.raises(UnsupportedOperatorError, match="concat"):
        arithmetic.binary("concat", tiny.get_values_raw(), operand)
    with pytest.raises(UnsupportedOperatorError, match="tan"):
        arithmetic.unary("tan", tiny.get_values_raw())
