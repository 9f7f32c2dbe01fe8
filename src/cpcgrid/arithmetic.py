"""
Elementwise operator algebra over grid values.

Missing values are NaN inside a grid, so IEEE NaN propagation makes every
result missing wherever any operand was missing. None of the functions in
this module inspect or branch on missing values.

Operands are resolved explicitly before any arithmetic happens:

*   another grid contributes its raw (NaN-aware) values and must have the same size,
*   a real number is broadcast to the size of the grid,
*   anything else is an error.

Every operation produces a new grid of the left (or only) operand's grid
type. The new grid starts with the default, undefined, missing value; a
custom sentinel set on an operand is not carried over. Only the NaN
markers survive from one operation to the next.

"""
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
)
import logging
log = logging.getLogger(__name__)

import numpy as np

from cpcgrid.errors import (
    GridSizeMismatchError,
    InvalidOperandError,
    UnsupportedOperatorError,
)
from cpcgrid.missing import is_number

# Types used below

BinaryFunction = Callable[[np.ndarray, np.ndarray], np.ndarray]
UnaryFunction = Callable[[np.ndarray], np.ndarray]

BINARY_OPERATORS: Dict[str, BinaryFunction] = {
    "add": np.add,
    "subtract": np.subtract,
    "multiply": np.multiply,
    "divide": np.true_divide,
    "mod": np.mod,
    "power": np.power,
    "atan2": np.arctan2,
}
"Supported binary operators. The first argument is the left-hand operand."

UNARY_OPERATORS: Dict[str, UnaryFunction] = {
    "cos": np.cos,
    "sin": np.sin,
    "exp": np.exp,
    "abs": np.abs,
    "log": np.log,
    "sqrt": np.sqrt,
    "int": np.trunc,
}
"Supported unary functions. `int` truncates towards zero."

GRID = "grid"
NUMBER = "number"


@dataclass(frozen=True)
class Operand:
    """
    A resolved right-hand operand.

    Attributes:
        kind: Either `GRID` or `NUMBER`.
        values: The operand values, of the same length as the left-hand operand.

    """

    kind: str
    values: np.ndarray


def resolve_operand(values: np.ndarray, other: Any) -> Operand:
    """
    Turn the other operand of a binary operation into a sequence of values.

    Args:
        values: The raw values of the grid on which the operation was invoked.
        other: A grid or a real number.

    Raises:
        GridSizeMismatchError: If `other` is a grid with a different size.
        InvalidOperandError: If `other` is neither a grid nor a real number.

    """
    if isinstance(other, GridArithmetic):
        other_values = other.get_values_raw()
        if other_values.size != values.size:
            raise GridSizeMismatchError(
                f"Grid objects have mismatched grid sizes in operation: {values.size} and {other_values.size}"
            )
        return Operand(GRID, other_values)
    if is_number(other):
        return Operand(NUMBER, np.full(values.size, float(other)))
    raise InvalidOperandError(
        f"Invalid operand of type {type(other).__name__!r} used in operation with a Grid object"
    )


def binary(operator: str, values: np.ndarray, operand: Operand, *, reflected: bool = False) -> np.ndarray:
    """
    Apply a binary operator elementwise.

    Args:
        operator: A key of `BINARY_OPERATORS`.
        values: The values of the grid on which the operation was invoked.
        operand: The resolved other operand.
        reflected: Whether the grid was the right-hand operand, e.g. in `5 - grid`.

    """
    try:
        func = BINARY_OPERATORS[operator]
    except KeyError:
        raise UnsupportedOperatorError(operator) from None
    left, right = values, operand.values
    if reflected:
        left, right = right, left
    with np.errstate(all="ignore"):
        return func(left, right)


def unary(operator: str, values: np.ndarray) -> np.ndarray:
    try:
        func = UNARY_OPERATORS[operator]
    except KeyError:
        raise UnsupportedOperatorError(operator) from None
    with np.errstate(all="ignore"):
        return func(values)


def _unsupported(symbol: str) -> Callable:
    def method(self, *args):
        raise UnsupportedOperatorError(symbol)
    return method


class GridArithmetic:
    """
    The operator interface of a grid.

    Subclasses provide `get_values_raw()` and `_new_from_values(values)`.
    Each operator has a named method and, where Python has one, an operator overload.

    """

    # Make numpy scalars defer to the reflected operators, e.g. `np.float32(5) - grid`.
    __array_ufunc__ = None

    def get_values_raw(self) -> np.ndarray:
        raise NotImplementedError

    def _new_from_values(self, values: np.ndarray) -> "GridArithmetic":
        raise NotImplementedError

    def _binary(self, operator: str, other: Any, reflected: bool = False) -> "GridArithmetic":
        values = self.get_values_raw()
        operand = resolve_operand(values, other)
        log.debug(f"{operator} with {operand.kind} operand ({reflected=})")
        return self._new_from_values(binary(operator, values, operand, reflected=reflected))

    def _unary(self, operator: str) -> "GridArithmetic":
        return self._new_from_values(unary(operator, self.get_values_raw()))

    # Named binary operations

    def add(self, other: Any, reflected: bool = False) -> "GridArithmetic":
        return self._binary("add", other, reflected)

    def subtract(self, other: Any, reflected: bool = False) -> "GridArithmetic":
        return self._binary("subtract", other, reflected)

    def multiply(self, other: Any, reflected: bool = False) -> "GridArithmetic":
        return self._binary("multiply", other, reflected)

    def divide(self, other: Any, reflected: bool = False) -> "GridArithmetic":
        return self._binary("divide", other, reflected)

    def mod(self, other: Any, reflected: bool = False) -> "GridArithmetic":
        return self._binary("mod", other, reflected)

    def power(self, other: Any, reflected: bool = False) -> "GridArithmetic":
        return self._binary("power", other, reflected)

    def atan2(self, other: Any, reflected: bool = False) -> "GridArithmetic":
        """Return the arc tangent of `self / other` (of `other / self` if reflected)."""
        return self._binary("atan2", other, reflected)

    # Operator overloads

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self.add(other, reflected=True)

    def __sub__(self, other):
        return self.subtract(other)

    def __rsub__(self, other):
        return self.subtract(other, reflected=True)

    def __mul__(self, other):
        return self.multiply(other)

    def __rmul__(self, other):
        return self.multiply(other, reflected=True)

    def __truediv__(self, other):
        return self.divide(other)

    def __rtruediv__(self, other):
        return self.divide(other, reflected=True)

    def __mod__(self, other):
        return self.mod(other)

    def __rmod__(self, other):
        return self.mod(other, reflected=True)

    def __pow__(self, other, modulo=None):
        if modulo is not None:
            raise UnsupportedOperatorError("pow() with modulo")
        return self.power(other)

    def __rpow__(self, other):
        return self.power(other, reflected=True)

    def __neg__(self):
        return self.subtract(0.0, reflected=True)

    def __abs__(self):
        return self._unary("abs")

    def __trunc__(self):
        return self._unary("int")

    __eq__ = _unsupported("==")
    __ne__ = _unsupported("!=")
    __lt__ = _unsupported("<")
    __le__ = _unsupported("<=")
    __gt__ = _unsupported(">")
    __ge__ = _unsupported(">=")
    __floordiv__ = __rfloordiv__ = _unsupported("//")
    __matmul__ = __rmatmul__ = _unsupported("@")
    __and__ = __rand__ = _unsupported("&")
    __or__ = __ror__ = _unsupported("|")
    __xor__ = __rxor__ = _unsupported("^")
    __lshift__ = __rlshift__ = _unsupported("<<")
    __rshift__ = __rrshift__ = _unsupported(">>")
    __invert__ = _unsupported("~")
    __pos__ = _unsupported("unary +")
    __int__ = _unsupported("int()")
    __float__ = _unsupported("float()")
    __hash__ = None

    # Named unary operations

    def cos(self) -> "GridArithmetic":
        return self._unary("cos")

    def sin(self) -> "GridArithmetic":
        return self._unary("sin")

    def exp(self) -> "GridArithmetic":
        return self._unary("exp")

    def log(self) -> "GridArithmetic":
        """Natural logarithm. Non-positive values give NaN or -inf."""
        return self._unary("log")

    def sqrt(self) -> "GridArithmetic":
        return self._unary("sqrt")

    def abs(self) -> "GridArithmetic":
        return self._unary("abs")

    def int(self) -> "GridArithmetic":
        """Truncate the values towards zero."""
        return self._unary("int")


# Free-function forms of the unary operations

def cos(grid: GridArithmetic) -> GridArithmetic:
    return grid.cos()


def sin(grid: GridArithmetic) -> GridArithmetic:
    return grid.sin()


def exp(grid: GridArithmetic) -> GridArithmetic:
    return grid.exp()


def log_e(grid: GridArithmetic) -> GridArithmetic:
    return grid.log()


def sqrt(grid: GridArithmetic) -> GridArithmetic:
    return grid.sqrt()


def absolute(grid: GridArithmetic) -> GridArithmetic:
    return grid.abs()


def trunc(grid: GridArithmetic) -> GridArithmetic:
    return grid.int()


def atan2(y: Any, x: Any) -> GridArithmetic:
    """
    Return the elementwise arc tangent of `y / x`, where at least one argument is a grid.

    """
    if isinstance(y, GridArithmetic):
        return y.atan2(x)
    if isinstance(x, GridArithmetic):
        return x.atan2(y, reflected=True)
    raise InvalidOperandError("atan2() requires at least one Grid operand")
