"""
Latitude/longitude grids with a distinguishable missing value.

Example
-------

>>> grid = Grid('global1deg').set_missing_value(-999.0)
>>> grid.set_values(blob)  # bytes of single-precision floats
>>> grid.get_size()
# 65160
>>> total = (grid + other) * 0.5
>>> total.get_missing_value()
# nan  (results start with an undefined missing value)

"""
from typing import (
    Iterable,
    Optional,
    Tuple,
    Union,
)
import warnings
import logging
log = logging.getLogger(__name__)

import numpy as np

from cpcgrid.arithmetic import GridArithmetic
from cpcgrid.catalog import (
    GRID_CATALOG,
    GridCatalog,
)
from cpcgrid.codec import (
    BYTES_PER_VALUE,
    BlobType,
    decode,
    encode,
)
from cpcgrid.errors import ValidationWarning
from cpcgrid.missing import (
    externalize,
    internalize,
    is_missing_equivalent,
    validate_missing,
)

# Types used below

ValuesInputType = Union[BlobType, Iterable[float], np.ndarray]
"Define the types accepted by `Grid.set_values`."

ValuesOutputType = Union[np.ndarray, bytes]
"Values are returned as an array or, if requested, as a binary blob."


class Grid(GridArithmetic):
    """
    Container for gridded values on one of the catalog presets.

    The coordinates and the size of the grid are fixed at construction.
    Only the values, the missing value and the name change afterwards.

    Missing values are stored as NaN. The missing value (the sentinel)
    is what callers see in place of NaN, and what they use to mark
    missing data when setting values. Until it is set, the sentinel is
    NaN itself, meaning undefined.

    Arithmetic (`+ - * / % **`, `abs()`, `math.trunc()`, and the named
    methods `cos()`, `sin()`, ...) returns new grids and never modifies
    the operands. See `cpcgrid.arithmetic`.

    """

    def __init__(self, gridtype: str, *, catalog: GridCatalog = GRID_CATALOG):
        """
        Create a grid with every value missing.

        Args:
            gridtype: Name of a preset in the catalog, e.g. `global1deg`.
            catalog: The preset registry to look the name up in.

        Raises:
            UnknownGridTypeError: If the catalog has no preset with that name.

        """
        preset = catalog[gridtype]

        self._gridtype = gridtype
        "Name of the preset used at construction."

        self._catalog = catalog
        "Registry that grids produced by arithmetic are created from."

        self.info = preset
        "The coordinate-generation rule of the grid."

        self._lats = preset.lats()
        self._lons = preset.lons()
        self._size = self._lats.size * self._lons.size

        self._latlons: Optional[np.ndarray] = None
        "Cached latitude/longitude pairs, built on first access."

        self._values = np.full(self._size, np.nan)
        self._missing = float("nan")
        self._valset = False
        self._name: Optional[str] = None

        log.debug(f"Created {gridtype} grid with {self._size} points")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._gridtype!r}, size={self._size}, "
            f"missing={self._missing!r}, valset={self._valset})"
        )

    # Properties

    @property
    def gridtype(self) -> str:
        return self._gridtype

    @property
    def catalog(self) -> GridCatalog:
        return self._catalog

    @property
    def size(self) -> int:
        return self._size

    @property
    def shape(self) -> Tuple[int, int]:
        return (
            self._lats.size,
            self._lons.size,
        )

    @property
    def lats(self) -> np.ndarray:
        return self.get_lats()

    @property
    def lons(self) -> np.ndarray:
        return self.get_lons()

    @property
    def latlon_pairs(self) -> np.ndarray:
        return self.get_latlons()

    @property
    def missing(self) -> float:
        return self._missing

    @property
    def valset(self) -> bool:
        return self._valset

    @property
    def name(self) -> Optional[str]:
        return self._name

    # Accessors

    def get_gridtype(self) -> str:
        return self._gridtype

    def get_size(self) -> int:
        return self._size

    def get_missing_value(self) -> float:
        return self._missing

    def get_name(self) -> Optional[str]:
        return self._name

    def set_name(self, name: str) -> "Grid":
        self._name = name
        return self

    def get_lats(self) -> np.ndarray:
        return self._lats.copy()

    def get_lons(self) -> np.ndarray:
        return self._lons.copy()

    def get_latlons(self) -> np.ndarray:
        """
        Return the latitude/longitude pair of each grid point.

        Returns:
            An array of shape `(size, 2)`. Row `i` holds the latitude and
            longitude of value `i`: latitude varies slowest, both ascend.

        """
        if self._latlons is None:
            nrows, ncols = self.shape
            self._latlons = np.column_stack((
                np.repeat(self._lats, ncols),
                np.tile(self._lons, nrows),
            ))
        return self._latlons.copy()

    # Values

    def _warn_if_unset(self) -> None:
        if not self._valset:
            warnings.warn("Values were never set by set_values()", ValidationWarning, stacklevel=3)

    def get_values(self, binary: bool = False) -> ValuesOutputType:
        """
        Return the grid values with missing values set to the sentinel.

        Args:
            binary: Return the values packed as single-precision floats
                in native byte order instead of as an array.

        Warns:
            ValidationWarning: If no values were ever set. The all-missing
                values are returned nonetheless.

        """
        self._warn_if_unset()
        values = externalize(self._values, self._missing)
        return encode(values) if binary else values

    def get_values_raw(self, binary: bool = False) -> ValuesOutputType:
        """
        Return the grid values with missing values as NaN.

        This is the form used by the arithmetic and the exporters.

        """
        self._warn_if_unset()
        values = self._values.copy()
        return encode(values) if binary else values

    def to_array(self) -> np.ndarray:
        """Return the raw values as an array of shape `(nrows, ncols)`, southernmost row first."""
        return self._values.reshape(self.shape).copy()

    def set_values(self, data: ValuesInputType) -> "Grid":
        """
        Store new values in the grid.

        Values within tolerance of the current missing value are stored as missing.

        Args:
            data: Either a binary blob of single-precision floats in native
                byte order or a sequence of numbers. Arrays of shape
                `(nrows, ncols)` are accepted as well.

        Returns:
            The `Grid` instance itself.

        Warns:
            ValidationWarning: If the number of values does not match the
                grid size, or a blob is not a whole number of
                4-byte values. The existing values are then left unchanged.

        Note:
            Readers of dataset archives return a tuple `(grid, message)`,
            where a non-empty message says why the grid was left without
            values (see `cpcgrid.io.load_field`).

        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            nbytes = len(memoryview(data).cast("B"))
            if nbytes % BYTES_PER_VALUE:
                warnings.warn(
                    f"Values do not match grid size ({nbytes} bytes for {self._size} values) - no values were set",
                    ValidationWarning,
                    stacklevel=2,
                )
                return self
            values = decode(data)
        else:
            values = np.array(data, dtype=np.float64).reshape(-1)

        if values.size != self._size:
            warnings.warn(
                f"Values do not match grid size ({values.size} != {self._size}) - no values were set",
                ValidationWarning,
                stacklevel=2,
            )
            return self

        self._values = internalize(values, self._missing)
        self._valset = True
        return self

    def init_values(self, value: float) -> "Grid":
        """Set every value to the given value, without any missing-value check."""
        self._values = np.full(self._size, float(value))
        self._valset = True
        return self

    def set_missing_value(self, missing: float) -> "Grid":
        """
        Set the sentinel that marks missing values.

        Values already missing stay missing. In addition, every value
        within tolerance of the new sentinel becomes missing.

        Raises:
            MissingValueTypeError: If `missing` is not a real number.

        """
        missing = validate_missing(missing)
        values = externalize(self._values, self._missing)
        mask = np.isnan(self._values) | is_missing_equivalent(values, missing)
        values[mask] = np.nan
        self._values = values
        self._missing = missing
        log.debug(f"{self._gridtype} grid: missing value set to {missing} ({mask.sum()} missing)")
        return self

    def count_missing(self) -> int:
        return int(np.isnan(self._values).sum())

    # Arithmetic support

    def _new_from_values(self, values: np.ndarray) -> "Grid":
        return type(self)(self._gridtype, catalog=self._catalog).set_values(values)


def empty_grid(gridtype: str, missing: Optional[float] = None, *, catalog: GridCatalog = GRID_CATALOG) -> Grid:
    """
    Return a grid without values, optionally with the sentinel already set.

    """
    grid = Grid(gridtype, catalog=catalog)
    if missing is not None:
        grid.set_missing_value(missing)
    return grid
