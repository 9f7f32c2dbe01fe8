import pathlib
from typing import (
    Optional,
    Tuple,
    Union,
)
import logging
log = logging.getLogger(__name__)

from cpcgrid.catalog import (
    GRID_CATALOG,
    GridCatalog,
)
from cpcgrid.codec import (
    BYTES_PER_VALUE,
    decode,
)
from cpcgrid.grid import (
    Grid,
    empty_grid,
)

PathType = Union[str, pathlib.Path]

MISSING_DEFAULT: float = -999.0
"Missing value used by the dataset readers unless another is given."


def load_binary(
    fname: PathType,
    gridtype: str,
    *,
    missing: Optional[float] = None,
    byteorder: str = "native",
    catalog: GridCatalog = GRID_CATALOG,
) -> Grid:
    """
    Load a flat binary file of single-precision floats into a new grid.

    Args:
        fname: Path to a header-less file with one value per grid point.
        gridtype: The preset the file was written on.
        missing: The sentinel used in the file, if any.
        byteorder: `native`, `little_endian` or `big_endian`.

    Returns:
        The new grid. If the number of values in the file does not match
        the grid, a `ValidationWarning` is issued and the grid has no values.

    """
    grid = empty_grid(gridtype, missing, catalog=catalog)
    log.info(f"Load {gridtype} values from {fname}")
    blob = pathlib.Path(fname).read_bytes()
    if len(blob) % BYTES_PER_VALUE:
        # Truncated file; set_values warns and leaves the grid without values.
        return grid.set_values(blob)
    return grid.set_values(decode(blob, byteorder=byteorder))


def load_field(
    fname: PathType,
    gridtype: str,
    *,
    missing: float = MISSING_DEFAULT,
    byteorder: str = "native",
    catalog: GridCatalog = GRID_CATALOG,
) -> Tuple[Grid, str]:
    """
    Load a daily field the way the dataset readers do.

    Problems with the file itself are not raised. Instead, a grid without
    values (but with the sentinel set) is returned together with a message,
    so that callers can carry on with the other dates.

    Returns:
        A tuple `(grid, message)`, where `message` is empty on success.

    Raises:
        UnknownGridTypeError: If `gridtype` is not in the catalog.
        MissingValueTypeError: If `missing` is not a number.

    """
    grid = empty_grid(gridtype, missing, catalog=catalog)
    path = pathlib.Path(fname)
    if not path.is_file() or path.stat().st_size == 0:
        return grid, f"No file {str(path)!r} was found"

    blob = path.read_bytes()
    expected = grid.get_size() * BYTES_PER_VALUE
    if len(blob) != expected:
        return grid, f"File {str(path)!r} holds {len(blob)} bytes, expected {expected} for {gridtype}"

    grid.set_values(decode(blob, byteorder=byteorder))
    return grid, ""
