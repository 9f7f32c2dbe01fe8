"""
Writers that format grid contents for external consumers.

External consumers never see NaN: missing values are written as the
grid's sentinel (binary, GeoTIFF) or as the CDL fill token `_`.

"""
import math
import pathlib
import re
import tempfile
from typing import (
    Iterable,
    List,
    Optional,
    Union,
)
import warnings
import logging
log = logging.getLogger(__name__)

import numpy as np
import rasterio
from rasterio.transform import from_bounds

from cpcgrid.config import (
    Settings,
    get_settings,
)
from cpcgrid.errors import ValidationWarning
from cpcgrid.external import run_external
from cpcgrid.grid import Grid

PathType = Union[str, pathlib.Path]

CRS_OUTPUT_DEFAULT: str = "epsg:4326"
"WSG84"

CDL_TYPES = ("char", "byte", "short", "int", "float", "double")
"Numeric types a CDL data variable may be declared as."

CDL_TYPE_DEFAULT: str = "double"
"Type used for the data variable when an invalid type is requested."

CDL_FILL_TOKEN: str = "_"
"CDL token for a value that is not there."

CDL_NAME_DEFAULT: str = "data"
"Name of the data variable for grids without a name."

_CDL_SUFFIX = dict(char="", byte="b", short="s", int="", float="f", double="")
_INTEGER_TYPES = ("char", "byte", "short", "int")


def write_binary(grid: Grid, filename: PathType) -> None:
    """
    Write the values as a flat blob of single-precision floats in native byte order.

    Missing values are written as the grid's sentinel.

    """
    path = pathlib.Path(filename)
    path.write_bytes(grid.get_values(binary=True))
    log.info(f"Wrote {grid.get_size()} values to {str(path)!r}")


def cdl_type(vtype: str) -> str:
    """
    Return the type, if valid for a CDL data variable, otherwise the default type.

    Warns:
        ValidationWarning: If the type is invalid.

    """
    if vtype in CDL_TYPES:
        return vtype
    warnings.warn(
        f"Invalid CDL type {vtype!r}, using {CDL_TYPE_DEFAULT!r}. Valid types are {CDL_TYPES}.",
        ValidationWarning,
        stacklevel=3,
    )
    return CDL_TYPE_DEFAULT


def cdl_name(name: Optional[str]) -> str:
    """Return a valid CDL variable name from the grid's name."""
    if not name:
        return CDL_NAME_DEFAULT
    name = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if not re.match(r"[A-Za-z_]", name):
        name = f"_{name}"
    return name


def _format_coordinate(value: float) -> str:
    return repr(float(value))


def _format_value(value: float, vtype: str) -> str:
    if math.isnan(value):
        return CDL_FILL_TOKEN
    if math.isinf(value):
        if vtype in _INTEGER_TYPES:
            return CDL_FILL_TOKEN
        return "Infinity" if value > 0 else "-Infinity"
    if vtype in _INTEGER_TYPES:
        return str(int(value))
    if vtype == "float":
        return str(np.float32(value))
    return repr(float(value))


def _fill_value_allowed(missing: float, vtype: str) -> bool:
    if math.isnan(missing):
        return False
    if vtype in _INTEGER_TYPES and not float(missing).is_integer():
        warnings.warn(
            f"Missing value {missing} cannot be stored as {vtype!r}, leaving out _FillValue",
            ValidationWarning,
            stacklevel=3,
        )
        return False
    return True


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _join(items: Iterable[str], per_line: int) -> str:
    items = list(items)
    lines = [
        ", ".join(items[start:start + per_line])
        for start in range(0, len(items), per_line)
    ]
    return ",\n    ".join(lines)


def to_cdl(grid: Grid, vtype: str = CDL_TYPE_DEFAULT) -> str:
    """
    Return the grid as CDL text, the input of `ncgen`.

    Args:
        grid: The grid to export. Its name is used as the variable name.
        vtype: One of `CDL_TYPES`. Invalid types fall back to `double`.

    Returns:
        CDL text with `lon` and `lat` dimensions, coordinate variables and
        a data variable of shape `(lat, lon)`. Missing values are written as
        the fill token `_`. The `_FillValue` attribute is the grid's sentinel;
        it is left out while the sentinel is undefined, and with a warning
        when an integer type cannot hold it.

    """
    vtype = cdl_type(vtype)
    name = cdl_name(grid.get_name())
    nrows, ncols = grid.shape
    lats, lons = grid.get_lats(), grid.get_lons()
    values = grid.get_values_raw()

    header: List[str] = [
        f"netcdf {name} {{",
        "dimensions:",
        f"\tlon = {ncols} ;",
        f"\tlat = {nrows} ;",
        "variables:",
        "\tdouble lon(lon) ;",
        '\t\tlon:units = "degrees_east" ;',
        "\tdouble lat(lat) ;",
        '\t\tlat:units = "degrees_north" ;',
        f"\t{vtype} {name}(lat, lon) ;",
    ]
    missing = grid.get_missing_value()
    if _fill_value_allowed(missing, vtype):
        fill = _format_value(missing, vtype)
        header.append(f"\t\t{name}:_FillValue = {fill}{_CDL_SUFFIX[vtype]} ;")
    if grid.get_name():
        header.append(f'\t\t{name}:long_name = "{_escape(grid.get_name())}" ;')

    data = [
        "data:",
        "",
        f" lon = {_join(map(_format_coordinate, lons), 10)} ;",
        "",
        f" lat = {_join(map(_format_coordinate, lats), 10)} ;",
        "",
        f" {name} = {_join((_format_value(value, vtype) for value in values), ncols)} ;",
        "}",
    ]
    return "\n".join(header + data) + "\n"


def write_cdl(grid: Grid, filename: PathType, vtype: str = CDL_TYPE_DEFAULT) -> None:
    path = pathlib.Path(filename)
    path.write_text(to_cdl(grid, vtype))
    log.info(f"Wrote CDL to {str(path)!r}")


def write_netcdf(
    grid: Grid,
    filename: PathType,
    vtype: str = CDL_TYPE_DEFAULT,
    *,
    settings: Optional[Settings] = None,
) -> None:
    """
    Write the grid as a netCDF file by compiling its CDL text with `ncgen`.

    The call blocks until `ncgen` exits.

    Raises:
        ExternalToolError: If `ncgen` fails. Any partial output file is removed first.

    """
    settings = settings or get_settings()
    path = pathlib.Path(filename)
    with tempfile.TemporaryDirectory() as work_dir:
        cdl = pathlib.Path(work_dir) / f"{path.stem}.cdl"
        write_cdl(grid, cdl, vtype)
        run_external(
            [settings.ncgen_exec, "-o", path, cdl],
            output=path,
            description=f"Compiling CDL into {str(path)!r}",
        )
    log.info(f"Wrote netCDF to {str(path)!r}")


def write_geotiff(grid: Grid, filename: PathType, crs: str = CRS_OUTPUT_DEFAULT) -> None:
    """
    Save the grid as a single-band GeoTIFF raster image.

    The first raster row is the northernmost latitude. Cells are centred
    on the grid coordinates, and missing values are set to the sentinel,
    which is also the raster's nodata value.

    Side effects:
        Writes an image file to the selected destination path.

    """
    nrows, ncols = grid.shape
    preset = grid.info
    lats, lons = grid.get_lats(), grid.get_lons()
    bounds = (
        lons[0] - preset.lon_step / 2,
        lats[0] - preset.lat_step / 2,
        lons[-1] + preset.lon_step / 2,
        lats[-1] + preset.lat_step / 2,
    )
    transform = from_bounds(*bounds, ncols, nrows)

    missing = grid.get_missing_value()
    raster = grid.get_values_raw().reshape(nrows, ncols)[::-1]
    raster = np.where(np.isnan(raster), missing, raster).astype(np.float32)

    kwargs = dict(
        driver="GTiff",
        height=nrows,
        width=ncols,
        count=1,
        crs=crs,
        transform=transform,
        dtype=raster.dtype,
        nodata=missing,
    )
    with rasterio.open(filename, "w", **kwargs) as output:
        output.write(raster, indexes=1)
    log.info(f"Wrote GeoTIFF to {str(filename)!r}")
