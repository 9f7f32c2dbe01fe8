"""
Regridding of flat binary files onto catalog presets with `wgrib2`.

The resampling itself is done entirely by `wgrib2`. This module builds
the three `wgrib2` invocations:

1.  Import the IEEE input file into GRIB2, using a GRIB2 template that
    describes the input grid.
2.  Interpolate onto the target preset (`-new_grid latlon ...`).
3.  Export the result as a header-less binary file in native byte order.

Parameters are given as a mapping or an INI file with the keys below:

    [input]
    grib2template = /path/to/template.grb
    byteorder = little_endian
    missing = -999.0
    headers = no_header

    [output]
    gridtype = conus0.125deg

"""
import configparser
import math
import pathlib
import tempfile
from dataclasses import dataclass
from typing import (
    Any,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)
import logging
log = logging.getLogger(__name__)

import numpy as np

from cpcgrid.catalog import (
    GRID_CATALOG,
    GridCatalog,
    GridPreset,
)
from cpcgrid.config import (
    Settings,
    get_settings,
)
from cpcgrid.errors import RegridConfigurationError
from cpcgrid.external import (
    remove_partial,
    run_external,
)
from cpcgrid.grid import Grid
from cpcgrid.missing import is_number

PathType = Union[str, pathlib.Path]

BYTEORDERS = ("big_endian", "little_endian")
"Byte orders `wgrib2` can import."

HEADERS = ("header", "no_header")
"Whether the input records are wrapped in Fortran record headers."

WGRIB2_UNDEFINED: float = 9.999e20
"The value `wgrib2` writes for undefined grid points."

PARAM_KEYS = dict(
    template="input.grib2template",
    byteorder="input.byteorder",
    missing="input.missing",
    headers="input.headers",
    gridtype="output.gridtype",
)
"Attribute names of `RegridParams` and the dotted configuration keys they are read from."


def _format_number(value: float) -> str:
    return np.format_float_positional(value, trim="-")


def wgrib2_grid_args(preset: GridPreset) -> Tuple[str, str]:
    """
    Return the longitude and latitude arguments to `wgrib2 -new_grid latlon`.

    Example: `('230:601:0.125', '20:241:0.125')` for `conus0.125deg`.

    """
    return (
        f"{_format_number(preset.lon_start)}:{preset.lon_count}:{_format_number(preset.lon_step)}",
        f"{_format_number(preset.lat_start)}:{preset.lat_count}:{_format_number(preset.lat_step)}",
    )


@dataclass(frozen=True)
class RegridParams:
    """
    Description of the input data and the target grid.

    Attributes:
        template: GRIB2 file describing the input grid.
        byteorder: Byte order of the input file, one of `BYTEORDERS`.
        missing: Missing value in the input file.
        headers: One of `HEADERS`.
        gridtype: Name of the target preset.

    """

    template: pathlib.Path
    byteorder: str
    missing: float
    headers: str
    gridtype: str

    def __post_init__(self):
        template = pathlib.Path(self.template)
        if not template.is_file() or template.stat().st_size == 0:
            raise RegridConfigurationError(
                f"Invalid {PARAM_KEYS['template']} param: template file {str(template)!r} not found"
            )
        object.__setattr__(self, "template", template)

        if self.byteorder not in BYTEORDERS:
            raise RegridConfigurationError(
                f"Invalid {PARAM_KEYS['byteorder']} param {self.byteorder!r}, expected one of {BYTEORDERS}"
            )
        if self.headers not in HEADERS:
            raise RegridConfigurationError(
                f"Invalid {PARAM_KEYS['headers']} param {self.headers!r}, expected one of {HEADERS}"
            )
        object.__setattr__(self, "missing", _parse_missing(self.missing))

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any], *, catalog: GridCatalog = GRID_CATALOG) -> "RegridParams":
        """
        Create parameters from a mapping with dotted keys, e.g. `input.byteorder`.

        Raises:
            RegridConfigurationError: If a key is missing or a value is invalid.

        """
        kwargs = {}
        for attribute, key in PARAM_KEYS.items():
            if key not in params:
                raise RegridConfigurationError(f"Missing param {key}")
            kwargs[attribute] = params[key]
        if kwargs["gridtype"] not in catalog:
            raise RegridConfigurationError(
                f"Invalid {PARAM_KEYS['gridtype']} param {kwargs['gridtype']!r}, expected one of {list(catalog)}"
            )
        return cls(**kwargs)

    @classmethod
    def from_ini(cls, fname: PathType, *, catalog: GridCatalog = GRID_CATALOG) -> "RegridParams":
        parser = configparser.ConfigParser()
        if not parser.read(fname):
            raise RegridConfigurationError(f"Could not read regrid configuration {str(fname)!r}")
        params = {
            f"{section}.{key}": value
            for section in parser.sections()
            for (key, value) in parser.items(section)
        }
        return cls.from_mapping(params, catalog=catalog)


def _parse_missing(value: Any) -> float:
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            pass
    if is_number(value) and math.isfinite(value):
        return float(value)
    raise RegridConfigurationError(f"Invalid {PARAM_KEYS['missing']} param {value!r}: not a finite number")


class Regridder:
    """
    Regrid binary files described by `RegridParams` onto a catalog preset.

    """

    def __init__(
        self,
        params: RegridParams,
        *,
        settings: Optional[Settings] = None,
        catalog: GridCatalog = GRID_CATALOG,
    ):
        self.params = params
        self.settings = settings or get_settings()
        self.catalog = catalog
        self.preset = catalog[params.gridtype]

    def commands(self, input_fname: PathType, output_fname: PathType, work_dir: PathType) -> List[List[str]]:
        """
        Return the `wgrib2` invocations, in order, that regrid the input file.

        """
        exe = self.settings.wgrib2_exec
        params = self.params
        work_dir = pathlib.Path(work_dir)
        input_grib2 = work_dir / "input.grb2"
        output_grib2 = work_dir / "output.grb2"
        lon_args, lat_args = wgrib2_grid_args(self.preset)
        return [
            [
                exe, "-d", "1", str(params.template),
                "-import_ieee", str(input_fname),
                f"-{params.headers}", f"-{params.byteorder}",
                "-undefine_val", _format_number(params.missing),
                "-set_date", "19710101",
                "-set_grib_type", "j",
                "-set_scaling", "-1", "0",
                "-grib_out", str(input_grib2),
            ],
            [
                exe, str(input_grib2),
                "-set_grib_type", "jpeg",
                "-new_grid_winds", "earth",
                "-new_grid", "latlon", lon_args, lat_args,
                str(output_grib2),
            ],
            [
                exe, str(output_grib2),
                "-no_header",
                "-bin", str(output_fname),
            ],
        ]

    def regrid(self, input_fname: PathType, output_fname: PathType) -> pathlib.Path:
        """
        Regrid the input file and store the result as native-order binary.

        An existing output file is removed, even if the new data are not
        successfully produced.

        Raises:
            ExternalToolError: If any of the `wgrib2` steps fail.

        """
        output = pathlib.Path(output_fname)
        remove_partial(output)
        descriptions = (
            f"Converting {str(input_fname)!r} to GRIB2",
            f"Regridding the GRIB2 version of {str(input_fname)!r} to {self.params.gridtype}",
            f"Creating binary file {str(output)!r}",
        )
        log.info(f"Regrid {str(input_fname)!r} to {self.params.gridtype}")
        with tempfile.TemporaryDirectory() as work_dir:
            for command, description in zip(self.commands(input_fname, output, work_dir), descriptions):
                run_external(command, output=output, description=description)
        return output

    def regrid_grid(self, input_fname: PathType) -> Grid:
        """
        Regrid the input file and return the result as a grid of the target preset.

        Points `wgrib2` leaves undefined and points with the input missing
        value are missing in the grid, whose sentinel is the input missing value.

        """
        with tempfile.TemporaryDirectory() as work_dir:
            output = self.regrid(input_fname, pathlib.Path(work_dir) / "regridded.bin")
            blob = output.read_bytes()
        grid = Grid(self.params.gridtype, catalog=self.catalog)
        grid.set_values(blob).set_missing_value(WGRIB2_UNDEFINED)
        return grid.set_missing_value(self.params.missing)
