import functools
import logging
import pathlib
from typing import (
    Callable,
    Iterable,
    Optional,
)

import click

from cpcgrid.catalog import GRID_CATALOG
from cpcgrid.codec import BYTEORDERS
from cpcgrid.config import get_settings
from cpcgrid.errors import (
    ExternalToolError,
    FatalConfigurationError,
)
from cpcgrid.export import (
    CDL_TYPE_DEFAULT,
    write_binary,
    write_cdl,
    write_geotiff,
    write_netcdf,
)
from cpcgrid.grid import Grid
from cpcgrid.io import load_binary
from cpcgrid.regrid import (
    RegridParams,
    Regridder,
)
from cpcgrid.statistics import summary
from cpcgrid.version import __version__

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
"Format of log records written to stderr."

EXPORT_FORMATS = dict(
    binary=lambda grid, ofname, vtype: write_binary(grid, ofname),
    cdl=write_cdl,
    netcdf=write_netcdf,
    geotiff=lambda grid, ofname, vtype: write_geotiff(grid, ofname),
)
"Map the values of `--format` to writers taking `(grid, filename, vtype)`."

gridtype_argument = click.argument("gridtype", type=click.Choice(list(GRID_CATALOG)))
missing_option = click.option(
    "-m",
    "--missing",
    type=float,
    default=None,
    help="Missing value used in the input files and written to the output.",
)
byteorder_option = click.option(
    "-b",
    "--byteorder",
    type=click.Choice(list(BYTEORDERS)),
    default="native",
    show_default=True,
    help="Byte order of the input files.",
)


def log_level(verbose: int) -> str:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return get_settings().log_level


def report_errors(func: Callable) -> Callable:
    """
    Report fatal errors in red and exit with status 1.

    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (FatalConfigurationError, ExternalToolError) as error:
            click.secho(f"{type(error).__name__}: {error}", fg="red", err=True)
            raise SystemExit(1)
    return wrapper


@click.group()
@click.option("-v", "--verbose", count=True, help="Log more. Repeat for debug output.")
@click.version_option(__version__)
def main(verbose: int) -> None:
    """
    Create, combine and export latitude/longitude grids of climate data.

    """
    logging.basicConfig(format=LOG_FORMAT, level=log_level(verbose))
    logging.captureWarnings(True)


@main.command()
def presets() -> None:
    """List the available grid presets."""
    for name, preset in GRID_CATALOG.items():
        click.secho(f"{name}", fg="yellow", nl=False)
        click.echo(
            f"  {preset.nrows}x{preset.ncols} ({preset.size} points)"
            f"  lat {preset.lat_start}+{preset.lat_step}"
            f"  lon {preset.lon_start}+{preset.lon_step}"
        )


@main.command(name="sum")
@gridtype_argument
@click.argument("fnames", nargs=-1, required=True)
@click.option("-o", "--output", required=True, help="Output binary file.")
@missing_option
@byteorder_option
@report_errors
def sum_(
    gridtype: str,
    fnames: Iterable[str],
    output: str,
    missing: Optional[float],
    byteorder: str,
) -> None:
    """
    Add up binary grid files, e.g. daily precipitation into a total.

    A point is missing in the total, if it is missing in any of the files.

    """
    total = Grid(gridtype).init_values(0.0)
    for fname in fnames:
        click.secho(f"Add {fname!r}")
        total = total + load_binary(fname, gridtype, missing=missing, byteorder=byteorder)
    if missing is not None:
        total.set_missing_value(missing)
    write_binary(total, output)
    click.secho(f"Wrote sum of {len(fnames)} grids to {output!r}", fg="green")


@main.command()
@gridtype_argument
@click.argument("fname")
@click.option("-o", "--output", required=True, help="Output file.")
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(list(EXPORT_FORMATS)),
    default="cdl",
    show_default=True,
    help="Output format.",
)
@click.option("-t", "--vtype", default=CDL_TYPE_DEFAULT, show_default=True, help="CDL/netCDF variable type.")
@click.option("-n", "--name", default=None, help="Variable name of the data.")
@missing_option
@byteorder_option
@report_errors
def export(
    gridtype: str,
    fname: str,
    output: str,
    fmt: str,
    vtype: str,
    name: Optional[str],
    missing: Optional[float],
    byteorder: str,
) -> None:
    """Convert a binary grid file to another format."""
    grid = load_binary(fname, gridtype, missing=missing, byteorder=byteorder)
    grid.set_name(name or pathlib.Path(fname).stem)
    EXPORT_FORMATS[fmt](grid, output, vtype)
    click.secho(f"Wrote {fmt} output to {output!r}", fg="green")


@main.command()
@gridtype_argument
@click.argument("fname")
@missing_option
@byteorder_option
@report_errors
def stats(gridtype: str, fname: str, missing: Optional[float], byteorder: str) -> None:
    """Print summary statistics of a binary grid file."""
    grid = load_binary(fname, gridtype, missing=missing, byteorder=byteorder)
    for label, value in summary(grid).items():
        click.echo(f"{label:>8}: {value}")


@main.command()
@click.argument("config")
@click.argument("fname")
@click.argument("output")
@report_errors
def regrid(config: str, fname: str, output: str) -> None:
    """
    Regrid a binary file with wgrib2 as described in the INI file CONFIG.

    """
    params = RegridParams.from_ini(config)
    Regridder(params).regrid(fname, output)
    click.secho(f"Wrote {params.gridtype} data to {output!r}", fg="green")
