"""
cpcgrid

Fixed-topology latitude/longitude grids for gridded climate observations,
with an arithmetic that carries missing data through every operation.

The grids are defined by named presets:

|    Preset     |   Latitudes (start, step, count)   |   Longitudes (start, step, count)   |
|---------------|------------------------------------|-------------------------------------|
| conus0.125deg | 20.0, 0.125, 241                   | 230.0, 0.125, 601                   |
| global1deg    | -90.0, 1.0, 181                    | 0.0, 1.0, 360                       |
| global6thdeg  | -89.917, 0.1666666667, 1080        | 0.083, 0.1666666667, 2160           |

Values are ordered latitude-major (longitude varies fastest), both axes ascending.
The binary layout used for files is a header-less sequence of single-precision
floats in native byte order.

"""
from cpcgrid.version import __version__
from cpcgrid.catalog import (
    GRID_CATALOG,
    GridCatalog,
    GridPreset,
    get_preset,
)
from cpcgrid.errors import (
    ExternalToolError,
    FatalConfigurationError,
    ValidationWarning,
)
from cpcgrid.grid import Grid
