import numpy as np
import pytest

from cpcgrid.catalog import (
    GRID_CATALOG,
    GridPreset,
    get_preset,
)
from cpcgrid.errors import (
    FatalConfigurationError,
    UnknownGridTypeError,
)
from cpcgrid.grid import Grid


@pytest.mark.parametrize("name", ["conus0.125deg", "global1deg", "global6thdeg"])
def test_preset_sizes(name):
    grid = Grid(name)
    lats, lons = grid.get_lats(), grid.get_lons()

    assert grid.get_size() == lats.size * lons.size
    assert len(grid.get_latlons()) == grid.get_size()
    assert np.all(np.diff(lats) > 0), f"Expected ascending latitudes for {name}"
    assert np.all(np.diff(lons) > 0), f"Expected ascending longitudes for {name}"


def test_preset_coordinates():
    conus = get_preset("conus0.125deg")
    lats, lons = conus.lats(), conus.lons()
    assert conus.shape == (241, 601)
    assert (lats[0], lats[-1]) == (20.0, 50.0)
    assert (lons[0], lons[-1]) == (230.0, 305.0)

    global1deg = get_preset("global1deg")
    assert global1deg.size == 65160
    assert (global1deg.lats()[0], global1deg.lats()[-1]) == (-90.0, 90.0)
    assert (global1deg.lons()[0], global1deg.lons()[-1]) == (0.0, 359.0)

    sixth = get_preset("global6thdeg")
    assert sixth.shape == (1080, 2160)
    assert sixth.lats()[1] == -89.917 + 0.1666666667


def test_unknown_preset():
    with pytest.raises(UnknownGridTypeError, match="global2deg"):
        Grid("global2deg")
    with pytest.raises(FatalConfigurationError):
        get_preset("CONUS0.125deg")


def test_catalog_mapping():
    assert "global1deg" in GRID_CATALOG
    assert "nope" not in GRID_CATALOG
    assert GRID_CATALOG.get("nope") is None
    assert GRID_CATALOG.names() == ("conus0.125deg", "global1deg", "global6thdeg")


def test_extend(catalog):
    assert "tiny" in catalog
    assert "tiny" not in GRID_CATALOG, "Expected the built-in catalog to be left unchanged"

    grid = Grid("tiny", catalog=catalog)
    assert grid.shape == (2, 3)
    with pytest.raises(UnknownGridTypeError):
        Grid("tiny")


def test_preset_is_frozen():
    preset = GridPreset(0.0, 1.0, 2, 0.0, 1.0, 3)
    with pytest.raises(AttributeError):
        preset.lat_count = 3
