"""
Registry of named grid presets.

A preset is a coordinate-generation rule for each axis: a start value,
a step and a number of steps. The axes are produced by accumulating the
step onto the start value one step at a time, so that presets with
non-terminating float steps (e.g. `global6thdeg`) reproduce the exact
coordinates of the external binary layouts.

"""
from dataclasses import dataclass
from itertools import accumulate
from collections import abc
from types import MappingProxyType
from typing import (
    Iterator,
    Mapping,
    Optional,
    Tuple,
)

import numpy as np

from cpcgrid.errors import UnknownGridTypeError


def _axis(start: float, step: float, count: int) -> np.ndarray:
    return np.fromiter(
        accumulate([start] + [step] * (count - 1)),
        dtype=np.float64,
        count=count,
    )


@dataclass(frozen=True)
class GridPreset:
    """
    A rule for generating the coordinates of a latitude/longitude grid.

    Attributes:
        lat_start: The southernmost latitude.
        lat_step: The distance between two adjacent latitudes.
        lat_count: The number of latitudes.
        lon_start: The westernmost longitude.
        lon_step: The distance between two adjacent longitudes.
        lon_count: The number of longitudes.

    Properties:
        shape: The number of rows (latitudes) and columns (longitudes) in that order.
        nrows: The number of latitudes.
        ncols: The number of longitudes.
        size: The number of grid points.

    """

    lat_start: float
    lat_step: float
    lat_count: int
    lon_start: float
    lon_step: float
    lon_count: int

    @property
    def shape(self) -> Tuple[int, int]:
        return (
            self.lat_count,
            self.lon_count,
        )

    @property
    def nrows(self) -> int:
        return self.lat_count

    @property
    def ncols(self) -> int:
        return self.lon_count

    @property
    def size(self) -> int:
        return self.lat_count * self.lon_count

    def lats(self) -> np.ndarray:
        return _axis(self.lat_start, self.lat_step, self.lat_count)

    def lons(self) -> np.ndarray:
        return _axis(self.lon_start, self.lon_step, self.lon_count)


class GridCatalog(abc.Mapping):
    """
    Immutable mapping of preset names to `GridPreset`s.

    Lookups of unregistered names raise `UnknownGridTypeError`
    instead of `KeyError`.

    """

    def __init__(self, presets: Mapping[str, GridPreset]):
        self._presets = MappingProxyType(dict(presets))

    def __getitem__(self, name: str) -> GridPreset:
        try:
            return self._presets[name]
        except KeyError:
            raise UnknownGridTypeError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._presets

    def get(self, name: str, default: Optional[GridPreset] = None) -> Optional[GridPreset]:
        return self._presets.get(name, default)

    def __iter__(self) -> Iterator[str]:
        return iter(self._presets)

    def __len__(self) -> int:
        return len(self._presets)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._presets)!r})"

    def get_preset(self, name: str) -> GridPreset:
        return self[name]

    def names(self) -> Tuple[str, ...]:
        return tuple(self._presets)

    def extend(self, presets: Mapping[str, GridPreset]) -> "GridCatalog":
        """
        Return a new catalog with the given presets added.

        Existing presets with the same names are replaced in the new catalog only.

        """
        merged = dict(self._presets)
        merged.update(presets)
        return GridCatalog(merged)


GRID_CATALOG = GridCatalog({
    "conus0.125deg": GridPreset(20.0, 0.125, 241, 230.0, 0.125, 601),
    "global1deg": GridPreset(-90.0, 1.0, 181, 0.0, 1.0, 360),
    "global6thdeg": GridPreset(-89.917, 0.1666666667, 1080, 0.083, 0.1666666667, 2160),
})
"The built-in presets."


def get_preset(name: str) -> GridPreset:
    """
    Return the built-in preset with the given name.

    Raises:
        UnknownGridTypeError: If no preset has that name.

    """
    return GRID_CATALOG[name]
