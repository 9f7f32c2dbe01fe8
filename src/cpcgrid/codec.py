"""
Conversion between grid values and flat binary float blobs.

The blob layout is a header-less sequence of IEEE-754 single-precision
values, 4 bytes each, in the order of the grid's latitude/longitude pairs.

"""
from typing import (
    Iterable,
    Union,
)

import numpy as np

from cpcgrid.errors import CodecError

BYTES_PER_VALUE: int = 4
"Size of one encoded value."

BYTEORDERS = {
    "native": "=",
    "little_endian": "<",
    "big_endian": ">",
}
"Map byte-order names, as used in regridding configurations, to numpy byte-order characters."

BlobType = Union[bytes, bytearray, memoryview]


def _dtype(byteorder: str) -> np.dtype:
    try:
        return np.dtype(np.float32).newbyteorder(BYTEORDERS[byteorder])
    except KeyError:
        raise CodecError(f"Unknown byte order {byteorder!r}. Use one of {list(BYTEORDERS)}.") from None


def encode(values: Iterable[float], *, byteorder: str = "native") -> bytes:
    """
    Pack the values as single-precision floats.

    NaN values are packed as NaN. Replace them before encoding,
    if the consumer should not see NaN.

    """
    return np.asarray(values, dtype=np.float64).astype(_dtype(byteorder)).tobytes()


def decode(blob: BlobType, *, byteorder: str = "native") -> np.ndarray:
    """
    Unpack a blob of single-precision floats.

    Returns:
        A new (writeable) array of double-precision values.

    Raises:
        CodecError: If the blob length is not a multiple of four bytes.

    """
    if len(blob) % BYTES_PER_VALUE:
        raise CodecError(
            f"Blob of {len(blob)} bytes is not a whole number of {BYTES_PER_VALUE}-byte values"
        )
    return np.frombuffer(blob, dtype=_dtype(byteorder)).astype(np.float64)


def count(blob: BlobType) -> int:
    """Return the number of values in the blob."""
    return len(blob) // BYTES_PER_VALUE
