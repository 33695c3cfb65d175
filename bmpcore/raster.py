import numpy as np


class Raster(object):
    """
    Decoded image: width x height RGBA samples, stored top row first.

    The samples live in a uint8 numpy array of shape (height, width, 4).
    """

    def __init__(self, width, height, pixels=None):
        if width < 0 or height < 0:
            raise ValueError("Raster dimensions must not be negative, got {}x{}".format(width, height))

        if pixels is None:
            pixels = np.zeros((height, width, 4), dtype=np.uint8)
        elif pixels.shape != (height, width, 4):
            raise ValueError("Expected pixel array of shape {}, got {}".format((height, width, 4), pixels.shape))

        self._width = width
        self._height = height
        self._pixels = pixels

    @classmethod
    def from_rows(cls, rows):
        """Build a raster from a list of rows of (r, g, b, a) tuples, top row first."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        pixels = np.array(rows, dtype=np.uint8).reshape((height, width, 4))
        return cls(width, height, pixels)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def pixels(self):
        return self._pixels

    def pixel(self, x, y):
        return tuple(int(channel) for channel in self._pixels[y, x])

    def rows(self):
        return [[tuple(int(channel) for channel in sample) for sample in row] for row in self._pixels]

    def to_bytes(self):
        """Packed RGBA samples, row-major, top row first."""
        return self._pixels.tobytes()

    def __eq__(self, other):
        if not isinstance(other, Raster):
            return NotImplemented
        return self._width == other.width and self._height == other.height and \
            np.array_equal(self._pixels, other.pixels)

    def __repr__(self):
        return "Raster({}x{})".format(self._width, self._height)
