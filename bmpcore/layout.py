from enum import Enum

from bmpcore import bmp_codecs
from bmpcore.errors import UnsupportedFormatError


class PixelFormat(Enum):
    """Stored pixel encodings the decoder can unpack, keyed by bit depth."""
    ONE_BIT = 1
    FOUR_BIT = 4
    EIGHT_BIT = 8
    TWENTY_FOUR_BIT = 24
    THIRTY_TWO_BIT = 32

    @property
    def bits_per_pixel(self):
        return self.value

    @property
    def is_indexed(self):
        return self.value <= 8


class IndexedLayout(object):
    """Pixels are palette indices, so a palette always comes along."""

    def __init__(self, pixel_format, palette):
        if not pixel_format.is_indexed:
            raise ValueError("{} is not an indexed format".format(pixel_format))
        self.pixel_format = pixel_format
        self.palette = palette

    def __repr__(self):
        return "IndexedLayout({}, {} colors)".format(self.pixel_format.name, len(self.palette))


class TruecolorLayout(object):

    def __init__(self, pixel_format):
        if pixel_format.is_indexed:
            raise ValueError("{} is not a truecolor format".format(pixel_format))
        self.pixel_format = pixel_format

    def __repr__(self):
        return "TruecolorLayout({})".format(self.pixel_format.name)


def resolve_pixel_format(info_header):
    """
    Check the parts of the info header the unpacker depends on and pick the pixel format.

    :param info_header: Parsed InfoHeader
    :return: PixelFormat member
    """
    if info_header.compression != bmp_codecs.BI_RGB:
        raise UnsupportedFormatError(
            "Compressed bitmaps are not supported (compression method {})".format(info_header.compression))

    if info_header.bits_per_pixel not in bmp_codecs.SUPPORTED_BITS_PER_PIXEL:
        raise UnsupportedFormatError("Unsupported bit depth: {}".format(info_header.bits_per_pixel))

    if info_header.width < 0:
        raise UnsupportedFormatError("Unsupported negative width: {}".format(info_header.width))

    return PixelFormat(info_header.bits_per_pixel)


def palette_size(info_header):
    if info_header.colors_used:
        return info_header.colors_used
    return 1 << info_header.bits_per_pixel
