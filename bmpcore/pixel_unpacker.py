import io
import logging

import numpy as np

from bmpcore import bmp_codecs
from bmpcore.errors import DecodeIOError, PaletteIndexError, UnsupportedFormatError
from bmpcore.layout import IndexedLayout, PixelFormat, TruecolorLayout
from bmpcore.raster import Raster

logger = logging.getLogger(__name__)

OPAQUE = 255


def _one_bit_indices(scanline, width):
    # unpackbits yields the most significant bit of each byte first
    return np.unpackbits(scanline)[:width]


def _four_bit_indices(scanline, width):
    packed = scanline[:(width + 1) // 2]
    indices = np.empty(packed.size * 2, dtype=np.uint8)
    indices[0::2] = packed >> 4
    indices[1::2] = packed & 0x0F
    return indices[:width]


def _eight_bit_indices(scanline, width):
    return scanline[:width]


def _twenty_four_bit_samples(scanline, width):
    bgr = scanline[:width * 3].reshape((width, 3))
    rgba = np.empty((width, 4), dtype=np.uint8)
    rgba[:, 0] = bgr[:, 2]
    rgba[:, 1] = bgr[:, 1]
    rgba[:, 2] = bgr[:, 0]
    rgba[:, 3] = OPAQUE
    return rgba


def _thirty_two_bit_samples(scanline, width):
    bgra = scanline[:width * 4].reshape((width, 4))
    return bgra[:, [2, 1, 0, 3]]


_INDEX_UNPACKERS = {
    PixelFormat.ONE_BIT: _one_bit_indices,
    PixelFormat.FOUR_BIT: _four_bit_indices,
    PixelFormat.EIGHT_BIT: _eight_bit_indices,
}

_SAMPLE_UNPACKERS = {
    PixelFormat.TWENTY_FOUR_BIT: _twenty_four_bit_samples,
    PixelFormat.THIRTY_TWO_BIT: _thirty_two_bit_samples,
}


def row_indices(scanline, pixel_format, width):
    """
    Split one scanline of an indexed image into its palette indices.

    :param scanline: uint8 array holding at least the unpadded row
    :param pixel_format: One of the indexed PixelFormat members
    :param width: Number of pixels in the row
    :return: uint8 array of `width` indices, left to right
    """
    return _INDEX_UNPACKERS[pixel_format](scanline, width)


def lookup_palette(indices, palette):
    if indices.size and int(indices.max()) >= len(palette):
        raise PaletteIndexError("Palette index {} is out of range for a palette of {} colors".format(
            int(indices.max()), len(palette)))
    return palette[indices]


def _fill_scanline(source, scanline):
    filled = 0
    while filled < len(scanline):
        try:
            chunk = source.read(len(scanline) - filled)
        except OSError as exc:
            raise DecodeIOError("Could not read pixel data: {}".format(exc)) from exc
        if not chunk:
            raise DecodeIOError("Pixel data ended early: read {} of {} bytes of a scanline".format(
                filled, len(scanline)))
        scanline[filled:filled + len(chunk)] = np.frombuffer(chunk, dtype=np.uint8)
        filled += len(chunk)


def _remaining_bytes(source):
    try:
        position = source.tell()
        source.seek(0, io.SEEK_END)
        end = source.tell()
        source.seek(position)
    except OSError as exc:
        raise DecodeIOError("Could not measure pixel data: {}".format(exc)) from exc
    return max(end - position, 0)


def _row_decoder(layout):
    if isinstance(layout, IndexedLayout) and layout.pixel_format in _INDEX_UNPACKERS:
        unpack = _INDEX_UNPACKERS[layout.pixel_format]
        palette = layout.palette
        return lambda scanline, width: lookup_palette(unpack(scanline, width), palette)

    if isinstance(layout, TruecolorLayout) and layout.pixel_format in _SAMPLE_UNPACKERS:
        return _SAMPLE_UNPACKERS[layout.pixel_format]

    raise UnsupportedFormatError("No row decoder for layout {!r}".format(layout))


def unpack_pixels(source, info_header, layout):
    """
    Read every scanline of the pixel array and build the raster, top row first.

    Bottom-up files have each row written straight to its mirrored output row as it is read.

    :param source: Binary stream positioned at the first byte of pixel data
    :param info_header: Parsed InfoHeader
    :param layout: IndexedLayout or TruecolorLayout resolved from the header
    :return: Fully populated Raster
    """
    decode_row = _row_decoder(layout)

    width = info_header.width
    abs_height = info_header.abs_height
    row_length = bmp_codecs.bytes_per_row(width, layout.pixel_format.bits_per_pixel)

    # Buffers are sized from the header, so a truncated source must fail before they are allocated
    available = _remaining_bytes(source)
    if row_length * abs_height > available:
        raise DecodeIOError("Pixel data ended early: {} rows of {} bytes declared, {} bytes available".format(
            abs_height, row_length, available))

    scanline = np.zeros(row_length if abs_height else 0, dtype=np.uint8)
    raster = Raster(width, abs_height)

    logger.debug("Unpacking {} rows of {} bytes ({})".format(
        abs_height, row_length, "bottom-up" if info_header.is_bottom_up else "top-down"))

    for y in range(abs_height):
        _fill_scanline(source, scanline)

        dest_y = abs_height - 1 - y if info_header.is_bottom_up else y
        raster.pixels[dest_y] = decode_row(scanline, width)

    return raster
