import logging

import numpy as np
from construct import Container

from bmpcore import bmp_codecs

# 72 DPI
DEFAULT_PELS_PER_METER = 2835


def _palette_rgb(palette):
    colors = np.asarray(palette, dtype=np.uint8)
    if colors.ndim != 2 or colors.shape[1] not in (3, 4):
        raise ValueError("Expected palette of (r, g, b) or (r, g, b, a) entries, got shape {}".format(colors.shape))
    return colors[:, :3]


def _palette_indices(raster, colors):
    """Map every raster sample to the first palette entry with the same RGB value."""
    palette_keys = _rgb_keys(colors)
    # np.unique keeps the index of the first occurrence of each key
    keys, first_index = np.unique(palette_keys, return_index=True)

    sample_keys = _rgb_keys(raster.pixels[:, :, :3])
    positions = np.clip(np.searchsorted(keys, sample_keys), 0, len(keys) - 1)

    missing = keys[positions] != sample_keys
    if missing.any():
        y, x = (int(i) for i in np.argwhere(missing)[0])
        raise ValueError("Color {} at ({}, {}) is not in the palette".format(raster.pixel(x, y)[:3], x, y))

    return first_index[positions].astype(np.uint8)


def _rgb_keys(samples):
    samples = samples.astype(np.uint32)
    return (samples[..., 0] << 16) | (samples[..., 1] << 8) | samples[..., 2]


def _pack_row(row, bits_per_pixel):
    if bits_per_pixel == 1:
        return np.packbits(row).tobytes()
    if bits_per_pixel == 4:
        nibbles = np.zeros(row.size + row.size % 2, dtype=np.uint8)
        nibbles[:row.size] = row
        return ((nibbles[0::2] << 4) | nibbles[1::2]).tobytes()
    if bits_per_pixel == 8:
        return row.tobytes()
    if bits_per_pixel == 24:
        return row[:, [2, 1, 0]].tobytes()
    return row[:, [2, 1, 0, 3]].tobytes()


def encode(raster, bits_per_pixel, palette=None, top_down=False):
    """
    Write a raster out as an uncompressed bitmap.

    :param raster: Raster to encode
    :param bits_per_pixel: 1, 4, 8, 24 or 32
    :param palette: Sequence of (r, g, b[, a]) colors, required for 1, 4 and 8 bpp. Alpha is not stored.
    :param top_down: Store rows top to bottom (negative height) instead of the usual bottom-up order
    :return: The complete file as bytes
    """
    if bits_per_pixel not in bmp_codecs.SUPPORTED_BITS_PER_PIXEL:
        raise ValueError("Unsupported bit depth: {}".format(bits_per_pixel))

    if bits_per_pixel <= 8:
        if palette is None:
            raise ValueError("A palette is required for {} bpp".format(bits_per_pixel))
        colors = _palette_rgb(palette)
        if not 0 < len(colors) <= 1 << bits_per_pixel:
            raise ValueError("A {} bpp palette holds 1 to {} colors, got {}".format(
                bits_per_pixel, 1 << bits_per_pixel, len(colors)))
        rows = _palette_indices(raster, colors)
    else:
        colors = np.empty((0, 3), dtype=np.uint8)
        rows = raster.pixels

    row_length = bmp_codecs.bytes_per_row(raster.width, bits_per_pixel)
    stored_rows = rows if top_down else rows[::-1]
    pixel_data = b"".join(_pack_row(row, bits_per_pixel).ljust(row_length, b"\x00") for row in stored_rows)

    color_table = bmp_codecs.color_table(len(colors)).build(
        [Container(blue=int(b), green=int(g), red=int(r), reserved=0) for r, g, b in colors])

    data_offset = bmp_codecs.FILE_HEADER_SIZE + bmp_codecs.INFO_HEADER_SIZE + len(color_table)

    file_header = bmp_codecs.file_header.build(Container(
        file_size=data_offset + len(pixel_data),
        reserved=0,
        data_offset=data_offset
    ))

    info_header = bmp_codecs.info_header.build(Container(
        header_size=bmp_codecs.INFO_HEADER_SIZE,
        width=raster.width,
        height=-raster.height if top_down else raster.height,
        planes=1,
        bits_per_pixel=bits_per_pixel,
        compression=bmp_codecs.BI_RGB,
        image_size=len(pixel_data),
        x_pels_per_meter=DEFAULT_PELS_PER_METER,
        y_pels_per_meter=DEFAULT_PELS_PER_METER,
        colors_used=len(colors),
        colors_important=0
    ))

    logging.debug("Encoded {!r} at {} bpp, {} bytes of pixel data".format(raster, bits_per_pixel, len(pixel_data)))
    return file_header + info_header + color_table + pixel_data
