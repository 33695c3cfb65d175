import logging

import numpy as np
from construct import StreamError

from bmpcore import bmp_codecs
from bmpcore.errors import DecodeIOError
from bmpcore.layout import palette_size

OPAQUE = 255


def load_palette(source, info_header):
    """
    Read the color table that follows the info header.

    Entries are stored as (blue, green, red, reserved) and come back as (red, green, blue, 255).

    :param source: Binary stream positioned right after the info header
    :param info_header: Parsed InfoHeader of an indexed image
    :return: Read-only uint8 array of shape (n, 4)
    """
    count = palette_size(info_header)

    try:
        entries = bmp_codecs.color_table(count).parse_stream(source)
    except (StreamError, OSError) as exc:
        raise DecodeIOError("Color table is shorter than the {} declared entries: {}".format(count, exc)) from exc

    palette = np.empty((count, 4), dtype=np.uint8)
    for i, entry in enumerate(entries):
        palette[i] = (entry.red, entry.green, entry.blue, OPAQUE)

    palette.setflags(write=False)
    logging.debug("Loaded palette of {} colors".format(count))
    return palette
