from construct import \
    Struct, Const, Int16ul, Int32ul, Int32sl, Byte, Array

SIGNATURE = b"BM"
FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
PALETTE_ENTRY_SIZE = 4
SUPPORTED_BITS_PER_PIXEL = (1, 4, 8, 24, 32)

# Compression methods, only BI_RGB is decodable
BI_RGB = 0

file_header = Struct(
    "signature" / Const(SIGNATURE),
    "file_size" / Int32ul,
    "reserved" / Int32ul,
    "data_offset" / Int32ul
)

info_header = Struct(
    # Checked for presence only, never branched on
    "header_size" / Int32ul,
    "width" / Int32sl,
    # Positive height means rows are stored bottom-up
    "height" / Int32sl,
    "planes" / Int16ul,
    "bits_per_pixel" / Int16ul,
    "compression" / Int32ul,
    "image_size" / Int32ul,
    "x_pels_per_meter" / Int32sl,
    "y_pels_per_meter" / Int32sl,
    "colors_used" / Int32ul,
    "colors_important" / Int32ul
)

# Stored blue first, the fourth byte is reserved and discarded on load
palette_entry = Struct(
    "blue" / Byte,
    "green" / Byte,
    "red" / Byte,
    "reserved" / Byte
)


def color_table(count):
    return Array(count, palette_entry)


def bytes_per_row(width, bits_per_pixel):
    """
    Length of one stored scanline, rounded up to a whole number of 32 bit words.

    :param width: Image width in pixels
    :param bits_per_pixel: Stored bit depth
    :return: Number of bytes, always a multiple of 4
    """
    return ((width * bits_per_pixel + 31) // 32) * 4
