import logging
from collections import namedtuple

from construct import ConstError, StreamError

from bmpcore import bmp_codecs
from bmpcore.errors import BadSignatureError, DecodeIOError

logger = logging.getLogger(__name__)

FileHeader = namedtuple("FileHeader", ["signature", "file_size", "reserved", "data_offset"])


class InfoHeader(namedtuple("InfoHeader", [
        "header_size", "width", "height", "planes", "bits_per_pixel", "compression", "image_size",
        "x_pels_per_meter", "y_pels_per_meter", "colors_used", "colors_important"])):
    __slots__ = ()

    @property
    def abs_height(self):
        return abs(self.height)

    @property
    def is_bottom_up(self):
        return self.height > 0


def parse_headers(source):
    """
    Read the file header and the info header that immediately follows it.

    Only the structure is validated here, the signature being the one field that is checked.

    :param source: Readable binary stream positioned at the start of the bitmap
    :return: (FileHeader, InfoHeader)
    """
    try:
        parsed_file_header = bmp_codecs.file_header.parse_stream(source)
    except ConstError:
        raise BadSignatureError("Not a BMP file, signature is not {!r}".format(bmp_codecs.SIGNATURE))
    except (StreamError, OSError) as exc:
        raise DecodeIOError("Could not read file header: {}".format(exc)) from exc

    file_header = FileHeader(
        signature=bmp_codecs.SIGNATURE,
        file_size=parsed_file_header.file_size,
        reserved=parsed_file_header.reserved,
        data_offset=parsed_file_header.data_offset
    )

    try:
        parsed_info_header = bmp_codecs.info_header.parse_stream(source)
    except (StreamError, OSError) as exc:
        raise DecodeIOError("Could not read info header: {}".format(exc)) from exc

    info_header = InfoHeader(**{field: parsed_info_header[field] for field in InfoHeader._fields})

    logger.debug("Parsed headers: {} {}".format(file_header, info_header))
    return file_header, info_header
