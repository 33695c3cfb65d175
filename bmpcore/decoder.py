import logging
import os
from contextlib import contextmanager

from transitions import Machine

from bmpcore.errors import DecodeError, DecodeIOError
from bmpcore.header_parser import parse_headers
from bmpcore.layout import IndexedLayout, TruecolorLayout, resolve_pixel_format
from bmpcore.palette_loader import load_palette
from bmpcore.pixel_unpacker import unpack_pixels


class BMPDecoder(object):
    """
    Decodes one uncompressed bitmap from a readable, seekable binary stream.

    Each instance handles a single decode and tracks its progress through a small state machine:
    init -> headers_parsed -> palette_loaded -> unpacking -> complete, or failed from anywhere.
    """

    def __init__(self, source):
        self.logger = logging.getLogger("bmp_decoder")

        self._source = source
        self.file_header = None
        self.info_header = None
        self.layout = None

        states = ['init', 'headers_parsed', 'palette_loaded', 'unpacking', 'complete', 'failed']

        transitions = [
            {'trigger': 'headers_read', 'source': 'init', 'dest': 'headers_parsed'},
            {'trigger': 'palette_read', 'source': 'headers_parsed', 'dest': 'palette_loaded'},
            {'trigger': 'palette_skipped', 'source': 'headers_parsed', 'dest': 'palette_loaded'},
            {'trigger': 'rows_started', 'source': 'palette_loaded', 'dest': 'unpacking'},
            {'trigger': 'rows_finished', 'source': 'unpacking', 'dest': 'complete'},
            {'trigger': 'error_raised', 'source': '*', 'dest': 'failed'}
        ]

        self.fsm = Machine(states=states, transitions=transitions, initial='init')

    @property
    def state(self):
        return self.fsm.state

    def decode(self):
        """
        Run header parsing, palette loading and pixel unpacking in order.

        :return: Raster
        """
        if self.fsm.state != 'init':
            raise RuntimeError("BMPDecoder instances decode once, state is {}".format(self.fsm.state))

        try:
            return self._decode()
        except DecodeError as exc:
            self.fsm.error_raised()
            self.logger.error("Decoding failed: {}".format(exc))
            raise
        except Exception:
            failed_in = self.fsm.state
            self.fsm.error_raised()
            self.logger.exception("Decoding failed unexpectedly in state {}".format(failed_in))
            raise

    def _decode(self):
        self.file_header, self.info_header = parse_headers(self._source)
        pixel_format = resolve_pixel_format(self.info_header)
        self.fsm.headers_read()
        self.logger.debug("State is {}".format(self.fsm.state))

        if pixel_format.is_indexed:
            palette = load_palette(self._source, self.info_header)
            self.layout = IndexedLayout(pixel_format, palette)
            self.fsm.palette_read()
            self.logger.info("Indexed image: {} bpp, palette of {} colors".format(
                pixel_format.bits_per_pixel, len(palette)))
        else:
            self.layout = TruecolorLayout(pixel_format)
            self.fsm.palette_skipped()
            self.logger.info("Truecolor image: {} bpp".format(pixel_format.bits_per_pixel))

        try:
            self._source.seek(self.file_header.data_offset)
        except OSError as exc:
            raise DecodeIOError("Could not seek to pixel data at offset {}: {}".format(
                self.file_header.data_offset, exc)) from exc

        self.fsm.rows_started()
        raster = unpack_pixels(self._source, self.info_header, self.layout)
        self.fsm.rows_finished()

        self.logger.info("Decoded {}x{} image".format(raster.width, raster.height))
        return raster


@contextmanager
def open_source(source):
    """
    Yield a binary stream for `source`.

    Paths are opened here and closed on the way out, file objects are passed through untouched.
    """
    if not isinstance(source, (str, bytes, os.PathLike)):
        yield source
        return

    try:
        stream = open(source, "rb")
    except OSError as exc:
        raise DecodeIOError("Could not open {}: {}".format(source, exc)) from exc

    with stream:
        yield stream


def decode(source):
    """
    Decode an uncompressed 1, 4, 8, 24 or 32 bpp bitmap into a Raster.

    :param source: Path, or readable and seekable binary file object
    :return: Raster with the top row first
    """
    with open_source(source) as stream:
        return BMPDecoder(stream).decode()


def read_headers(source):
    """
    Parse only the file and info headers.

    :param source: Path, or readable binary file object
    :return: (FileHeader, InfoHeader)
    """
    with open_source(source) as stream:
        return parse_headers(stream)
