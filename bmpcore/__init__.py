"""Decoder for uncompressed 1, 4, 8, 24 and 32 bpp BMP images."""

from .decoder import BMPDecoder, decode, read_headers
from .encoder import encode
from .errors import (
    DecodeError, DecodeIOError, FormatError, BadSignatureError, UnsupportedFormatError, PaletteIndexError
)
from .layout import PixelFormat, IndexedLayout, TruecolorLayout
from .raster import Raster

__all__ = ['BMPDecoder', 'decode', 'read_headers', 'encode', 'DecodeError', 'DecodeIOError', 'FormatError',
           'BadSignatureError', 'UnsupportedFormatError', 'PaletteIndexError', 'PixelFormat', 'IndexedLayout',
           'TruecolorLayout', 'Raster']
