class DecodeError(Exception):
    """Base class for everything raised while decoding a bitmap."""
    pass


class DecodeIOError(DecodeError, IOError):
    """A read or seek on the byte source failed or came back short."""
    pass


class FormatError(DecodeError):
    pass


class BadSignatureError(FormatError):
    pass


class UnsupportedFormatError(FormatError):
    pass


class PaletteIndexError(DecodeError):
    pass
