import io
import unittest

from bmpcore.errors import DecodeIOError
from bmpcore.header_parser import InfoHeader
from bmpcore.palette_loader import load_palette


def info_header(bits_per_pixel, colors_used=0):
    return InfoHeader(header_size=40, width=1, height=1, planes=1, bits_per_pixel=bits_per_pixel, compression=0,
                      image_size=0, x_pels_per_meter=0, y_pels_per_meter=0, colors_used=colors_used,
                      colors_important=0)


class TestPaletteLoader(unittest.TestCase):

    def test_entries_are_reordered(self):
        source = io.BytesIO(b'\x01\x02\x03\x07\xff\x80\x00\x00')
        palette = load_palette(source, info_header(8, colors_used=2))

        self.assertEqual(palette.shape, (2, 4))
        self.assertEqual(tuple(palette[0]), (3, 2, 1, 255))
        self.assertEqual(tuple(palette[1]), (0, 0x80, 0xff, 255))

    def test_size_defaults_to_bit_depth(self):
        for bits_per_pixel in (1, 4, 8):
            count = 1 << bits_per_pixel
            source = io.BytesIO(b'\x10\x20\x30\x00' * count + b'\xaa' * 16)
            palette = load_palette(source, info_header(bits_per_pixel))

            self.assertEqual(len(palette), count)
            self.assertEqual(source.tell(), count * 4)

    def test_colors_used_wins(self):
        source = io.BytesIO(b'\x00\x00\x00\x00' * 3)
        palette = load_palette(source, info_header(8, colors_used=3))

        self.assertEqual(len(palette), 3)

    def test_short_palette_is_fatal(self):
        source = io.BytesIO(b'\x00\x00\x00\x00' * 15 + b'\x00\x00')

        with self.assertRaises(DecodeIOError):
            load_palette(source, info_header(4))

    def test_palette_is_read_only(self):
        palette = load_palette(io.BytesIO(b'\x00' * 8), info_header(1))

        with self.assertRaises(ValueError):
            palette[0, 0] = 1


if __name__ == '__main__':
    unittest.main()
