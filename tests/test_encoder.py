import io
import unittest

import numpy as np

from bmpcore import bmp_codecs
from bmpcore.encoder import encode
from bmpcore.header_parser import parse_headers
from bmpcore.raster import Raster

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


class TestEncoder(unittest.TestCase):

    def test_headers(self):
        raster = Raster.from_rows([[BLACK, WHITE, BLACK], [WHITE, WHITE, BLACK]])
        data = encode(raster, 1, palette=[BLACK, WHITE])
        file_header, info_header = parse_headers(io.BytesIO(data))

        self.assertEqual(file_header.data_offset, 14 + 40 + 2 * 4)
        self.assertEqual(file_header.file_size, len(data))
        self.assertEqual(info_header.width, 3)
        self.assertEqual(info_header.height, 2)
        self.assertEqual(info_header.bits_per_pixel, 1)
        self.assertEqual(info_header.colors_used, 2)
        self.assertEqual(info_header.image_size, 2 * bmp_codecs.bytes_per_row(3, 1))

    def test_bottom_up_row_order(self):
        raster = Raster.from_rows([[BLACK], [WHITE]])
        data = encode(raster, 8, palette=[BLACK, WHITE])

        # Bottom row is stored first
        self.assertEqual(data[-8:], b'\x01\x00\x00\x00' + b'\x00\x00\x00\x00')

    def test_top_down_row_order(self):
        raster = Raster.from_rows([[BLACK], [WHITE]])
        data = encode(raster, 8, palette=[BLACK, WHITE], top_down=True)
        _, info_header = parse_headers(io.BytesIO(data))

        self.assertEqual(info_header.height, -2)
        self.assertEqual(data[-8:], b'\x00\x00\x00\x00' + b'\x01\x00\x00\x00')

    def test_packed_indices(self):
        raster = Raster.from_rows([[WHITE, BLACK, WHITE, WHITE, BLACK]])
        self.assertEqual(encode(raster, 1, palette=[BLACK, WHITE])[-4:], b'\xb0\x00\x00\x00')

        raster = Raster.from_rows([[(10, 0, 0, 255), (7, 0, 0, 255)]])
        palette = [(i, 0, 0) for i in range(16)]
        self.assertEqual(encode(raster, 4, palette=palette)[-4:], b'\xa7\x00\x00\x00')

    def test_truecolor_channel_order(self):
        raster = Raster.from_rows([[(1, 2, 3, 4)]])

        self.assertEqual(encode(raster, 24)[-4:], b'\x03\x02\x01\x00')
        self.assertEqual(encode(raster, 32)[-4:], b'\x03\x02\x01\x04')

    def test_color_missing_from_palette(self):
        raster = Raster.from_rows([[(1, 2, 3, 255)]])

        with self.assertRaises(ValueError):
            encode(raster, 8, palette=[BLACK, WHITE])

    def test_missing_color_position(self):
        raster = Raster.from_rows([[BLACK, WHITE], [WHITE, (9, 9, 9, 255)]])

        with self.assertRaises(ValueError) as ctx:
            encode(raster, 1, palette=[BLACK, WHITE])
        self.assertIn("(1, 1)", str(ctx.exception))

    def test_first_matching_entry_wins(self):
        raster = Raster.from_rows([[WHITE, BLACK]])
        data = encode(raster, 8, palette=[(5, 5, 5), WHITE, BLACK, WHITE])

        self.assertEqual(data[-4:], b'\x01\x02\x00\x00')

    def test_large_indexed_raster(self):
        palette = [(i, i, 255 - i) for i in range(256)]
        pixels = np.zeros((300, 400, 4), dtype=np.uint8)
        gray = (np.arange(400 * 300) % 256).reshape((300, 400)).astype(np.uint8)
        pixels[:, :, 0] = gray
        pixels[:, :, 1] = gray
        pixels[:, :, 2] = 255 - gray
        pixels[:, :, 3] = 255
        raster = Raster(400, 300, pixels)

        data = encode(raster, 8, palette=palette, top_down=True)
        self.assertEqual(np.frombuffer(data[-400:], dtype=np.uint8).tolist(), gray[-1].tolist())

    def test_palette_required(self):
        with self.assertRaises(ValueError):
            encode(Raster.from_rows([[BLACK]]), 4)

    def test_palette_too_large(self):
        with self.assertRaises(ValueError):
            encode(Raster.from_rows([[BLACK]]), 1, palette=[BLACK, WHITE, (1, 1, 1)])

    def test_unsupported_depth(self):
        with self.assertRaises(ValueError):
            encode(Raster.from_rows([[BLACK]]), 16)


if __name__ == '__main__':
    unittest.main()
