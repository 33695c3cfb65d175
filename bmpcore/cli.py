import argparse
import logging
import sys

import coloredlogs
import numpy as np

from bmpcore.decoder import decode, read_headers
from bmpcore.errors import DecodeError
from bmpcore.layout import resolve_pixel_format


def _initialise_logging(level):
    logging.basicConfig(format='%(asctime)s.%(msecs)03d %(name)s %(levelname)s %(message)s', datefmt='%F %H:%M:%S',
                        level=level)
    logger = logging.getLogger("bmpcore")
    coloredlogs.install(level=level, fmt='%(asctime)s.%(msecs)03d %(name)s %(levelname)s %(message)s',
                        datefmt='%F %H:%M:%S')
    return logger


def _info(args, logger):
    file_header, info_header = read_headers(args.file)

    for name, value in file_header._asdict().items():
        print("{}: {}".format(name, value))
    for name, value in info_header._asdict().items():
        print("{}: {}".format(name, value))

    pixel_format = resolve_pixel_format(info_header)
    print("pixel_format: {}".format(pixel_format.name))
    logger.info("{} is a {}x{} {} bitmap".format(args.file, info_header.width, info_header.abs_height,
                                                 pixel_format.name))


def _decode(args, logger):
    raster = decode(args.file)

    if args.output.endswith(".npy"):
        np.save(args.output, raster.pixels)
    else:
        with open(args.output, "wb") as f:
            f.write(raster.to_bytes())

    logger.info("Wrote {} to {}".format(raster, args.output))
    print("{}x{}".format(raster.width, raster.height))


def build_parser():
    parser = argparse.ArgumentParser(prog="bmpcore", description="Decode uncompressed BMP images.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity (default: INFO)")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    info_parser = subparsers.add_parser("info", help="Print the header fields of a bitmap")
    info_parser.add_argument("file", help="BMP file to inspect")
    info_parser.set_defaults(handler=_info)

    decode_parser = subparsers.add_parser("decode", help="Decode a bitmap to RGBA samples")
    decode_parser.add_argument("file", help="BMP file to decode")
    decode_parser.add_argument("-o", "--output", required=True,
                               help="Output path, .npy for a numpy array, anything else for raw RGBA bytes")
    decode_parser.set_defaults(handler=_decode)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logger = _initialise_logging(args.log_level)

    try:
        args.handler(args, logger)
    except DecodeError as exc:
        logger.error("Could not decode {}: {}".format(args.file, exc))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
