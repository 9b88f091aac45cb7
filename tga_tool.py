#!/usr/bin/env python3
"""
Command line front end for the targa codec.

Usage examples:
  python tga_tool.py info image.tga
  python tga_tool.py decode image.tga image.png
  python tga_tool.py encode photo.png photo.tga --type rgb_rle
  python tga_tool.py flip image.tga mirrored.tga --horizontal
  python tga_tool.py show image.tga
"""

import argparse
import sys
from typing import List, Optional

import matplotlib.pyplot as plt

from targa import TGACodec, TGAError, TGAImage, TGAType, flip_horizontally, flip_vertically
from targa.image_utils.pillow_bridge import PillowBridge

TYPE_CHOICES = [t.name.lower() for t in TGAType]


def show_image(image: TGAImage, title: str) -> None:
    plt.figure()
    plt.imshow(image.as_array())
    plt.title(title)
    plt.axis("off")
    plt.show()


def cmd_info(args, codec: TGACodec) -> int:
    header = codec.read_header(args.file)
    print(f"Filename: {args.file}")
    for key, value in header.describe().items():
        print(f"{key}: {value}")
    return 0


def cmd_decode(args, codec: TGACodec) -> int:
    image = codec.load(args.input)
    PillowBridge.save_image(image, args.output)
    print(f"wrote {args.output} ({image.width}x{image.height}, {image.channels} channels)")
    if args.show:
        show_image(image, args.input)
    return 0


def cmd_encode(args, codec: TGACodec) -> int:
    image = PillowBridge.load_image(args.input, alpha=args.alpha)
    codec.save(image, args.output, args.type)
    print(f"wrote {args.output} as {args.type}")
    return 0


def cmd_flip(args, codec: TGACodec) -> int:
    if args.type:
        tga_type = TGAType.from_name(args.type)
    else:
        tga_type = codec.read_header(args.input).tga_type
    image = codec.load(args.input)
    if args.horizontal:
        flip_horizontally(image)
    if args.vertical:
        flip_vertically(image)
    codec.save(image, args.output, tga_type)
    print(f"wrote {args.output} as {tga_type.name.lower()}")
    return 0


def cmd_show(args, codec: TGACodec) -> int:
    image = codec.load(args.file)
    show_image(image, args.file)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TGA image encoder/decoder.")
    parser.add_argument("-v", "--verbose", action="store_true",
        help="Print codec log lines.")
    parser.add_argument("--expand-5bit", action="store_true",
        help="Fill low bits of 15/16-bit colors by bit replication when decoding.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("info", help="Print TGA header fields.")
    p.add_argument("file")
    p.set_defaults(func=cmd_info)

    p = sub.add_parser("decode", help="Convert a TGA file to any Pillow format.")
    p.add_argument("input")
    p.add_argument("output")
    p.add_argument("--show", action="store_true", help="Display the decoded image.")
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser("encode", help="Convert any Pillow-readable image to TGA.")
    p.add_argument("input")
    p.add_argument("output")
    p.add_argument("--type", choices=TYPE_CHOICES, default="rgb_rle")
    p.add_argument("--alpha", dest="alpha", action="store_true", default=None,
        help="Keep an alpha channel even if the source has none.")
    p.add_argument("--no-alpha", dest="alpha", action="store_false",
        help="Drop the alpha channel.")
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser("flip", help="Mirror a TGA image.")
    p.add_argument("input")
    p.add_argument("output")
    p.add_argument("--horizontal", action="store_true")
    p.add_argument("--vertical", action="store_true")
    p.add_argument("--type", choices=TYPE_CHOICES, default=None,
        help="Output variant (defaults to the input file's variant).")
    p.set_defaults(func=cmd_flip)

    p = sub.add_parser("show", help="Display a TGA image.")
    p.add_argument("file")
    p.set_defaults(func=cmd_show)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    codec = TGACodec(verbose=args.verbose, expand_5bit=args.expand_5bit)
    try:
        return args.func(args, codec)
    except (TGAError, OSError, ValueError) as err:
        sys.stderr.write(f"tga-tool: {err}\n")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
