import argparse
import sys
from pathlib import Path

import numpy as np
from loguru import logger
from PIL import Image

from asciicam.charsets import PRESET_NAMES
from asciicam.converter import commands_to_text
from asciicam.errors import ConfigurationError, SurfaceError
from asciicam.frame import Frame
from asciicam.options import ColorMode, DitherMode, EdgeMode, Options
from asciicam.pipeline import build_commands, emit
from asciicam.surface import ImageSurface


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image as a grid of text glyphs")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument("-o", "--output", default=None, help="Write a PNG here instead of printing text")
    parser.add_argument("--config", default=None, help="YAML file of options; flags below override it")
    parser.add_argument("-s", "--size", dest="ascii_width", type=int, default=None, help="Grid width in columns")
    parser.add_argument("-b", "--brightness", type=float, default=None, help="Brightness offset")
    parser.add_argument("-c", "--contrast", type=float, default=None, help="Contrast, -255 up to (not including) 259")
    parser.add_argument(
        "-d", "--dither", dest="dither_algo", choices=[m.value for m in DitherMode], default=None, help="Dither algorithm"
    )
    parser.add_argument("--invert", action="store_true", default=None, help="Invert brightness")
    parser.add_argument(
        "--keep-white", dest="ignore_white", action="store_false", default=None, help="Draw cells brighter than 250 too"
    )
    parser.add_argument("--charset", choices=PRESET_NAMES, default=None, help="Glyph ramp preset")
    parser.add_argument("--manual", dest="manual_char", default=None, help="Custom glyphs for --charset manual")
    parser.add_argument(
        "-m", "--colour-mode", dest="color_mode", choices=[m.value for m in ColorMode], default=None, help="Colour mode"
    )
    parser.add_argument(
        "-e", "--edges", dest="edge_method", choices=[m.value for m in EdgeMode], default=None, help="Edge detection"
    )
    parser.add_argument("--edge-threshold", type=float, default=None, help="Sobel magnitude threshold")
    parser.add_argument("-z", "--zoom", type=float, default=None, help="Glyph cell scale for PNG output")
    parser.add_argument("--primary-colour", dest="primary_color", default=None, help="Mono fill colour, e.g. '#0f0'")
    parser.add_argument("--font", default=None, help="TrueType font for PNG output (default: Pillow's built-in)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for noise dithering")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log debug output")
    return parser


OPTION_FLAGS = [
    "ascii_width",
    "brightness",
    "contrast",
    "dither_algo",
    "invert",
    "ignore_white",
    "charset",
    "manual_char",
    "color_mode",
    "edge_method",
    "edge_threshold",
    "zoom",
    "primary_color",
]


def main():
    args = _parser().parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    overrides = {name: getattr(args, name) for name in OPTION_FLAGS if getattr(args, name) is not None}
    if "dither_algo" in overrides:
        overrides["dithering"] = overrides["dither_algo"] != DitherMode.NONE.value

    try:
        options = Options.from_yaml(args.config, overrides) if args.config else Options.parse(overrides)
        frame = Frame.from_image(Image.open(image_path))
        render = build_commands(frame, options, rng=np.random.default_rng(args.seed))
    except ConfigurationError as exc:
        print(f"Invalid options: {exc}", file=sys.stderr)
        sys.exit(2)

    if args.output is None:
        coloured = options.color_mode is not ColorMode.MONO
        print(commands_to_text(render.commands, render.columns, render.rows, colour=coloured))
        return

    surface = ImageSurface(args.font)
    try:
        emit(render, surface)
        surface.save(args.output)
    except SurfaceError as exc:
        print(f"Rendering failed: {exc}", file=sys.stderr)
        sys.exit(1)
