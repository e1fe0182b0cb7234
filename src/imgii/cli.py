import argparse
import logging
import os
import sys
import time
from pathlib import Path

from imgii.charsets import CHARSETS, charset_by_name
from imgii.errors import ImgiiError, OptionsError
from imgii.font import GlyphFont
from imgii.options import ImgiiOptions, ImgiiOptionsBuilder
from imgii.pipeline import convert_batch, convert_gif, convert_image


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image as coloured ASCII art, saved as an image")
    parser.add_argument("input", help="Path to input image, or a %%d template together with FINAL_IMAGE_INDEX")
    parser.add_argument("output", help="Path to output .png or .gif, or a %%d template in batch mode")
    parser.add_argument(
        "final_image_index",
        nargs="?",
        type=int,
        default=None,
        help="Convert inputs numbered 1..FINAL_IMAGE_INDEX (PNG output only)",
    )
    parser.add_argument("-w", "--width", type=int, default=None, help="Output width in characters (default: 128)")
    parser.add_argument(
        "-H", "--height", type=int, default=None, help="Output height in characters (default: keep aspect ratio)"
    )
    parser.add_argument(
        "-f", "--font-size", type=int, default=16, help="Font size in pixels (default: 16). Larger sizes are slower."
    )
    parser.add_argument("-i", "--invert", action="store_true", default=False, help="Invert character weights")
    parser.add_argument("-b", "--background", action="store_true", default=False, help="Draw a black background")
    parser.add_argument(
        "-C", "--charset", default="minimal", choices=sorted(CHARSETS), help="Charset to use (default: minimal)"
    )
    parser.add_argument("-c", "--chars", default=None, help="Repeat these characters instead of using a charset")
    parser.add_argument("--font", default=None, help="Path to a TrueType font (default: system monospace)")
    parser.add_argument("-j", "--jobs", type=int, default=os.cpu_count(), help="Worker threads (default: CPU count)")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log progress and cache stats")
    return parser


def build_options(args: argparse.Namespace) -> ImgiiOptions:
    builder = (
        ImgiiOptionsBuilder()
        .font_size(args.font_size)
        .background(args.background)
        .width(args.width)
        .height(args.height)
        .invert(args.invert)
        .charset(charset_by_name(args.charset))
    )
    if args.chars:
        builder.char_override(list(args.chars))
    return builder.build()


def run(args: argparse.Namespace) -> int:
    suffix = Path(args.output).suffix.lower()
    if suffix not in (".png", ".gif"):
        raise OptionsError(f"output must end in .png or .gif, got {args.output}")
    if suffix == ".gif" and args.final_image_index is not None:
        raise OptionsError("batch conversion is only supported for PNG output")
    if args.jobs is not None and args.jobs < 1:
        raise OptionsError(f"jobs must be at least 1, got {args.jobs}")

    options = build_options(args)
    if args.font:
        font = GlyphFont.from_path(args.font, options.font_size)
    else:
        font = GlyphFont.default(options.font_size)

    if suffix == ".gif":
        report = convert_gif(args.input, args.output, font, options, workers=args.jobs)
        print(f"Saved GIF {args.output}: {report.succeeded} frame(s) rendered, {report.failed} dropped")
        return 0
    if args.final_image_index is not None:
        report = convert_batch(args.input, args.output, args.final_image_index, font, options, workers=args.jobs)
        print(f"{report.succeeded} of {report.total} image(s) converted")
        return 1 if report.failed else 0

    convert_image(args.input, args.output, font, options, workers=args.jobs)
    print(f"Saved PNG {args.output}")
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    started = time.perf_counter()
    try:
        status = run(args)
    except ImgiiError as err:
        print(f"imgii: {err}", file=sys.stderr)
        sys.exit(1)
    print(f"Time elapsed: {time.perf_counter() - started:.3f} seconds", file=sys.stderr)
    sys.exit(status)
