"""Drivers tying the ASCII renderer, grid renderer and stitcher together.

Single images fail as a whole. Batches and animations isolate failures to one file or one
frame, log them and carry on, reporting totals at the end.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from imgii.ascii_art import render_image_to_ascii
from imgii.codec import FrameMetadata, open_image, read_gif_frames, save_image, write_gif
from imgii.errors import AsciiRenderError, EmptyInputError, ImgiiError
from imgii.font import GlyphFont
from imgii.grid import GlyphCache, render_grid
from imgii.options import AsciiOptions, ImgiiOptions
from imgii.parser import AnsiParser
from imgii.stitcher import stitch

logger = logging.getLogger(__name__)

AsciiRenderer = Callable[[Image.Image, AsciiOptions], str]


@dataclass
class BatchReport:
    succeeded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


@dataclass
class AsciiFrame:
    ascii_text: str
    metadata: FrameMetadata


@dataclass
class RenderedFrame:
    canvas: Image.Image
    metadata: FrameMetadata


def to_ascii(image: Image.Image, options: AsciiOptions, renderer: AsciiRenderer = render_image_to_ascii) -> str:
    """Run the ASCII renderer, wrapping anything it raises as an :class:`AsciiRenderError`."""
    try:
        return renderer(image, options)
    except ImgiiError:
        raise
    except Exception as err:
        raise AsciiRenderError(f"ASCII conversion failed ({err})") from err


def render_ascii_image(
    ascii_text: str,
    font: GlyphFont,
    options: ImgiiOptions,
    cache: GlyphCache | None = None,
    parser: AnsiParser | None = None,
    workers: int | None = 1,
) -> Image.Image:
    grid = render_grid(ascii_text, font, options, cache=cache, parser=parser, workers=workers)
    return stitch(grid)


def convert_image(
    input_path: str | Path,
    output_path: str | Path,
    font: GlyphFont,
    options: ImgiiOptions,
    workers: int | None = None,
) -> None:
    """Convert one still image. The output file is only written once everything has rendered."""
    image = open_image(input_path)
    ascii_text = to_ascii(image, options.ascii_options)
    canvas = render_ascii_image(ascii_text, font, options, workers=workers)
    save_image(canvas, output_path)
    logger.info("saved %s (%dx%d)", output_path, canvas.width, canvas.height)


def convert_batch(
    input_template: str,
    output_template: str,
    final_index: int,
    font: GlyphFont,
    options: ImgiiOptions,
    workers: int | None = None,
) -> BatchReport:
    """Convert each numbered input to its numbered output, substituting ``%d`` with 1..final_index.

    A file that fails is logged and counted; the rest still run.
    """

    def convert_one(index: int) -> bool:
        input_path = input_template.replace("%d", str(index))
        output_path = output_template.replace("%d", str(index))
        try:
            convert_image(input_path, output_path, font, options, workers=1)
        except ImgiiError as err:
            logger.warning("failed to convert %s: %s", input_path, err)
            return False
        return True

    report = BatchReport()
    with ThreadPoolExecutor(max_workers=workers) as executor:
        for ok in executor.map(convert_one, range(1, final_index + 1)):
            if ok:
                report.succeeded += 1
            else:
                report.failed += 1
    return report


def render_frames(
    decoded: Iterable[tuple[Image.Image, FrameMetadata]],
    font: GlyphFont,
    options: ImgiiOptions,
    ascii_renderer: AsciiRenderer = render_image_to_ascii,
    workers: int | None = None,
) -> tuple[list[RenderedFrame], int]:
    """Render every decoded frame, dropping the ones that fail.

    Each frame's metadata travels with it through both stages, and results are collected in
    submission order, so surviving frames keep their place and timing whatever order the
    workers finish in. One glyph cache is shared by all frames.

    Returns the surviving frames and the number dropped.
    """
    decoded = list(decoded)
    cache = GlyphCache(font, options)
    parser = AnsiParser()

    def frame_to_ascii(item: tuple[Image.Image, FrameMetadata]) -> AsciiFrame | None:
        image, metadata = item
        try:
            return AsciiFrame(to_ascii(image, options.ascii_options, ascii_renderer), metadata)
        except ImgiiError as err:
            logger.warning("dropping frame (%s): %s", metadata, err)
            return None

    def ascii_to_canvas(frame: AsciiFrame) -> RenderedFrame | None:
        try:
            canvas = render_ascii_image(frame.ascii_text, font, options, cache=cache, parser=parser)
        except ImgiiError as err:
            logger.warning("dropping frame (%s): %s", frame.metadata, err)
            return None
        return RenderedFrame(canvas, frame.metadata)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        ascii_frames = [frame for frame in executor.map(frame_to_ascii, decoded) if frame is not None]
        rendered = [frame for frame in executor.map(ascii_to_canvas, ascii_frames) if frame is not None]

    dropped = len(decoded) - len(rendered)
    logger.debug("glyph cache holds %d cells (%d hits, %d misses)", len(cache), cache.hits, cache.misses)
    return rendered, dropped


def convert_gif(
    input_path: str | Path,
    output_path: str | Path,
    font: GlyphFont,
    options: ImgiiOptions,
    workers: int | None = None,
) -> BatchReport:
    """Convert an animated image frame by frame, tolerating individual frame failures."""
    decoded = read_gif_frames(input_path)
    rendered, dropped = render_frames(decoded, font, options, workers=workers)
    if not rendered:
        raise EmptyInputError("frames")
    write_gif(output_path, [(frame.canvas, frame.metadata) for frame in rendered])
    logger.info("saved %s with %d frames", output_path, len(rendered))
    return BatchReport(succeeded=len(rendered), failed=dropped)
