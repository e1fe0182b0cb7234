from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageSequence, UnidentifiedImageError

from imgii.errors import CodecError, EmptyInputError

logger = logging.getLogger(__name__)

DEFAULT_FRAME_DELAY = 100  # ms, used when a frame carries no duration


@dataclass(frozen=True)
class FrameMetadata:
    """Placement (pixels, relative to the shared canvas) and display time of one frame."""

    left: int
    top: int
    delay: int  # milliseconds


def open_image(path: str | Path) -> Image.Image:
    try:
        with Image.open(path) as image:
            image.load()
            return image.copy()
    except (OSError, ValueError, UnidentifiedImageError, Image.DecompressionBombError) as err:
        raise CodecError(str(path), f"could not read image ({err})") from err


def save_image(image: Image.Image, path: str | Path) -> None:
    try:
        image.save(path)
    except (OSError, ValueError) as err:
        raise CodecError(str(path), f"could not write image ({err})") from err


def read_gif_frames(path: str | Path) -> list[tuple[Image.Image, FrameMetadata]]:
    """Decode every frame of an animated image along with its metadata.

    Pillow hands back each frame already composited onto the full logical screen, so the
    offsets recorded here are always (0, 0).
    """
    frames = []
    try:
        with Image.open(path) as image:
            for frame in ImageSequence.Iterator(image):
                delay = frame.info.get("duration", DEFAULT_FRAME_DELAY)
                frames.append((frame.convert("RGBA"), FrameMetadata(0, 0, int(delay))))
    except (OSError, ValueError, EOFError, UnidentifiedImageError, Image.DecompressionBombError) as err:
        raise CodecError(str(path), f"could not decode animation ({err})") from err
    logger.debug("decoded %d frames from %s", len(frames), path)
    return frames


def write_gif(path: str | Path, frames: list[tuple[Image.Image, FrameMetadata]]) -> None:
    """Encode frames as an endlessly looping GIF.

    Each frame is placed at its metadata offset on a transparent canvas big enough for all of
    them, and shown for its metadata delay.
    """
    if not frames:
        raise EmptyInputError("frames")

    width = max(meta.left + image.width for image, meta in frames)
    height = max(meta.top + image.height for image, meta in frames)

    placed = []
    for image, meta in frames:
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        canvas.paste(image, (meta.left, meta.top))
        placed.append(canvas)

    try:
        placed[0].save(
            path,
            format="GIF",
            save_all=True,
            append_images=placed[1:],
            duration=[meta.delay for _, meta in frames],
            loop=0,
            disposal=2,
        )
    except (OSError, ValueError) as err:
        raise CodecError(str(path), f"could not encode animation ({err})") from err
