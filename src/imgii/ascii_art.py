from pathlib import Path

import numpy as np
from PIL import Image

from imgii.errors import AsciiRenderError
from imgii.options import DEFAULT_ASCII_WIDTH, AsciiOptions

RESET = "\033[0m"

# Rec. 709 luma weights
LUMA = np.array([0.2126, 0.7152, 0.0722])


def grid_size(image_size: tuple[int, int], options: AsciiOptions) -> tuple[int, int]:
    """Work out (columns, rows) of the character grid for an image."""
    img_w, img_h = image_size
    if img_w == 0 or img_h == 0:
        raise AsciiRenderError(f"cannot render an image of size {img_w}x{img_h}")

    width, height = options.width, options.height
    if width is None and height is None:
        width = DEFAULT_ASCII_WIDTH
    # Characters are about twice as tall as wide; halve the rows so output isn't stretched
    if height is None:
        height = max(1, round(width * img_h / img_w / 2))
    elif width is None:
        width = max(1, round(height * img_w / img_h * 2))
    return width, height


def _pick_chars(luminance: np.ndarray, options: AsciiOptions) -> np.ndarray:
    rows, cols = luminance.shape
    if options.char_override:
        override = np.array(options.char_override, dtype=object)
        return override[np.arange(rows * cols) % len(override)].reshape(rows, cols)

    charset = np.array(list(options.charset), dtype=object)
    levels = len(charset) - 1
    idx = np.clip(np.rint(luminance / 255.0 * levels).astype(int), 0, levels)
    if options.invert:
        idx = levels - idx
    return charset[idx]


def _format_colour(chars: np.ndarray, colours: np.ndarray) -> str:
    """Wrap every character in its own truecolour foreground escape."""
    out = []
    for r, row in enumerate(chars):
        parts = []
        for c, char in enumerate(row):
            red, green, blue = (int(v) for v in colours[r, c])
            parts.append(f"\033[38;2;{red};{green};{blue}m{char}")
        parts.append(RESET)
        out.append("".join(parts))
    return "\n".join(out)


def render_image_to_ascii(image: Image.Image | str | Path, options: AsciiOptions) -> str:
    """Convert an image to lines of truecolour ASCII art.

    Brightness (scaled by alpha, so transparent areas come out as the lightest character)
    selects the character, the resized pixel supplies its colour.
    """
    if not isinstance(image, Image.Image):
        image = Image.open(image)
    cols, rows = grid_size(image.size, options)

    image = image.convert("RGBA").resize((cols, rows), Image.LANCZOS)
    arr = np.asarray(image, dtype=np.float64)
    rgb = arr[:, :, :3]
    alpha = arr[:, :, 3] / 255.0

    luminance = (rgb @ LUMA) * alpha
    chars = _pick_chars(luminance, options)
    colours = np.clip(rgb, 0, 255).astype(np.uint8)
    return _format_colour(chars, colours)
