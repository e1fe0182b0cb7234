import numpy as np
import pytest

from imgii.font import GlyphFont
from imgii.options import ImgiiOptionsBuilder


def coloured(text_rows):
    """Build ANSI text from rows of (char, (r, g, b)) pairs."""
    return "\n".join(
        "".join(f"\x1b[38;2;{r};{g};{b}m{char}" for char, (r, g, b) in row) + "\x1b[0m" for row in text_rows
    )


def pixels(image):
    return np.asarray(image.convert("RGBA"))


@pytest.fixture(scope="session")
def font():
    return GlyphFont.default(16)


@pytest.fixture
def options():
    return ImgiiOptionsBuilder().font_size(16).build()


@pytest.fixture
def background_options():
    return ImgiiOptionsBuilder().font_size(16).background(True).build()
