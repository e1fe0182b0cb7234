from __future__ import annotations

from dataclasses import dataclass, field, replace

from imgii.charsets import MINIMAL
from imgii.errors import OptionsError

DEFAULT_FONT_SIZE = 16
DEFAULT_ASCII_WIDTH = 128


def cell_dimensions(font_size: int) -> tuple[int, int]:
    """Return (width, height) in pixels of one character cell.

    Assumes a monospace font whose glyphs are about half as wide as they are tall.
    """
    return font_size // 2, font_size


@dataclass(frozen=True)
class AsciiOptions:
    """Options handed to the ASCII-art renderer."""

    width: int | None = None
    height: int | None = None
    charset: str = MINIMAL
    invert: bool = False
    char_override: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ImgiiOptions:
    font_size: int = DEFAULT_FONT_SIZE
    background: bool = False
    ascii_options: AsciiOptions = field(default_factory=AsciiOptions)

    @property
    def cell_size(self) -> tuple[int, int]:
        return cell_dimensions(self.font_size)


class ImgiiOptionsBuilder:
    """Chained construction of an immutable :class:`ImgiiOptions`.

    >>> options = ImgiiOptionsBuilder().font_size(24).background(True).width(80).build()
    """

    def __init__(self):
        self._font_size = DEFAULT_FONT_SIZE
        self._background = False
        self._ascii = AsciiOptions()

    def font_size(self, font_size: int) -> ImgiiOptionsBuilder:
        self._font_size = font_size
        return self

    def background(self, background: bool) -> ImgiiOptionsBuilder:
        self._background = background
        return self

    def width(self, width: int | None) -> ImgiiOptionsBuilder:
        self._ascii = replace(self._ascii, width=width)
        return self

    def height(self, height: int | None) -> ImgiiOptionsBuilder:
        self._ascii = replace(self._ascii, height=height)
        return self

    def invert(self, invert: bool) -> ImgiiOptionsBuilder:
        self._ascii = replace(self._ascii, invert=invert)
        return self

    def charset(self, charset: str) -> ImgiiOptionsBuilder:
        self._ascii = replace(self._ascii, charset=charset)
        return self

    def char_override(self, chars) -> ImgiiOptionsBuilder:
        """Repeat ``chars`` across the output instead of picking from the charset."""
        self._ascii = replace(self._ascii, char_override=tuple(chars) if chars is not None else None)
        return self

    def build(self) -> ImgiiOptions:
        if self._font_size < 2:
            raise OptionsError(f"font size must be at least 2, got {self._font_size}")
        for name in ("width", "height"):
            value = getattr(self._ascii, name)
            if value is not None and value <= 0:
                raise OptionsError(f"{name} must be positive, got {value}")
        if not self._ascii.charset:
            raise OptionsError("charset must not be empty")
        override = self._ascii.char_override
        if override is not None and (not override or not all(override)):
            raise OptionsError("character override must contain at least one non-empty string")
        return ImgiiOptions(font_size=self._font_size, background=self._background, ascii_options=self._ascii)
