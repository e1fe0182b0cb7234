from PIL import Image, ImageDraw

from imgii.font import GlyphFont
from imgii.options import ImgiiOptions
from imgii.parser import ColorToken

BACKGROUND_PIXEL = (0, 0, 0, 255)
TRANSPARENT_PIXEL = (0, 0, 0, 0)


def _new_cell(options: ImgiiOptions) -> Image.Image:
    fill = BACKGROUND_PIXEL if options.background else TRANSPARENT_PIXEL
    return Image.new("RGBA", options.cell_size, fill)


def render_glyph(token: ColorToken, font: GlyphFont, options: ImgiiOptions) -> Image.Image:
    """Draw one coloured character into a fresh RGBA cell.

    The glyph is drawn at the cell origin at full opacity; anything past the cell edge is clipped.
    """
    cell = _new_cell(options)
    draw = ImageDraw.Draw(cell)
    draw.text((0, 0), token.text, fill=(token.red, token.green, token.blue, 255), font=font.font)
    return cell


def render_blank(options: ImgiiOptions) -> Image.Image:
    """Cell used for whitespace: transparent, or solid black when a background is requested."""
    return _new_cell(options)
