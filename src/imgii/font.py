import io
import logging
import shutil
import subprocess
from pathlib import Path

from PIL import ImageFont

from imgii.errors import FontError

logger = logging.getLogger(__name__)


def _find_monospace_font() -> str | None:
    """Ask fontconfig for the system monospace font."""
    if shutil.which("fc-match") is None:
        return None
    result = subprocess.run(
        ["fc-match", "-f", "%{file}", "monospace"],
        capture_output=True,
        text=True,
    )
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return None


class GlyphFont:
    """A loaded font at a fixed pixel size.

    Read-only once constructed, so one instance is shared by every worker of a run.
    """

    def __init__(self, font: ImageFont.FreeTypeFont | ImageFont.ImageFont, size: int, name: str):
        self.font = font
        self.size = size
        self.name = name

    @classmethod
    def from_bytes(cls, data: bytes, size: int, name: str = "<bytes>") -> "GlyphFont":
        try:
            font = ImageFont.truetype(io.BytesIO(data), size)
        except OSError as err:
            raise FontError(name) from err
        return cls(font, size, name)

    @classmethod
    def from_path(cls, path: str | Path, size: int) -> "GlyphFont":
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as err:
            raise FontError(str(path)) from err
        return cls.from_bytes(data, size, name=str(path))

    @classmethod
    def default(cls, size: int) -> "GlyphFont":
        """Load the system monospace font, or Pillow's bundled font if there is none."""
        path = _find_monospace_font()
        if path is not None:
            try:
                return cls.from_path(path, size)
            except FontError:
                logger.warning("fontconfig returned unusable font %s, using built-in font", path)
        return cls(ImageFont.load_default(size), size, "<pillow default>")
