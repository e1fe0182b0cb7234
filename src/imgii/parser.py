import re
from dataclasses import dataclass

from imgii.errors import PatternError, ValueParseError

# ESC[38;2;<R>;<G>;<B>m followed by exactly one character. Channels are matched loosely so that
# malformed values are reported rather than silently skipped.
COLOUR_ESCAPE_PATTERN = "\x1b" + r"\[38;2;([^;m\x1b]*);([^;m\x1b]*);([^;m\x1b]*)m(.)"

CHANNEL_NAMES = ("red", "green", "blue")


@dataclass(frozen=True)
class ColorToken:
    """One character and the colour it is drawn in. Hashable, so it doubles as a cache key."""

    red: int
    green: int
    blue: int
    text: str

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


def _parse_channel(name: str, value: str) -> int:
    try:
        if not (value.isascii() and value.isdigit()):
            raise ValueError(f"invalid literal for an unsigned integer: {value!r}")
        number = int(value)
        if number > 255:
            raise ValueError(f"{number} is out of range for an 8-bit channel")
    except ValueError as err:
        raise ValueParseError(name, value, str(err)) from err
    return number


def split_lines(text: str) -> list[str]:
    """Split on newlines only, dropping one trailing carriage return per line.

    Other line-break characters are ordinary cell characters, so ``str.splitlines`` is not used.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class AnsiParser:
    """Splits lines of truecolour ANSI text into :class:`ColorToken` values.

    Every escape span yields exactly one token; runs of the same colour are not merged. Text
    outside of escape spans (resets, stray characters) is ignored.
    """

    def __init__(self, pattern: str = COLOUR_ESCAPE_PATTERN):
        try:
            self.regex = re.compile(pattern)
        except re.error as err:
            raise PatternError(pattern) from err
        if self.regex.groups != 4:
            raise PatternError(pattern)

    def parse_line(self, line: str) -> list[ColorToken]:
        tokens = []
        for match in self.regex.finditer(line):
            red, green, blue = (_parse_channel(name, match.group(i + 1)) for i, name in enumerate(CHANNEL_NAMES))
            tokens.append(ColorToken(red, green, blue, match.group(4)))
        return tokens
