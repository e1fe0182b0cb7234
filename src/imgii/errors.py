from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    SETUP = "setup"
    PARSE = "parse"
    STRUCTURAL = "structural"
    RENDER = "render"
    CODEC = "codec"


class ImgiiError(Exception):
    """Base error for every failure raised by imgii.

    ``kind`` tells callers whether a failure is isolated to one unit (a frame or a batch file)
    or should abort the whole run. The underlying exception, if any, is chained as the cause.
    """

    kind = ErrorKind.SETUP

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class FontError(ImgiiError):
    kind = ErrorKind.SETUP

    def __init__(self, font_name: str):
        super().__init__(f"could not read font {font_name}")
        self.font_name = font_name


class OptionsError(ImgiiError):
    kind = ErrorKind.SETUP


class PatternError(ImgiiError):
    kind = ErrorKind.PARSE

    def __init__(self, pattern: str):
        super().__init__(f"invalid colour escape pattern {pattern!r}")
        self.pattern = pattern


class ValueParseError(ImgiiError):
    kind = ErrorKind.PARSE

    def __init__(self, channel: str, text: str, reason: str):
        super().__init__(f"could not parse {channel} value from {text!r} ({reason})")
        self.channel = channel
        self.text = text


class WidthMismatchError(ImgiiError):
    kind = ErrorKind.STRUCTURAL

    def __init__(self, row: int, expected: int, actual: int):
        super().__init__(f"row {row} has width {actual}, expected {expected}")
        self.row = row
        self.expected = expected
        self.actual = actual


class EmptyInputError(ImgiiError):
    kind = ErrorKind.STRUCTURAL

    def __init__(self, parameter: str):
        super().__init__(f"nothing to render: {parameter} is empty")
        self.parameter = parameter


class CellSizeError(ImgiiError):
    kind = ErrorKind.STRUCTURAL


class AsciiRenderError(ImgiiError):
    kind = ErrorKind.RENDER


class CodecError(ImgiiError):
    kind = ErrorKind.CODEC

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
