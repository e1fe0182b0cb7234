import pytest

from imgii.errors import ErrorKind, PatternError, ValueParseError
from imgii.parser import AnsiParser, ColorToken, split_lines


def test_single_span():
    tokens = AnsiParser().parse_line("\x1b[38;2;255;0;10mA")
    assert tokens == [ColorToken(255, 0, 10, "A")]


def test_spans_in_order():
    line = "\x1b[38;2;1;2;3mx\x1b[38;2;4;5;6my\x1b[38;2;7;8;9mz\x1b[0m"
    tokens = AnsiParser().parse_line(line)
    assert [t.text for t in tokens] == ["x", "y", "z"]
    assert (tokens[2].red, tokens[2].green, tokens[2].blue) == (7, 8, 9)


def test_same_colour_runs_are_not_merged():
    line = "\x1b[38;2;9;9;9mA\x1b[38;2;9;9;9mA"
    tokens = AnsiParser().parse_line(line)
    assert len(tokens) == 2
    assert tokens[0] == tokens[1]


def test_only_one_character_per_span():
    # trailing text after the first character of a span is not part of any token
    tokens = AnsiParser().parse_line("\x1b[38;2;0;0;0mabc")
    assert tokens == [ColorToken(0, 0, 0, "a")]


def test_line_without_escapes():
    assert AnsiParser().parse_line("plain text") == []
    assert AnsiParser().parse_line("") == []


def test_channel_overflow_rejected():
    with pytest.raises(ValueParseError) as info:
        AnsiParser().parse_line("\x1b[38;2;10;256;0mA")
    assert info.value.channel == "green"
    assert info.value.text == "256"
    assert info.value.kind is ErrorKind.PARSE
    assert isinstance(info.value.cause, ValueError)


@pytest.mark.parametrize("value", ["1a", "-1", "", "+5", " 3"])
def test_non_digit_channel_rejected(value):
    with pytest.raises(ValueParseError) as info:
        AnsiParser().parse_line(f"\x1b[38;2;0;0;{value}mA")
    assert info.value.channel == "blue"
    assert isinstance(info.value.cause, ValueError)


def test_bad_span_fails_whole_line():
    parser = AnsiParser()
    with pytest.raises(ValueParseError):
        parser.parse_line("\x1b[38;2;1;1;1mA\x1b[38;2;999;0;0mB")


def test_invalid_pattern():
    with pytest.raises(PatternError) as info:
        AnsiParser("([0-9")
    assert info.value.kind is ErrorKind.PARSE
    assert info.value.cause is not None


def test_pattern_must_capture_four_groups():
    with pytest.raises(PatternError):
        AnsiParser(r"(\d+)")


def test_blank_tokens():
    assert ColorToken(0, 0, 0, " ").is_blank
    assert ColorToken(0, 0, 0, "\t").is_blank
    assert not ColorToken(0, 0, 0, ".").is_blank


def test_tokens_are_hashable_by_value():
    assert len({ColorToken(1, 2, 3, "a"), ColorToken(1, 2, 3, "a"), ColorToken(1, 2, 4, "a")}) == 2


def test_split_lines_only_breaks_on_newline():
    assert split_lines("a\x0cb c\nd\r\ne\n") == ["a\x0cb c", "d", "e"]
    assert split_lines("") == []
