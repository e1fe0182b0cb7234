from imgii.errors import OptionsError

# Every charset runs from transparent to opaque.

# Block elements: empty, light/medium/dark shade, full block
BLOCK = " ░▒▓█"

DEFAULT = " .,:;+*?%S#@"

RUSSIAN = " ьгтсоэжшщфыЖШЩФЫ"

# Fine-grained ramp, useful for large outputs
SLIGHT = " .`-_':,;^=+/\"|)\\<>)iv%xclrs{*}I?!][1taeo7zjLunT#JCwfy325Fp6mqSghVd4EgXPGZbYkOA&8U$@KHDBWNMR0Q"

MINIMAL = " .:-=+*#%@"

CHARSETS = {
    "block": BLOCK,
    "default": DEFAULT,
    "russian": RUSSIAN,
    "slight": SLIGHT,
    "minimal": MINIMAL,
}


def charset_by_name(name: str) -> str:
    try:
        return CHARSETS[name.lower()]
    except KeyError:
        raise OptionsError(f"unknown charset {name!r}, expected one of {', '.join(sorted(CHARSETS))}") from None
