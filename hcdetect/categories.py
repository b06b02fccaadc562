"""Hidden-character category tables and the binary-pattern alphabet."""

import unicodedata
from enum import Enum


class Category(Enum):
    ZERO_WIDTH = "Zero-Width"
    BIDI_CONTROL = "Bidirectional Control"
    DEPRECATED_TAG = "Deprecated Tag"
    VARIATION_SELECTOR = "Variation Selector"
    BINARY_ENCODING_PATTERN = "BinaryEncodingPattern"


MESSAGES: dict[Category, str] = {
    Category.ZERO_WIDTH:
        "Zero-width character; invisible but can affect text processing.",
    Category.BIDI_CONTROL:
        "Bidirectional control character; can alter text display order, "
        "potentially obfuscating logic.",
    Category.DEPRECATED_TAG:
        "Deprecated Unicode tag character; may be used for obfuscation.",
    Category.VARIATION_SELECTOR:
        "Variation selector; while sometimes legitimate, can be used in "
        "confusable character sequences.",
}


# ---------------------------------------------------------------------------
# Zero-width characters
# ---------------------------------------------------------------------------

ZERO_WIDTH_CHARS: dict[int, str] = {
    0x200B: "Zero Width Space",
    0x200C: "Zero Width Non-Joiner",
    0x200D: "Zero Width Joiner",
    0xFEFF: "Zero Width No-Break Space (BOM)",
    0x2028: "Line Separator",
    0x2029: "Paragraph Separator",
    0x180E: "Mongolian Vowel Separator",
}


# ---------------------------------------------------------------------------
# Bidirectional controls (Trojan Source)
# ---------------------------------------------------------------------------

BIDI_CODEPOINTS: dict[int, str] = {
    0x202A: "Left-to-Right Embedding",
    0x202B: "Right-to-Left Embedding",
    0x202C: "Pop Directional Formatting",
    0x202D: "Left-to-Right Override",
    0x202E: "Right-to-Left Override",
    0x2066: "Left-to-Right Isolate",
    0x2067: "Right-to-Left Isolate",
    0x2068: "First Strong Isolate",
    0x2069: "Pop Directional Isolate",
}


# ---------------------------------------------------------------------------
# Ranges: deprecated tags and variation selectors
# ---------------------------------------------------------------------------

# Inclusive (first, last) bounds.
TAG_RANGE = (0xE0000, 0xE007F)

VARIATION_SELECTOR_RANGES = (
    (0xFE00, 0xFE0F),     # VS1-VS16
    (0xE0100, 0xE01EF),   # VS17-VS256
)

VS16 = 0xFE0F
ZWJ = 0x200D


# ---------------------------------------------------------------------------
# Binary encoding alphabet
# ---------------------------------------------------------------------------

BINARY_PATTERN_CHARS: dict[int, str] = {
    0x200B: "Zero Width Space",
    0x200C: "Zero Width Non-Joiner",
    0x200D: "Zero Width Joiner",
    0xFEFF: "Zero Width No-Break Space (BOM)",
    0x2062: "Invisible Times",
    0x2064: "Invisible Plus",
}

# Runs shorter than this are reported character by character.
MIN_PATTERN_LENGTH = 8


def pattern_message(length: int) -> str:
    return (
        f"Potential binary encoding detected using a sequence of "
        f"{length} zero-width characters."
    )


def lookup(code_point: int) -> tuple[Category, str] | None:
    """Classify a single code point, or return None if it is not hidden."""
    if code_point in ZERO_WIDTH_CHARS:
        category = Category.ZERO_WIDTH
    elif code_point in BIDI_CODEPOINTS:
        category = Category.BIDI_CONTROL
    elif TAG_RANGE[0] <= code_point <= TAG_RANGE[1]:
        category = Category.DEPRECATED_TAG
    elif any(lo <= code_point <= hi for lo, hi in VARIATION_SELECTOR_RANGES):
        category = Category.VARIATION_SELECTOR
    else:
        return None
    return category, MESSAGES[category]


def char_name(code_point: int) -> str:
    """Human-readable name for a code point."""
    for table in (ZERO_WIDTH_CHARS, BIDI_CODEPOINTS, BINARY_PATTERN_CHARS):
        if code_point in table:
            return table[code_point]
    if VARIATION_SELECTOR_RANGES[0][0] <= code_point <= VARIATION_SELECTOR_RANGES[0][1]:
        return f"Variation Selector-{code_point - 0xFE00 + 1}"
    if VARIATION_SELECTOR_RANGES[1][0] <= code_point <= VARIATION_SELECTOR_RANGES[1][1]:
        return f"Variation Selector-{code_point - 0xE0100 + 17}"
    try:
        return unicodedata.name(chr(code_point)).title()
    except ValueError:
        return f"U+{code_point:04X}"


def format_code_point(code_point: int) -> str:
    return f"U+{code_point:04X}"
