"""Heuristics that keep emoji sequences from being reported.

Variation Selector-16 and the Zero Width Joiner are both part of everyday
emoji: VS16 asks for emoji presentation of the symbol before it, and ZWJ glues
emoji together into family, profession and flag sequences. Outside of those
contexts they are just as useful for hiding data as any other invisible
character, so each occurrence is judged by its neighbours.
"""

import unicodedata

import emoji

from hcdetect.categories import VS16, ZWJ

# Code points with the Emoji property that the emoji table only lists as part
# of a keycap sequence.
_KEYCAP_BASES = frozenset("#*0123456789")

# Regional indicators; the table only lists them as flag pairs.
_REGIONAL_INDICATORS = (0x1F1E6, 0x1F1FF)


def _is_high_surrogate(cp: int) -> bool:
    return 0xD800 <= cp <= 0xDBFF


def _is_low_surrogate(cp: int) -> bool:
    return 0xDC00 <= cp <= 0xDFFF


def scalar_at(text: str, pos: int) -> tuple[int, int]:
    """Return (code point, width in str positions) of the scalar at pos.

    A surrogate pair stored as two str positions is joined into one scalar.
    """
    cp = ord(text[pos])
    if _is_high_surrogate(cp) and pos + 1 < len(text):
        low = ord(text[pos + 1])
        if _is_low_surrogate(low):
            return 0x10000 + ((cp - 0xD800) << 10) + (low - 0xDC00), 2
    return cp, 1


def scalar_before(text: str, pos: int) -> tuple[int, int] | None:
    """Return (code point, start position) of the scalar ending at pos."""
    if pos <= 0:
        return None
    cp = ord(text[pos - 1])
    if _is_low_surrogate(cp) and pos >= 2:
        high = ord(text[pos - 2])
        if _is_high_surrogate(high):
            return 0x10000 + ((high - 0xD800) << 10) + (cp - 0xDC00), pos - 2
    return cp, pos - 1


def base_before(text: str, pos: int) -> int | None:
    """The scalar an emoji modifier at pos attaches to, skipping one VS16."""
    prev = scalar_before(text, pos)
    if prev is not None and prev[0] == VS16:
        prev = scalar_before(text, prev[1])
    return prev[0] if prev is not None else None


def is_control_or_separator(cp: int) -> bool:
    """True for general categories C* (incl. surrogates) and Z*."""
    return unicodedata.category(chr(cp))[0] in ("C", "Z")


def has_emoji_property(cp: int) -> bool:
    """Approximate the Emoji / Emoji_Modifier_Base properties."""
    ch = chr(cp)
    if ch in _KEYCAP_BASES:
        return True
    if _REGIONAL_INDICATORS[0] <= cp <= _REGIONAL_INDICATORS[1]:
        return True
    if _is_high_surrogate(cp) or _is_low_surrogate(cp):
        return False
    return emoji.is_emoji(ch) or emoji.is_emoji(ch + "\ufe0f")


def vs16_is_presentation(text: str, pos: int) -> bool:
    """VS16 after a visible symbol is a presentation request, not a payload."""
    base = base_before(text, pos)
    return base is not None and not is_control_or_separator(base)


def zwj_joins_emoji(text: str, pos: int, width: int) -> bool:
    """ZWJ between an emoji base and a visible symbol (or VS16)."""
    base = base_before(text, pos)
    if base is None or not has_emoji_property(base):
        return False
    after = pos + width
    if after >= len(text):
        return False
    nxt, _ = scalar_at(text, after)
    return nxt == VS16 or not is_control_or_separator(nxt)


def is_suppressed(text: str, pos: int, width: int, cp: int) -> bool:
    """Whether a single-character finding at pos should be dropped."""
    if cp == VS16:
        return vs16_is_presentation(text, pos)
    if cp == ZWJ:
        return zwj_joins_emoji(text, pos, width)
    return False
