"""
Emoji handling for ad text.

Pillow draws with a single font face, so emoji the active face cannot render
come out as empty boxes. Each style picks one of two policies:

- substitute: known emoji become short uppercase tokens (🔥 -> HOT)
- strip: every code point in the symbol/emoji blocks is removed
"""

import re
from enum import Enum


class EmojiPolicy(str, Enum):
    SUBSTITUTE = "substitute"
    STRIP = "strip"


EMOJI_TOKENS = {
    "\U0001F525": "HOT",        # fire
    "\U0001F48E": "PREMIUM",    # gem
    "\U0001F969": "FRESH",      # cut of meat
    "\u26A1": "FAST",           # high voltage
    "\u2B50": "TOP",            # star
    "\U0001F31F": "TOP",        # glowing star
    "\u2728": "NEW",            # sparkles
    "\U0001F389": "PARTY",      # party popper
    "\U0001F381": "GIFT",       # gift
    "\U0001F4B0": "SAVE",       # money bag
    "\U0001F4B8": "DEAL",       # money with wings
    "\U0001F6D2": "SHOP",       # shopping cart
    "\U0001F6CD": "SHOP",       # shopping bags
    "\U0001F3F7": "SALE",       # label
    "\U0001F4AF": "100%",       # hundred points
    "\U0001F680": "LAUNCH",     # rocket
    "\U0001F3C6": "BEST",       # trophy
    "\U0001F451": "VIP",        # crown
    "\u2764": "LOVE",           # red heart
    "\U0001F44D": "OK",         # thumbs up
    "\u2705": "YES",            # check mark button
    "\U0001F195": "NEW",        # NEW button
    "\U0001F193": "FREE",       # FREE button
    "\u23F0": "NOW",            # alarm clock
    "\U0001F6A8": "ALERT",      # police light
    "\U0001F4E3": "NEWS",       # megaphone
}

# Inclusive code point ranges removed by the strip policy.
STRIP_RANGES = (
    (0x200D, 0x200D),      # zero width joiner
    (0x2011, 0x26FF),      # punctuation, letterlike, arrows, misc symbols
    (0x2700, 0x27BF),      # dingbats
    (0xE000, 0xF8FF),      # private use area
    (0xFE00, 0xFE0F),      # variation selectors
    (0x1F000, 0x10FFFF),   # every astral emoji/pictograph block
)

_WHITESPACE_RE = re.compile(r"\s+")


def _ranges_pattern(ranges) -> re.Pattern:
    parts = []
    for start, end in ranges:
        if start == end:
            parts.append(re.escape(chr(start)))
        else:
            parts.append(f"{re.escape(chr(start))}-{re.escape(chr(end))}")
    return re.compile(f"[{''.join(parts)}]")


_STRIP_RE = _ranges_pattern(STRIP_RANGES)
_TOKEN_RE = re.compile(
    "(" + "|".join(re.escape(e) for e in sorted(EMOJI_TOKENS, key=len, reverse=True)) + ")\ufe0f?"
)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def substitute_emoji(text: str) -> str:
    """Replace mapped emoji with their tokens; unmapped emoji stay as they are."""
    replaced = _TOKEN_RE.sub(lambda m: f" {EMOJI_TOKENS[m.group(1)]} ", text)
    return collapse_whitespace(replaced)


def strip_emoji(text: str) -> str:
    return collapse_whitespace(_STRIP_RE.sub("", text))


def sanitize(text: str, policy: EmojiPolicy = EmojiPolicy.SUBSTITUTE) -> str:
    if policy == EmojiPolicy.STRIP:
        return strip_emoji(text)
    return substitute_emoji(text)


class EmojiSanitizer:
    """Applies one emoji policy to every string of an ad."""

    def __init__(self, policy: EmojiPolicy = EmojiPolicy.SUBSTITUTE):
        self.policy = EmojiPolicy(policy)

    def sanitize(self, text: str) -> str:
        return sanitize(text, self.policy)
