"""
Shorthand durations: "1d2h30m" <-> seconds.

Grammar (left to right, single pass):
    token   := [digits] [scale] unit
    scale   := D | H | K | M | G | T      (10, 10^2, 10^3, 10^6, 10^9, 10^12)
    unit    := s | m | h | d | w | y
A trailing run of digits with no unit counts as seconds.
"""

from datetime import datetime

# Largest first: format_duration walks this order
UNITS = {
    "y": 31557600,
    "w": 604800,
    "d": 86400,
    "h": 3600,
    "m": 60,
    "s": 1,
}

SCALES = {
    "D": 10,
    "H": 10**2,
    "K": 10**3,
    "M": 10**6,
    "G": 10**9,
    "T": 10**12,
}

_DIGITS = frozenset("0123456789")


class DurationParseError(ValueError):
    """A character in a shorthand duration could not be parsed."""

    def __init__(self, text: str, char: str, index: int):
        self.text = text
        self.char = char
        self.index = index
        if char:
            msg = f"Invalid duration {text!r}: unexpected {char!r} at index {index}"
        else:
            msg = f"Invalid duration {text!r}: expected unit at index {index}"
        super().__init__(msg)


def parse_duration(text: str) -> int:
    """Parse a shorthand duration into a number of seconds.

    >>> parse_duration("18h12m16s")
    65536
    >>> parse_duration("3Kh")
    10800000

    Raises:
        DurationParseError: with the offending character and its index
    """
    total = 0
    digits = ""
    scale = None
    for index, char in enumerate(text):
        if char in _DIGITS and scale is None:
            digits += char
        elif char in SCALES and scale is None:
            scale = SCALES[char]
        elif char in UNITS:
            count = int(digits) if digits else 1
            total += count * (scale or 1) * UNITS[char]
            digits = ""
            scale = None
        else:
            raise DurationParseError(text, char, index)

    if scale is not None:
        # Scale letter needs a unit after it
        raise DurationParseError(text, "", len(text))
    if digits:
        total += int(digits)
    return total


def format_duration(seconds: int) -> str:
    """Render seconds as canonical shorthand, largest unit first.

    Zero renders as the empty string. Scale letters are never produced.
    """
    if seconds < 0:
        raise ValueError(f"Duration must be non-negative: {seconds}")
    parts = []
    remaining = seconds
    for letter, size in UNITS.items():
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count}{letter}")
    return "".join(parts)


def shift_time(base: int, seconds: int, mode: str, date_format: str) -> str:
    """Render base +/- seconds as a local-time date string.

    mode is "after" (base + seconds) or "before" (base - seconds).
    """
    if mode == "after":
        target = base + seconds
    elif mode == "before":
        target = base - seconds
    else:
        raise ValueError(f"Unknown mode {mode!r}: use 'after' or 'before'")
    return datetime.fromtimestamp(target).strftime(date_format)
