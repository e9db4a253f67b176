"""
Text length helpers.

Review limits count UTF-16 code units, the unit client text fields use.
Characters outside the Basic Multilingual Plane (most emoji) count as two.
"""

_BMP_MAX = 0xFFFF


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def truncate_utf16(text: str, max_units: int) -> str:
    """
    Cut text to at most max_units UTF-16 code units.

    A character that would be split across the limit is dropped whole,
    so the result is always a valid string.
    """
    units = 0
    for index, char in enumerate(text):
        units += 2 if ord(char) > _BMP_MAX else 1
        if units > max_units:
            return text[:index]
    return text


# Design Rationale and Trade-offs:
#
# 1. Why encode to UTF-16 to measure length?
#    - Counts surrogate pairs exactly as UTF-16 clients do
#    - surrogatepass keeps lone surrogates countable instead of raising
#    - Trade-off: Allocates an encoded copy per call
