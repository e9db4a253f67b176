"""
Review text sanitizer.

Optional clean-up applied before validation when the repository is
configured to sanitize input.
"""

import re

import config.settings as settings
from ratekeeper.utils.text import truncate_utf16

_WHITESPACE = re.compile(r"\s+")
_HTML_TAG = re.compile(r"<[^>]*>")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

_UNSAFE_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"javascript:",
        r"data:",
        r"vbscript:",
        r"<script",
        r"</script>",
        r"onclick",
        r"onerror",
        r"onload",
        r"<[^>]+>",
    )
]


def sanitize_review_text(text: str) -> str:
    """
    Clean raw review input.

    Trims, collapses whitespace runs to one space, strips HTML tags and
    control characters, and cuts to MAX_REVIEW_LENGTH UTF-16 code units.
    """
    cleaned = _HTML_TAG.sub("", text)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return truncate_utf16(cleaned, settings.MAX_REVIEW_LENGTH)


def find_unsafe_content(text: str) -> str:
    """Return the first unsafe fragment found in text, or '' if none."""
    for pattern in _UNSAFE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return ""


def is_safe_text(text: str) -> bool:
    return not find_unsafe_content(text)


# Design Rationale and Trade-offs:
#
# 1. Why regex screening instead of an HTML parser?
#    - Review text is plain text; any tag is unexpected
#    - Trade-off: Legitimate text like "data:" in prose is flagged when rejection is on
#
# 2. Why strip tags before collapsing whitespace?
#    - Removed tags can leave double spaces behind
