"""Title cleaning for tracker submission.

The tracker rejects or corrupts subjects that carry pictographic characters,
so every title is cleaned before it leaves the process. All functions here
are idempotent: cleaning an already-clean title returns it unchanged.
"""

from __future__ import annotations

import re

MAX_TITLE_LENGTH = 100
MAX_COMMIT_TITLE_LENGTH = 80

# Every block that carries Extended_Pictographic code points, plus the
# joiners, selectors and tag characters used to build emoji sequences.
_PICTOGRAPH_RANGES: tuple[tuple[int, int], ...] = (
    (0x00A9, 0x00A9),  # copyright
    (0x00AE, 0x00AE),  # registered
    (0x200D, 0x200D),  # zero-width joiner
    (0x203C, 0x203C),
    (0x2049, 0x2049),
    (0x20E3, 0x20E3),  # combining keycap
    (0x2122, 0x2122),  # trade mark
    (0x2139, 0x2139),
    (0x2190, 0x21FF),  # arrows
    (0x2300, 0x23FF),  # misc technical (hourglass, watch, media controls)
    (0x24C2, 0x24C2),
    (0x25A0, 0x25FF),  # geometric shapes
    (0x2600, 0x27BF),  # misc symbols, dingbats
    (0x2900, 0x297F),  # supplemental arrows
    (0x2B00, 0x2BFF),  # misc symbols and arrows (star, heavy circle)
    (0x3030, 0x3030),
    (0x303D, 0x303D),
    (0x3297, 0x3297),
    (0x3299, 0x3299),
    (0xFE00, 0xFE0F),  # variation selectors
    (0x1F000, 0x1FAFF),  # tiles, cards, enclosed, emoticons, transport, symbols
    (0x1FC00, 0x1FFFD),  # unassigned, reserved as Extended_Pictographic
    (0xE0020, 0xE007F),  # tag characters (subdivision flags)
)

_PICTOGRAPH_RE = re.compile(
    "[" + "".join(f"\\U{start:08x}-\\U{end:08x}" for start, end in _PICTOGRAPH_RANGES) + "]"
)
_EMPHASIS_RE = re.compile(r"[*`]+")
_UNDERSCORE_RE = re.compile(r"_+")
_CHECKBOX_RE = re.compile(r"\[\s*[xX]?\s*\]")
_WHITESPACE_RE = re.compile(r"\s+")
_EDGE_PUNCTUATION_RE = re.compile(r"^[:;,\-\s]+|[:;,\-\s]+$")
_COMMIT_PREFIX_RE = re.compile(r"^(feat|feature|fix|add|implement|create):\s*", re.IGNORECASE)


def contains_pictograph(text: str) -> bool:
    return _PICTOGRAPH_RE.search(text) is not None


def strip_pictographs(text: str) -> str:
    return _PICTOGRAPH_RE.sub("", text)


def sanitize_title(title: str) -> str | None:
    """Clean a roadmap-derived title, or return *None* when it should be discarded.

    Removes pictographs, checkbox markers and markdown emphasis, collapses
    whitespace and trims edge punctuation. A title that is shorter than three
    characters or ends with a bare colon is junk (a heading fragment).
    """
    cleaned = strip_pictographs(title)
    cleaned = _EMPHASIS_RE.sub("", cleaned)
    cleaned = _UNDERSCORE_RE.sub(" ", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    while _CHECKBOX_RE.search(cleaned):
        cleaned = _CHECKBOX_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()

    if cleaned.endswith(":"):
        return None

    cleaned = _EDGE_PUNCTUATION_RE.sub("", cleaned)
    cleaned = _EDGE_PUNCTUATION_RE.sub("", cleaned[:MAX_TITLE_LENGTH])
    if len(cleaned) < 3:
        return None
    return cleaned


def sanitize_commit_message(message: str) -> str:
    """Turn a commit subject into a task title.

    Capitalizes the first letter, drops a conventional-commit prefix and
    truncates to 80 characters with an ellipsis.
    """
    cleaned = _COMMIT_PREFIX_RE.sub("", message.strip())
    cleaned = cleaned[:1].upper() + cleaned[1:]
    return truncate(cleaned, MAX_COMMIT_TITLE_LENGTH)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def clean_submission_title(title: str) -> str:
    """Last guard applied to every title right before submission.

    Strips pictographs, collapses whitespace and caps the length. Returns an
    empty string when nothing printable remains.
    """
    cleaned = _WHITESPACE_RE.sub(" ", strip_pictographs(title)).strip()
    return cleaned[:MAX_TITLE_LENGTH].rstrip()
