"""Alignment intent classification from element identifiers.

Upstream drawing tools encode the desired horizontal alignment of a text
element in its ``id``, e.g. ``title_left`` or ``price_right``. When ids
collide the tool appends a numeric suffix (``title_left_2``), which is
stripped before classification.
"""

from typing import Literal

Alignment = Literal["left", "center", "right"]

# Checked in this order; the first matching suffix wins
ALIGNMENT_KEYWORDS: tuple[Alignment, ...] = ("left", "center", "right")


def strip_numeric_suffix(identifier: str) -> str:
    """Remove a trailing digit run and then at most one underscore.

    Example:
        >>> strip_numeric_suffix("title_left_2")
        'title_left'
        >>> strip_numeric_suffix("f_oo_")
        'f_oo'
    """
    end = len(identifier)
    while end > 0 and identifier[end - 1] in "0123456789":
        end -= 1
    if end > 0 and identifier[end - 1] == "_":
        end -= 1
    return identifier[:end]


def classify_identifier(identifier: str) -> Alignment | None:
    """Classify an identifier into an alignment intent.

    Args:
        identifier: Raw ``id`` attribute value.

    Returns:
        The alignment encoded by the identifier suffix, or None.
    """
    stem = strip_numeric_suffix(identifier)
    for keyword in ALIGNMENT_KEYWORDS:
        if stem.endswith(keyword):
            return keyword
    return None
