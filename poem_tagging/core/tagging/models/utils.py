"""
Utilities for tag names
"""
from __future__ import annotations

# Separator the platform uses between tags typed into a single field.
TAG_INPUT_SEPARATOR = ","


def split_tag_name(name: str, delimiter: str) -> list[str]:
    """
    Split a malformed tag name into its sub-tag names.

    Each piece is stripped of surrounding whitespace and empty pieces are
    dropped, so "# love  ## family#" gives ["love", "family"].
    """
    candidates = (candidate.strip() for candidate in name.split(delimiter))
    return [candidate for candidate in candidates if candidate]
