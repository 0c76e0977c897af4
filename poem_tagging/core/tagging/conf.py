"""
Settings for the tag cleanup tools.

Sites override any of these through a ``POEM_TAGGING`` dict in their Django
settings, e.g.::

    POEM_TAGGING = {
        "VOCABULARY_NAME": "keywords",
        "BUNCH_SIZE": 200,
    }
"""
from __future__ import annotations

from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULTS: dict[str, Any] = {
    # Name of the vocabulary whose terms get cleaned up and reclaimed.
    "VOCABULARY_NAME": "tags",
    # Only records of this type are scanned by fix_batch().
    "RECORD_TYPE": "poem",
    # Character that was wrongly used to separate tags.
    "DELIMITER": "#",
    # Rows fetched per store round-trip.
    "BUNCH_SIZE": 500,
    # Soft time budget per bunch, in seconds.
    "BUNCH_TIME_BUDGET": 30,
}


def get_setting(name: str) -> Any:
    """
    Return the configured value for ``name``, falling back to DEFAULTS.
    """
    if name not in DEFAULTS:
        raise ImproperlyConfigured(f"Unknown POEM_TAGGING setting: {name}")
    overrides = getattr(settings, "POEM_TAGGING", None) or {}
    return overrides.get(name, DEFAULTS[name])
