"""Inline markers for information the generator cannot derive.

Markers are deliberately loud and greppable so a follow-up pass (human or
model) can find every gap. Deterministic output never guesses a value.
"""

from __future__ import annotations

NEEDS_INPUT_PREFIX = "[NEEDS INPUT:"
NEEDS_CONFIRMATION_PREFIX = "[NEEDS CONFIRMATION:"


def needs_input(what: str) -> str:
    """Marker for a field that must be filled in later."""
    return f"{NEEDS_INPUT_PREFIX} {what}]"


def needs_confirmation(tech_label: str) -> str:
    """Marker for a tech label with no verified registry coordinate."""
    return (
        f"{NEEDS_CONFIRMATION_PREFIX} no verified package for \"{tech_label}\"; "
        "confirm package name and version against the official registry]"
    )


def has_markers(text: str) -> bool:
    """Return True if text contains any unresolved marker."""
    return NEEDS_INPUT_PREFIX in text or NEEDS_CONFIRMATION_PREFIX in text
