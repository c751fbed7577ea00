"""Heading slug generation.

Slugs are URL-safe anchor ids derived from heading text. A Slugger
instance represents one run (one rendered page): repeated headings within
the run receive numeric suffixes so every slug stays unique.
"""

import re

_DISALLOWED_CHARS = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Convert text to a URL-safe slug without deduplication.

    Args:
        text: Heading text (e.g., "Getting Started!")

    Returns:
        Lowercase slug (e.g., "getting-started")
    """
    slug = _DISALLOWED_CHARS.sub("", text.strip().lower())
    slug = _WHITESPACE.sub("-", slug)
    return slug.strip("-")


class Slugger:
    """Stateful slug generator that deduplicates within one run."""

    def __init__(self) -> None:
        self._occurrences: dict[str, int] = {}

    def slug(self, text: str) -> str:
        """Generate a slug unique within this run.

        The first occurrence of a slug is returned as is; later ones get
        ``-1``, ``-2``, ... appended, skipping values already handed out.

        Args:
            text: Heading text

        Returns:
            Unique slug
        """
        original = slugify(text)
        slug = original
        while slug in self._occurrences:
            self._occurrences[original] += 1
            slug = f"{original}-{self._occurrences[original]}"
        self._occurrences[slug] = 0
        return slug

    def reset(self) -> None:
        """Forget all issued slugs and start a new run."""
        self._occurrences.clear()
