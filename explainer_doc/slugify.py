"""Slug generation for document headings."""

from __future__ import annotations

import re
import unicodedata

_ASCII_SEPARATOR_RUN = re.compile(r"[^0-9a-z]+")
_UNICODE_SEPARATOR_RUN = re.compile(r"[\W_]+")


def generate_slug(title: str, preserve_unicode: bool = False) -> str:
    """Generate an identifier-safe slug from heading text.

    Lowercases the title and collapses every run of non-alphanumeric
    characters into a single hyphen, trimming hyphens from both ends.
    Returns ``"untitled"`` when nothing remains.

    Args:
        title: The heading text to convert into a slug.
        preserve_unicode: When True, keep Unicode letters and digits instead of
            transliterating to ASCII.

    Returns:
        str: Hyphen-separated slug. Returns ``"untitled"`` when the processed
            title is empty.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("📌 Quick Summary")  # "quick-summary"
        generate_slug("What's New?")  # "what-s-new"
        generate_slug("Café", preserve_unicode=True)  # "café"
    """
    normalized = unicodedata.normalize("NFKC" if preserve_unicode else "NFKD", title)
    if preserve_unicode:
        slug = _UNICODE_SEPARATOR_RUN.sub("-", normalized.casefold())
    else:
        ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
        slug = _ASCII_SEPARATOR_RUN.sub("-", ascii_text.lower())

    slug = slug.strip("-")
    return slug if slug else "untitled"


class SlugRegistry:
    """Hand out document-unique slugs using GitHub-style numbering.

    Duplicates receive ``-1``, ``-2`` and so on. Cascading collisions are
    handled too: ``"Header"``, ``"Header"``, ``"Header 1"`` yields ``header``,
    ``header-1``, ``header-1-1``.

    Examples:
        registry = SlugRegistry()
        registry.claim("Intro")  # "intro"
        registry.claim("Intro")  # "intro-1"
    """

    def __init__(self, preserve_unicode: bool = False):
        self.preserve_unicode = preserve_unicode
        # Next suffix per base slug. `_used` also covers literal titles such as
        # "Header 1" that collide with an auto-numbered slug.
        self._counters: dict[str, int] = {}
        self._used: set[str] = set()

    def claim(self, title: str) -> str:
        base_slug = generate_slug(title, preserve_unicode=self.preserve_unicode)

        count = self._counters.get(base_slug, 0)
        slug = base_slug if count == 0 else f"{base_slug}-{count}"
        while slug in self._used:
            count += 1
            slug = f"{base_slug}-{count}"

        self._counters[base_slug] = count + 1
        self._used.add(slug)
        return slug
