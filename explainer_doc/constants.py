"""Constants used across the explainer-doc package."""

from __future__ import annotations

import re

from .models import SectionKey

# Markdown patterns
HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
CODE_FENCE_PATTERN = re.compile(r"^(?P<indent>\s{0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSING_FENCE_MAX_INDENT = 3
INDENTED_CODE_COLUMNS = 4
RULE_PATTERN = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
BLOCKQUOTE_PATTERN = re.compile(r"^ {0,3}> ?(.*)$")
LIST_ITEM_PATTERN = re.compile(r"^(?P<indent> {0,3})(?P<marker>[-*+]|\d{1,9}[.)])[ \t]+(?P<text>.*)$")
TABLE_DELIMITER_PATTERN = re.compile(r"^\s*\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?\s*$")
DETAILS_OPEN_PATTERN = re.compile(r"<details(?:\s[^>]*)?>", re.IGNORECASE)
DETAILS_CLOSE_PATTERN = re.compile(r"</details\s*>", re.IGNORECASE)
SUMMARY_PATTERN = re.compile(r"<summary(?:\s[^>]*)?>(.*?)</summary\s*>", re.IGNORECASE | re.DOTALL)

# Navigation defaults
DEFAULT_SCROLL_OFFSET = -80
DEFAULT_HIGHLIGHT_SECONDS = 2.0
DEFAULT_INDEX_MAX_LEVEL = 2
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdown", ".mkd", ".txt")

DEFAULT_SECTIONS: tuple[SectionKey, ...] = (
    SectionKey("summary", "Quick Summary", ("quick summary", "summary", "tl;dr")),
    SectionKey("introduction", "Introduction", ("introduction", "overview")),
    SectionKey("analogy", "Analogy", ("analogy", "metaphor")),
    SectionKey("core-concepts", "Core Concepts", ("core concept", "key concept", "fundamental")),
    SectionKey("mechanism", "How It Works", ("how it works", "mechanism", "under the hood")),
    SectionKey("case-study", "Case Study", ("case study", "real-world example")),
    SectionKey("applications", "Applications", ("application", "use case")),
    SectionKey("quiz", "Quiz", ("quiz", "knowledge check", "test your")),
)
