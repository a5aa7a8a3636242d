"""Table of contents generation for parsed documents."""

from __future__ import annotations

from collections.abc import Sequence

from .config import ViewerConfig, validate_config
from .models import BlockNode, Heading


def generate_toc_entries(
    tree: Sequence[BlockNode], config: ViewerConfig | None = None, list_style: str = "1."
) -> list[str]:
    """Render table-of-contents lines for the headings of a document.

    Links reuse the heading ids assigned by the parser, so duplicate titles
    point at their disambiguated anchors. Headings outside the configured
    level range are skipped; nesting is indented four spaces per level below
    `toc_min_level`.

    Args:
        tree: Top-level blocks of a parsed document.
        config: Configuration providing the level range. Defaults to a new
            `ViewerConfig` when omitted.
        list_style: Bullet style, ``"1."``, ``"*"`` or ``"-"``.

    Returns:
        list[str]: TOC lines, each ending with a newline.

    Raises:
        ConfigError: If the configuration fails validation.
        ValueError: If `list_style` is unsupported.

    Examples:
        generate_toc_entries(parse_document("# Title\\n## Details\\n"))
    """
    config = config or ViewerConfig()
    validate_config(config)
    if list_style not in ("1.", "*", "-"):
        raise ValueError("`list_style` must be one of: 1., *, -")

    toc = []
    for heading in (node for node in tree if isinstance(node, Heading)):
        if not config.toc_min_level <= heading.level <= config.toc_max_level:
            continue
        indent = "    " * (heading.level - config.toc_min_level)
        toc.append(f"{indent}{list_style} [{heading.text}](#{heading.id})\n")

    return toc
