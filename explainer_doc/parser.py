"""Markdown parsing into an immutable tree of block nodes."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from .config import ViewerConfig
from .constants import (
    BLOCKQUOTE_PATTERN,
    CLOSING_FENCE_MAX_INDENT,
    CODE_FENCE_PATTERN,
    DETAILS_CLOSE_PATTERN,
    DETAILS_OPEN_PATTERN,
    HEADING_PATTERN,
    INDENTED_CODE_COLUMNS,
    LIST_ITEM_PATTERN,
    RULE_PATTERN,
    SUMMARY_PATTERN,
    TABLE_DELIMITER_PATTERN,
)
from .inline import plain_text
from .models import (
    BlockNode,
    Blockquote,
    CodeBlock,
    Disclosure,
    Heading,
    ListBlock,
    Paragraph,
    ParserContext,
    ParserState,
    Rule,
    Table,
)
from .slugify import SlugRegistry

logger = logging.getLogger(__name__)

_CELL_SEPARATOR = re.compile(r"(?<!\\)\|")
MAX_NESTING_DEPTH = 32

# A reader returns the parsed block and the index of the first unconsumed
# line, or None when the block does not start at the given line.
BlockReader = Callable[[list[str], int, "_ParseScope"], "tuple[BlockNode, int] | None"]


@dataclass
class _ParseScope:
    """Slug registry shared by a whole document, plus the current nesting depth."""

    registry: SlugRegistry
    depth: int = 0

    def nested(self) -> _ParseScope:
        return _ParseScope(self.registry, self.depth + 1)


def _leading_whitespace_columns(line: str) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of four columns to match Markdown
    indentation rules.

    Examples:
        _leading_whitespace_columns("    text")  # 4
        _leading_whitespace_columns("\\ttext")  # 4
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += 4 - (columns % 4)
            continue
        break
    return columns


def _strip_columns(line: str, columns: int) -> str:
    """Remove up to `columns` columns of leading indentation from a line."""
    expanded = line.expandtabs(4)
    removable = min(columns, len(expanded) - len(expanded.lstrip(" ")))
    return expanded[removable:]


def _try_open_fence(ctx: ParserContext, line: str) -> bool:
    """Detect the start of a fenced code block.

    Args:
        ctx: Parser context to update when a fence opens.
        line: Current line being scanned.

    Returns:
        bool: True when the line begins a fence and the context is updated.

    Examples:
        _try_open_fence(ParserContext(), "```python")  # True, language "python"
    """
    if ctx.state is not ParserState.NORMAL:
        return False

    fence_match = CODE_FENCE_PATTERN.match(line)
    if not fence_match:
        return False

    indent_columns = _leading_whitespace_columns(fence_match.group("indent") or "")
    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    fence_sequence = fence_match.group("fence")
    info = fence_match.group("info").strip()
    # Backtick fences cannot carry backticks in their info string.
    if fence_sequence[0] == "`" and "`" in info:
        return False

    ctx.state = ParserState.IN_FENCED_CODE
    ctx.fence_char = fence_sequence[0]
    ctx.fence_length = len(fence_sequence)
    ctx.fence_indent_columns = indent_columns
    ctx.language = info.split()[0] if info else None
    return True


def _try_close_fence(ctx: ParserContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    Returns:
        bool: True when the line closes the fence; otherwise False.

    Examples:
        ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="`", fence_length=3)
        _try_close_fence(ctx, "```")  # True
    """
    if ctx.state is not ParserState.IN_FENCED_CODE or ctx.fence_char is None:
        return False

    stripped_line = line.lstrip(" \t")
    if not stripped_line or stripped_line[0] != ctx.fence_char:
        return False

    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    if stripped_line[fence_run_length:].strip():
        return False

    if _leading_whitespace_columns(line) > CLOSING_FENCE_MAX_INDENT:
        return False

    ctx.state = ParserState.NORMAL
    ctx.fence_char = None
    ctx.fence_length = 0
    ctx.fence_indent_columns = 0
    ctx.language = None
    return True


def _read_fenced_code(lines: list[str], start: int, scope: _ParseScope):
    ctx = ParserContext()
    if not _try_open_fence(ctx, lines[start]):
        return None

    language = ctx.language
    indent = ctx.fence_indent_columns
    code_lines = []
    index = start + 1
    while index < len(lines):
        if _try_close_fence(ctx, lines[index]):
            index += 1
            break
        code_lines.append(_strip_columns(lines[index], indent))
        index += 1
    else:
        logger.debug("Unclosed code fence at line %d runs to end of document", start + 1)

    return CodeBlock(language=language, code="\n".join(code_lines)), index


def _read_heading(lines: list[str], start: int, scope: _ParseScope):
    match = HEADING_PATTERN.match(lines[start])
    if not match:
        return None

    text = plain_text(match.group(2) or "")
    return Heading(level=len(match.group(1)), text=text, id=scope.registry.claim(text)), start + 1


def _read_rule(lines: list[str], start: int, scope: _ParseScope):
    if not RULE_PATTERN.match(lines[start]):
        return None
    return Rule(), start + 1


def _is_details_open(line: str) -> bool:
    return DETAILS_OPEN_PATTERN.match(line.lstrip()) is not None


def _read_disclosure(lines: list[str], start: int, scope: _ParseScope):
    if not _is_details_open(lines[start]) or scope.depth >= MAX_NESTING_DEPTH:
        return None

    depth = 0
    end = start
    while end < len(lines):
        depth += len(DETAILS_OPEN_PATTERN.findall(lines[end]))
        depth -= len(DETAILS_CLOSE_PATTERN.findall(lines[end]))
        end += 1
        if depth <= 0:
            break
    else:
        logger.debug("Unterminated <details> at line %d runs to end of document", start + 1)

    chunk = DETAILS_OPEN_PATTERN.sub("", "\n".join(lines[start:end]).lstrip(), count=1)

    summary = "Details"
    summary_match = SUMMARY_PATTERN.search(chunk)
    nested_open = DETAILS_OPEN_PATTERN.search(chunk)
    # A summary belonging to a nested disclosure is not ours.
    if summary_match and (nested_open is None or summary_match.start() < nested_open.start()):
        summary = plain_text(summary_match.group(1)) or summary
        chunk = chunk[: summary_match.start()] + chunk[summary_match.end() :]

    closing_tags = list(DETAILS_CLOSE_PATTERN.finditer(chunk))
    if closing_tags:
        last = closing_tags[-1]
        chunk = chunk[: last.start()] + chunk[last.end() :]

    children = _parse_blocks(chunk.split("\n"), scope.nested())
    return Disclosure(summary=summary, children=tuple(children)), end


def _read_blockquote(lines: list[str], start: int, scope: _ParseScope):
    if not BLOCKQUOTE_PATTERN.match(lines[start]) or scope.depth >= MAX_NESTING_DEPTH:
        return None

    quoted = []
    index = start
    while index < len(lines):
        match = BLOCKQUOTE_PATTERN.match(lines[index])
        if not match:
            break
        quoted.append(match.group(1))
        index += 1

    return Blockquote(children=tuple(_parse_blocks(quoted, scope.nested()))), index


def _read_list(lines: list[str], start: int, scope: _ParseScope):
    first = LIST_ITEM_PATTERN.match(lines[start])
    if not first or RULE_PATTERN.match(lines[start]):
        return None

    ordered = first.group("marker")[0].isdigit()
    base_indent = len(first.group("indent"))
    items: list[list[str]] = []
    content_column = 0
    index = start

    while index < len(lines):
        line = lines[index]
        match = LIST_ITEM_PATTERN.match(line)
        is_sibling = (
            match is not None
            and len(match.group("indent")) <= base_indent
            and match.group("marker")[0].isdigit() == ordered
            and not RULE_PATTERN.match(line)
        )

        if is_sibling:
            items.append([match.group("text")])
            content_column = match.start("text")
            index += 1
            continue

        if not line.strip():
            # Blank lines continue the list only when more item content follows.
            lookahead = index + 1
            while lookahead < len(lines) and not lines[lookahead].strip():
                lookahead += 1
            if lookahead < len(lines) and (
                _leading_whitespace_columns(lines[lookahead]) >= content_column
                or _is_sibling_item(lines[lookahead], base_indent, ordered)
            ):
                items[-1].append("")
                index += 1
                continue
            break

        if _leading_whitespace_columns(line) >= content_column:
            items[-1].append(_strip_columns(line, content_column))
            index += 1
            continue

        # Lazy continuation of the item's last paragraph.
        if items[-1][-1].strip() and not _starts_block(lines, index):
            items[-1].append(line.strip())
            index += 1
            continue

        break

    texts = tuple("\n".join(item_lines).strip() for item_lines in items)
    return ListBlock(ordered=ordered, items=texts), index


def _is_sibling_item(line: str, base_indent: int, ordered: bool) -> bool:
    match = LIST_ITEM_PATTERN.match(line)
    return (
        match is not None
        and len(match.group("indent")) <= base_indent
        and match.group("marker")[0].isdigit() == ordered
    )


def _split_cells(line: str) -> tuple[str, ...]:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return tuple(cell.strip().replace("\\|", "|") for cell in _CELL_SEPARATOR.split(stripped))


def _is_table_start(lines: list[str], start: int) -> bool:
    return (
        start + 1 < len(lines)
        and "|" in lines[start]
        and "-" in lines[start + 1]
        and TABLE_DELIMITER_PATTERN.match(lines[start + 1]) is not None
        and len(_split_cells(lines[start + 1])) == len(_split_cells(lines[start]))
    )


def _read_table(lines: list[str], start: int, scope: _ParseScope):
    if not _is_table_start(lines, start):
        return None

    header = _split_cells(lines[start])
    width = len(header)
    rows = []
    index = start + 2
    while index < len(lines) and lines[index].strip() and "|" in lines[index]:
        cells = _split_cells(lines[index])
        # Rows are padded or truncated to the header width.
        rows.append(cells[:width] + ("",) * (width - len(cells)))
        index += 1

    return Table(header=header, rows=tuple(rows)), index


def _read_indented_code(lines: list[str], start: int, scope: _ParseScope):
    if _leading_whitespace_columns(lines[start]) < INDENTED_CODE_COLUMNS:
        return None

    code_lines = []
    index = start
    while index < len(lines):
        line = lines[index]
        if line.strip() and _leading_whitespace_columns(line) < INDENTED_CODE_COLUMNS:
            break
        code_lines.append(_strip_columns(line, INDENTED_CODE_COLUMNS))
        index += 1

    while code_lines and not code_lines[-1].strip():
        code_lines.pop()

    return CodeBlock(language=None, code="\n".join(code_lines)), index


def _starts_block(lines: list[str], index: int) -> bool:
    """Check whether a line interrupts a paragraph by starting another block."""
    line = lines[index]
    return (
        CODE_FENCE_PATTERN.match(line) is not None
        and _leading_whitespace_columns(line) <= CLOSING_FENCE_MAX_INDENT
        or HEADING_PATTERN.match(line) is not None
        or RULE_PATTERN.match(line) is not None
        or _is_details_open(line)
        or BLOCKQUOTE_PATTERN.match(line) is not None
        or LIST_ITEM_PATTERN.match(line) is not None
        or _is_table_start(lines, index)
    )


def _read_paragraph(lines: list[str], start: int, scope: _ParseScope):
    paragraph_lines = [lines[start].strip()]
    index = start + 1
    while index < len(lines) and lines[index].strip() and not _starts_block(lines, index):
        paragraph_lines.append(lines[index].strip())
        index += 1
    return Paragraph(text="\n".join(paragraph_lines)), index


_BLOCK_READERS: tuple[BlockReader, ...] = (
    _read_fenced_code,
    _read_heading,
    _read_rule,
    _read_disclosure,
    _read_blockquote,
    _read_list,
    _read_table,
    _read_indented_code,
    _read_paragraph,
)


def _parse_blocks(lines: list[str], scope: _ParseScope) -> list[BlockNode]:
    blocks: list[BlockNode] = []
    index = 0
    while index < len(lines):
        if not lines[index].strip():
            index += 1
            continue

        for reader in _BLOCK_READERS:
            result = reader(lines, index, scope)
            if result is not None:
                block, index = result
                blocks.append(block)
                break

    return blocks


def parse_document(raw_text: str, config: ViewerConfig | None = None) -> list[BlockNode]:
    """Parse Markdown text into a list of block nodes.

    Never raises on malformed input: anything that is not a recognized block
    becomes a paragraph. Every heading receives a document-unique slug id,
    including headings nested in blockquotes and disclosure blocks.

    Args:
        raw_text: The complete document text.
        config: Configuration controlling slug generation. Defaults to a new
            `ViewerConfig` when omitted.

    Returns:
        list[BlockNode]: Top-level blocks in document order.

    Examples:
        parse_document("# Title\\n\\nSome text.\\n")
    """
    config = config or ViewerConfig()
    scope = _ParseScope(SlugRegistry(preserve_unicode=config.preserve_unicode))
    lines = raw_text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    blocks = _parse_blocks(lines, scope)
    logger.debug("Parsed %d top-level blocks from %d lines", len(blocks), len(lines))
    return blocks
