"""Inline Markdown helpers used to derive plain heading text."""

from __future__ import annotations

import re

_IMAGE_OR_LINK = re.compile(r"!?\[((?:[^\[\]\\]|\\.)*)\](?:\((?:<[^>]*>|[^()\s]*(?:\([^()]*\))?[^()\s]*)(?:\s+\"[^\"]*\")?\)|\[[^\]]*\])")
_HTML_TAG = re.compile(r"</?[A-Za-z][^<>]*>")
_ESCAPED = re.compile(r"\\([!-/:-@\[-`{-~])")


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    An odd number of consecutive backslashes before `pos` marks the character
    as escaped.

    Examples:
        is_escaped("\\\\*", 2)  # False, two backslashes
        is_escaped("\\*", 1)  # True, one backslash
    """
    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1
    return backslash_count % 2 == 1


def find_inline_code_spans(text: str) -> list[tuple[int, int]]:
    """Locate inline code spans delimited by equal-length backtick runs.

    Returns:
        list[tuple[int, int]]: Start (inclusive) and end (exclusive) positions
            for each span, delimiters included.

    Examples:
        find_inline_code_spans("`code`")  # [(0, 6)]
        find_inline_code_spans("``more`` text")  # [(0, 8)]
    """
    spans = []
    i = 0

    while i < len(text):
        if text[i] != "`" or is_escaped(text, i):
            i += 1
            continue

        start = i
        while i < len(text) and text[i] == "`":
            i += 1
        opening_length = i - start

        # Look for a closing run of the same length; other runs are content.
        while i < len(text):
            if text[i] != "`":
                i += 1
                continue
            run_start = i
            while i < len(text) and text[i] == "`":
                i += 1
            if i - run_start == opening_length:
                spans.append((start, i))
                break

    return spans


def _strip_emphasis(text: str) -> str:
    """Drop paired emphasis delimiters (``*``, ``**``, ``_``, ``__``, ``~~``).

    Delimiter runs are split into tokens and paired with the nearest open
    token of the same kind, so unmatched openers stay literal and the work is
    linear in the length of `text`. Escaped delimiters are kept with their
    backslash; intraword underscores never delimit.
    """
    out: list[str] = []
    openers: dict[str, list[int]] = {}
    i = 0

    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            out.append(text[i : i + 2])
            i += 2
            continue
        if char not in "*_~":
            out.append(char)
            i += 1
            continue

        start = i
        while i < len(text) and text[i] == char:
            i += 1
        before = text[start - 1] if start else " "
        after = text[i] if i < len(text) else " "
        can_open = not after.isspace()
        can_close = not before.isspace()
        if char == "_":
            can_open = can_open and not _is_word(before)
            can_close = can_close and not _is_word(after)

        run = i - start
        if char == "~":
            tokens = ["~~"] * (run // 2) + ["~"] * (run % 2)
        else:
            tokens = [char * 2] * (run // 2) + [char] * (run % 2)

        for token in tokens:
            # A lone tilde never delimits.
            if token == "~":
                out.append(token)
                continue
            stack = openers.setdefault(token, [])
            if can_close and stack and stack[-1] < len(out) - 1:
                out[stack.pop()] = ""
            elif can_open:
                stack.append(len(out))
                out.append(token)
            else:
                out.append(token)

    return "".join(out)


def _is_word(char: str) -> bool:
    return char.isalnum() or char == "_"


def plain_text(text: str) -> str:
    """Strip inline Markdown and HTML markup, keeping the visible text.

    Code spans keep their content verbatim (without backticks); links and
    images keep their label; emphasis markers and tags are dropped.

    Examples:
        plain_text("📌 **Quick Summary**")  # "📌 Quick Summary"
        plain_text("The `map()` [function](https://x.y)")  # "The map() function"
    """
    parts = []
    code_texts = []
    offset = 0
    for start, end in find_inline_code_spans(text):
        parts.append(text[offset:start])
        span = text[start:end].strip("`")
        code_texts.append(span.strip() if span.strip() else span)
        parts.append(f"\x00{len(code_texts) - 1}\x00")
        offset = end
    parts.append(text[offset:])
    stripped = "".join(parts)

    stripped = _IMAGE_OR_LINK.sub(lambda match: match.group(1), stripped)
    stripped = _HTML_TAG.sub("", stripped)
    stripped = _strip_emphasis(stripped)
    stripped = _ESCAPED.sub(r"\1", stripped)

    for index, code_text in enumerate(code_texts):
        stripped = stripped.replace(f"\x00{index}\x00", code_text)

    return " ".join(stripped.split())
