import dataclasses

import pytest

from explainer_doc.models import (
    Heading,
    NavigationResult,
    NavigationStatus,
    ParserContext,
    ParserState,
    Section,
    ViewNode,
)


def test_parser_state_members():
    assert list(ParserState) == [ParserState.NORMAL, ParserState.IN_FENCED_CODE]


def test_parser_context_defaults():
    ctx = ParserContext()

    assert ctx.state is ParserState.NORMAL
    assert ctx.fence_char is None
    assert ctx.fence_length == 0
    assert ctx.fence_indent_columns == 0
    assert ctx.language is None


def test_block_nodes_are_immutable():
    heading = Heading(level=2, text="Intro", id="intro")

    with pytest.raises(dataclasses.FrozenInstanceError):
        heading.text = "Changed"  # type: ignore[misc]


def test_block_nodes_compare_by_value():
    assert Heading(1, "A", "a") == Heading(1, "A", "a")
    assert Heading(1, "A", "a") != Heading(2, "A", "a")


def test_section_children_default_to_independent_lists():
    first = Section(Heading(1, "A", "a"))
    second = Section(Heading(1, "B", "b"))

    first.children.append(Section(Heading(2, "C", "c")))

    assert second.children == []


def test_view_node_flags_default_to_false():
    node = ViewNode(node=Heading(1, "A", "a"), section_id="a")

    assert node.collapsed is False
    assert node.highlighted is False


@pytest.mark.parametrize(
    ("status", "found"),
    [
        (NavigationStatus.FOUND, True),
        (NavigationStatus.FOUND_BY_FALLBACK, True),
        (NavigationStatus.NOT_FOUND, False),
    ],
)
def test_navigation_result_found(status: NavigationStatus, found: bool):
    assert NavigationResult(status).found is found
