"""tests for tree data models."""

import texsync
from texsync.core.models import (
    NodeKind,
    ProtectedBlock,
    StyleDescriptor,
    TreeNode,
    find_all,
)


def test_math_source_is_decoded() -> None:
    """source decodes the percent-encoded data-latex attribute."""
    node = TreeNode(kind=NodeKind.MATH_BLOCK, attrs={"data-latex": "E%3Dmc%5E2"})
    assert node.source == "E=mc^2"


def test_source_none_for_non_math() -> None:
    """non-math nodes have no source."""
    assert TreeNode(kind=NodeKind.BOLD).source is None


def test_text_content_concatenates_descendants() -> None:
    """text_content joins text of the subtree."""
    node = TreeNode(
        kind=NodeKind.BOLD,
        children=[
            TreeNode(kind=NodeKind.TEXT, text="a "),
            TreeNode(kind=NodeKind.INLINE_CODE, text="b"),
        ],
    )
    assert node.text_content() == "a b"


def test_find_all_searches_forest() -> None:
    """find_all returns matching nodes depth first."""
    inner = TreeNode(kind=NodeKind.BOLD)
    forest = [
        TreeNode(kind=NodeKind.CONTAINER, children=[inner]),
        TreeNode(kind=NodeKind.BOLD),
    ]
    assert find_all(forest, NodeKind.BOLD) == [inner, forest[1]]


def test_style_descriptor_is_empty() -> None:
    """descriptor is empty until a property is set."""
    assert StyleDescriptor().is_empty()
    assert not StyleDescriptor(align="center").is_empty()


def test_protected_block_token() -> None:
    """token embeds the index."""
    block = ProtectedBlock(index=3, rendered_content="x")
    assert block.token == "__PROTECTED_BLOCK_3__"


def test_children_are_not_shared() -> None:
    """default children lists are per node."""
    first = TreeNode(kind=NodeKind.CONTAINER)
    second = TreeNode(kind=NodeKind.CONTAINER)
    first.children.append(TreeNode(kind=NodeKind.TEXT, text="x"))
    assert second.children == []


def test_find_all_on_converted_document() -> None:
    """find_all is available from the package for querying converted trees."""
    forest = texsync.latex_to_tree("\\section{A} \\textbf{b} \\subsection{C}")
    headings = texsync.find_all(forest, texsync.NodeKind.HEADING)
    assert [h.level for h in headings] == [1, 2]
