"""
Comment tree builder.

Turns the flat comment list of a single post into a forest of nested
replies. Pure functions, no I/O; every view that renders threaded comments
goes through build_comment_tree so they all nest identically.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from threadline.schemas.comment import CommentNode


def build_comment_tree(comments: Sequence[Any]) -> list[CommentNode]:
    """
    Nest a flat comment sequence into root comments with recursive replies.

    Two passes over the input:
    1. Wrap every comment in a node with an empty replies list, keyed by id.
    2. In input order, attach each node to its parent's replies when the
       parent is present; otherwise append it to the roots. A comment whose
       parent is missing (dangling parent_id) is promoted to a root.

    Input order is preserved among roots and among the replies of each
    parent. Cycles are not detected: comments on a cycle are never roots and
    so never reachable from the returned forest.

    Args:
        comments: Comment rows or CommentResponse objects for one post

    Returns:
        Root nodes in input order
    """
    nodes: dict[int, CommentNode] = {}
    ordered: list[CommentNode] = []
    for comment in comments:
        node = CommentNode.model_validate(comment).model_copy(update={"replies": []})
        nodes[node.id] = node
        ordered.append(node)

    roots: list[CommentNode] = []
    for node in ordered:
        parent = nodes.get(node.parent_id) if node.parent_id is not None else None
        if parent is not None:
            parent.replies.append(node)
        else:
            roots.append(node)

    return roots


def limit_tree_depth(roots: Iterable[CommentNode], max_depth: int) -> list[CommentNode]:
    """
    Copy a forest, dropping replies nested more than max_depth levels below a root.

    Guards rendering against runaway nesting. Roots are level 0.
    """

    def _copy(node: CommentNode, level: int) -> CommentNode:
        replies = (
            [_copy(reply, level + 1) for reply in node.replies] if level < max_depth else []
        )
        return node.model_copy(update={"replies": replies})

    return [_copy(root, 0) for root in roots]
