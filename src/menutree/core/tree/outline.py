"""Render a menu forest as an indented outline."""

import io
from collections.abc import Callable

from menutree.core.tree.operations import iter_preorder
from menutree.models.node import Forest, MenuNode, P


def render_outline(
    forest: Forest[P],
    *,
    label: Callable[[MenuNode[P]], str] | None = None,
    max_depth: int | None = None,
    show_ids: bool = True,
) -> str:
    """Render every node as a bullet, indented by level.

    Args:
        forest: The forest to render.
        label: Returns the text for a node (defaults to its id).
        max_depth: Deepest level to include (None = unlimited).
        show_ids: Append the node id and position to each line.

    Returns:
        Outline string, one node per line.
    """
    out = io.StringIO()
    for node in iter_preorder(forest):
        if max_depth is not None and node.level > max_depth:
            continue
        indent = "    " * node.level
        text = label(node) if label else node.id
        lines = text.split("\n") or [""]
        suffix = f"  [{node.position}] id={node.id}" if show_ids else ""
        out.write(f"{indent}- {lines[0]}{suffix}\n")
        for line in lines[1:]:
            out.write(f"{indent}  {line}\n")

        # Truncation indicator when children are cut off by max_depth
        if max_depth is not None and node.level == max_depth and node.child_ids:
            count = len(node.child_ids)
            noun = "child" if count == 1 else "children"
            out.write(f"{indent}    - ... ({count} more {noun})\n")
    return out.getvalue()
