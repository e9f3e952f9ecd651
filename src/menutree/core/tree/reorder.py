"""Sibling reordering on a cloned forest."""

from loguru import logger

from menutree.core.tree.operations import clone_tree, locate, renumber
from menutree.models.node import Forest, P


def reorder(forest: Forest[P], source_id: str, target_id: str) -> Forest[P] | None:
    """Move source_id to target_id's slot among their shared siblings.

    Returns a new, renumbered forest, or None when there is nothing to do:
    the ids are equal, either node is missing, or the two nodes have
    different parents. The given forest is never modified.
    """
    if source_id == target_id:
        return None

    cloned = clone_tree(forest)
    source = locate(cloned, source_id)
    target = locate(cloned, target_id)
    if source is None or target is None:
        logger.debug("Reorder {} -> {}: node not found, ignoring", source_id, target_id)
        return None

    if source.parent_id != target.parent_id or source.siblings is not target.siblings:
        return None

    siblings = source.siblings
    moved = siblings.pop(source.index)
    siblings.insert(target.index, moved)

    renumber(cloned)
    return cloned
