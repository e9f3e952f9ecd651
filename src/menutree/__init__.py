"""Ordered menu tree with drag-and-drop reordering and lazy subtrees."""

from menutree.core.drag.machine import DragController, DropOutcome
from menutree.editor import MenuTreeEditor
from menutree.errors import GatewayError, ReorderConflictError
from menutree.models.node import Forest, MenuNode, ReorderItem
from menutree.protocols import GatewayProtocol, NotifierProtocol

__all__ = [
    "DragController",
    "DropOutcome",
    "Forest",
    "GatewayError",
    "GatewayProtocol",
    "MenuNode",
    "MenuTreeEditor",
    "NotifierProtocol",
    "ReorderConflictError",
    "ReorderItem",
]
