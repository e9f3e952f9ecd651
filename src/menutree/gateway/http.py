"""Persistence gateway talking to the remote admin menu API."""

import asyncio
from collections.abc import Sequence
from typing import Any

from menutree.api import MenuApi
from menutree.core.importer.json_reader import parse_children, parse_menu_tree
from menutree.core.tree.diff import to_wire
from menutree.errors import GatewayError
from menutree.models.node import Forest, MenuNode, ReorderItem


class HttpGateway:
    """Runs the blocking MenuApi calls in a worker thread."""

    def __init__(self, api: MenuApi) -> None:
        self.api = api

    async def _call(self, procedure: str, args: dict[str, Any]) -> Any:
        return await asyncio.to_thread(self.api.call, procedure, args)

    async def fetch_tree(self, scope: str) -> Forest[dict[str, Any]]:
        data = await self._call("adminMenus.tree", {"menuGroup": scope})
        try:
            return parse_menu_tree(data or [])
        except (ValueError, TypeError, AttributeError) as e:
            msg = f"Malformed menu tree for {scope!r}: {e}"
            raise GatewayError(msg) from e

    async def fetch_children(self, scope: str, parent_id: str) -> list[MenuNode[dict[str, Any]]]:
        data = await self._call("adminMenus.children", {"menuGroup": scope, "parentId": parent_id})
        try:
            return parse_children(data or [])
        except (ValueError, TypeError, AttributeError) as e:
            msg = f"Malformed children of {parent_id!r}: {e}"
            raise GatewayError(msg) from e

    async def commit_reorder(self, scope: str, items: Sequence[ReorderItem]) -> None:
        await self._call("adminMenus.reorder", {"menuGroup": scope, "items": to_wire(items)})

    async def fetch_next_position(self, scope: str, parent_id: str | None = None) -> int:
        args: dict[str, Any] = {"menuGroup": scope}
        if parent_id is not None:
            args["parentId"] = parent_id
        data = await self._call("adminMenus.getNextPosition", args)
        if not isinstance(data, int) or isinstance(data, bool) or data < 0:
            msg = f"Invalid next position from API: {data!r}"
            raise GatewayError(msg)
        return data
