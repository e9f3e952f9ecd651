"""Exceptions raised across the persistence boundary."""


class GatewayError(RuntimeError):
    """A call to the menu store failed; nothing was applied."""


class ReorderConflictError(GatewayError):
    """The store rejected a reorder request as inconsistent."""
