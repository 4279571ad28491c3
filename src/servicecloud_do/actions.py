"""
ActionTable - explicit lookup table of a service's actions.

Each listed action is bound to an invocation function, so callers index
the table by name instead of relying on members added at runtime.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Awaitable, Callable

__all__ = ["ActionTable", "BoundAction"]

Invoke = Callable[[str, Any], Awaitable[Any]]


class BoundAction:
    """
    A single action bound to its service.

    Example:
        table = await client.expand_actions()
        result = await table["square"](5)
    """

    __slots__ = ("_name", "_invoke")

    def __init__(self, name: str, invoke: Invoke) -> None:
        self._name = name
        self._invoke = invoke

    @property
    def name(self) -> str:
        """The action name."""
        return self._name

    async def __call__(self, data: Any = None) -> Any:
        """
        Call the action.

        Args:
            data: Opaque action payload

        Returns:
            The action's result payload
        """
        return await self._invoke(self._name, data)

    def __repr__(self) -> str:
        return f"BoundAction({self._name})"


class ActionTable(Mapping[str, BoundAction]):
    """
    Read-only mapping from action name to BoundAction.

    Built by ``expand_actions``; the entries reflect the service's action
    list at the time it was fetched.
    """

    __slots__ = ("_service_name", "_actions")

    def __init__(self, service_name: str, actions: Iterable[str], invoke: Invoke) -> None:
        self._service_name = service_name
        self._actions = {name: BoundAction(name, invoke) for name in actions}

    @property
    def service_name(self) -> str:
        return self._service_name

    def __getitem__(self, name: str) -> BoundAction:
        try:
            return self._actions[name]
        except KeyError:
            raise KeyError(f"Service '{self._service_name}' has no action '{name}'") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __repr__(self) -> str:
        names = ", ".join(self._actions)
        return f"ActionTable({self._service_name}: {names})"
