"""Registration table for the docs tools.

Tool modules register handlers at import time; ``create_mcp_server`` wires
every registered tool into FastMCP in registration order.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from feathers_docs.mcp.context import AppContext

HandlerFn = Callable[["AppContext", Any], Awaitable[dict[str, Any]]]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """A docs tool: its wire name, description, argument model and handler."""

    name: str
    handler: HandlerFn
    description: str
    params_model: type[BaseModel]


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        params_model: type[BaseModel],
    ) -> Callable[[HandlerFn], HandlerFn]:
        """Decorator registering ``fn`` as tool ``name``.

        Raises:
            ValueError: ``name`` already belongs to a different handler.
        """

        def decorator(fn: HandlerFn) -> HandlerFn:
            existing = self._tools.get(name)
            # Re-importing a tool module re-registers the same function
            if existing is not None and existing.handler.__qualname__ != fn.__qualname__:
                raise ValueError(f"Tool already registered: {name}")
            self._tools[name] = ToolSpec(
                name=name,
                handler=fn,
                description=description,
                params_model=params_model,
            )
            return fn

        return decorator

    def get_all(self) -> list[ToolSpec]:
        return list(self._tools.values())


registry = ToolRegistry()
