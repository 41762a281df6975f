"""
Tool registry: the single source of truth mapping tool names to handlers.
"""

from .models import ToolDefinition, ToolEntry, ToolHandler


class ToolRegistrationError(ValueError):
    """Raised when a tool cannot be registered (empty or duplicate name)."""


class ToolRegistry:
    """
    In-memory registry of tools keyed by unique name.

    Populated once at startup and only read afterwards, so it carries no
    locking. Listing preserves insertion order.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolEntry] = {}

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        """
        Register a tool.

        Parameters
        ----------
        definition : ToolDefinition
            Tool metadata; ``name`` must be non-empty and unused
        handler : ToolHandler
            Async callable receiving validated arguments

        Raises
        ------
        ToolRegistrationError
            If the name is empty or already registered
        """
        name = definition.name
        if not name or not name.strip():
            raise ToolRegistrationError("Tool name must be a non-empty string")
        if name in self._tools:
            raise ToolRegistrationError(f'Tool "{name}" is already registered')
        self._tools[name] = ToolEntry(definition=definition, handler=handler)

    def get(self, name: str) -> ToolEntry | None:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> list[ToolDefinition]:
        """Return every registered definition in registration order."""
        return [entry.definition for entry in self._tools.values()]

    @property
    def size(self) -> int:
        return len(self._tools)

    def clear(self) -> None:
        """Remove all tools (test isolation only)."""
        self._tools.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
