"""
Template Globals Registry

Process-wide mapping of name -> value/function handed to every rendered
template. It is seeded once from the resolved configuration and mutated by
the request middleware on every request.

There is no locking and no per-request copy here: concurrent requests write
to the same keys. Use the isolate_requests setting to keep request-derived
globals out of this store.
"""

from typing import Any


class GlobalRegistry:
    """Owns the renderer option dict for the lifetime of the adapter."""

    def __init__(self, options: dict[str, Any] | None = None):
        self._options: dict[str, Any] = options if options is not None else {}

    def set_global(self, name: str, value: Any) -> None:
        """Register a global, silently replacing any earlier value."""
        self._options[name] = value

    def update(self, values: dict[str, Any]) -> None:
        for name, value in values.items():
            self.set_global(name, value)

    def get(self, name: str, default: Any = None) -> Any:
        return self._options.get(name, default)

    def snapshot(self) -> dict[str, Any]:
        """
        Return the live option mapping.

        This is the registry's own dict, not a copy: later set_global calls
        are visible through it.
        """
        return self._options

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def __len__(self) -> int:
        return len(self._options)
