"""
Request Capabilities

Describes the optional, request-derived data that templates can use:
flash messages, previous form input, CSP nonce, CSRF token and an input
accessor. Each capability is either present (a value or callable) or None.

RequestCapabilities.from_request() is the integration layer between a
Starlette/FastAPI request and the rest of the package. It probes, in order:
1. The request object itself (request.old, request.csrf_token, ...)
2. request.state, where upstream middleware usually stores such values
3. The session (flash data, old input) and the query string (input)
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

# Session keys written by flash / form-redirect helpers
FLASH_SESSION_KEY = "_flash"
OLD_INPUT_SESSION_KEY = "_old_input"


@dataclass(frozen=True)
class RequestCapabilities:
    """Typed record of the capabilities one request exposes."""

    # Current flash message values (already evaluated)
    flash_messages: Any = None
    # (key, default) -> value from the previous request's form input
    old: Optional[Callable[..., Any]] = None
    # () -> CSP nonce
    nonce: Optional[Callable[[], Any]] = None
    # () -> CSRF token
    csrf_token: Optional[Callable[[], Any]] = None
    # (key, default) -> value from the current request's input
    input: Optional[Callable[..., Any]] = None

    @classmethod
    def from_request(cls, request: Any) -> "RequestCapabilities":
        """Detect capabilities structurally on a request object."""
        state = getattr(request, "state", None)
        session = _session(request)

        return cls(
            flash_messages=_flash_messages(request, state, session),
            old=(
                _method(request, "old")
                or _accessor(state, "old")
                or _session_lookup(session, OLD_INPUT_SESSION_KEY)
            ),
            nonce=(
                _method(request, "nonce")
                or _producer(state, "nonce")
                or _producer(state, "csp_nonce")
            ),
            csrf_token=_method(request, "csrf_token") or _producer(state, "csrf_token"),
            input=_method(request, "input") or _accessor(state, "input") or _query_lookup(request),
        )


def _method(obj: Any, name: str) -> Optional[Callable[..., Any]]:
    value = getattr(obj, name, None)
    return value if callable(value) else None


def _accessor(obj: Any, name: str) -> Optional[Callable[..., Any]]:
    """Callable attribute, or a mapping attribute wrapped into (key, default) lookups."""
    value = getattr(obj, name, None)
    if callable(value):
        return value
    if isinstance(value, dict):
        return lambda key, default=None: value.get(key, default)
    return None


def _producer(obj: Any, name: str) -> Optional[Callable[[], Any]]:
    """Callable attribute, or a plain stored value wrapped into a zero-arg callable."""
    value = getattr(obj, name, None)
    if value is None:
        return None
    if callable(value):
        return value
    return lambda: value


def _session(request: Any) -> Optional[dict]:
    # request.session asserts when SessionMiddleware is missing, so read the scope
    scope = getattr(request, "scope", None)
    if isinstance(scope, dict):
        return scope.get("session")
    return None


def _flash_messages(request: Any, state: Any, session: Optional[dict]) -> Any:
    flash = getattr(request, "_flash_messages", None)
    if flash is not None and hasattr(flash, "get_values"):
        values = flash.get_values
        return values() if callable(values) else values

    values = getattr(state, "flash_messages", None)
    if values is not None:
        return values

    if session is not None and FLASH_SESSION_KEY in session:
        return session[FLASH_SESSION_KEY]
    return None


def _session_lookup(session: Optional[dict], key: str) -> Optional[Callable[..., Any]]:
    if session is None:
        return None

    def lookup(name, default=None):
        return (session.get(key) or {}).get(name, default)

    return lookup


def _query_lookup(request: Any) -> Optional[Callable[..., Any]]:
    query_params = getattr(request, "query_params", None)
    if query_params is None:
        return None
    return lambda key, default=None: query_params.get(key, default)
