"""
Request Context Middleware

Injects request-derived helpers into the template globals before the
downstream handler runs, so route handlers can render views without
threading flash data, tokens or input accessors through every call.

Globals registered per request (each only when the capability is present):
- flashMessages: current flash message values
- old(key, default): previous form input
- cspNonce: CSP nonce (evaluated once)
- csrfToken: CSRF token (evaluated once)
- input(key, default): current request input
- config(key, default): configuration lookup

By default these land in the shared GlobalRegistry, and a global whose
capability is missing on a later request keeps its previous value. With
isolate_requests enabled they are bound to a ContextVar for the duration of
the request instead and never touch the shared registry.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Iterator

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fastapi_pug.capabilities import RequestCapabilities
from fastapi_pug.config import config_getter
from fastapi_pug.registry import GlobalRegistry

if TYPE_CHECKING:
    from fastapi_pug.templating import Pug

logger = logging.getLogger(__name__)

_request_globals: ContextVar[dict[str, Any] | None] = ContextVar(
    "pug_request_globals",
    default=None,
)


def current_request_globals() -> dict[str, Any]:
    """Globals bound to the current request in isolated mode (empty otherwise)."""
    return dict(_request_globals.get() or {})


class RequestContextAdapter:
    """Turns RequestCapabilities into template globals."""

    def __init__(
        self,
        registry: GlobalRegistry,
        config: Any = None,
        isolate_requests: bool = False,
    ):
        self.registry = registry
        self.config = config
        self.isolate_requests = isolate_requests

    def collect(self, capabilities: RequestCapabilities) -> dict[str, Any]:
        """
        Compute the globals one request contributes.

        Nonce and CSRF token producers are called exactly once and only
        truthy results are kept. Accessors are wrapped into forwarding
        callables with a (key, default) signature.
        """
        values: dict[str, Any] = {}

        if capabilities.flash_messages is not None:
            values["flashMessages"] = capabilities.flash_messages

        if capabilities.old is not None:
            values["old"] = _forward(capabilities.old)

        if capabilities.nonce is not None:
            nonce = capabilities.nonce()
            if nonce:
                values["cspNonce"] = nonce

        if capabilities.csrf_token is not None:
            token = capabilities.csrf_token()
            if token:
                values["csrfToken"] = token

        if capabilities.input is not None:
            values["input"] = _forward(capabilities.input)

        getter = config_getter(self.config)
        if getter is not None:
            values["config"] = _forward(getter)

        return values

    def apply(self, capabilities: RequestCapabilities) -> dict[str, Any]:
        """Write this request's globals into the shared registry."""
        values = self.collect(capabilities)
        self.registry.update(values)
        logger.debug("Injected template globals: %s", ", ".join(sorted(values)))
        return values

    @contextmanager
    def bind(self, capabilities: RequestCapabilities) -> Iterator[dict[str, Any]]:
        """Bind this request's globals to the current context only."""
        values = self.collect(capabilities)
        token = _request_globals.set(values)
        logger.debug("Bound request template globals: %s", ", ".join(sorted(values)))
        try:
            yield values
        finally:
            _request_globals.reset(token)


def _forward(target):
    def forward(key, default=None):
        return target(key, default)

    return forward


class PugMiddleware(BaseHTTPMiddleware):
    """
    Starlette middleware running the RequestContextAdapter once per request.

    It must sit inside the middleware that provides sessions, flash data or
    CSRF tokens so those are visible here; Pug.install() registers it.
    """

    def __init__(self, app: Any, *, pug: "Pug") -> None:
        super().__init__(app)
        self.pug = pug

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        capabilities = RequestCapabilities.from_request(request)
        adapter = self.pug.context_adapter

        if adapter.isolate_requests:
            with adapter.bind(capabilities):
                return await call_next(request)

        # Registry writes are not rolled back if the downstream handler fails
        adapter.apply(capabilities)
        return await call_next(request)
