"""
Pug Template Rendering

Centralized renderer for Pug views. One Pug instance is created per
application and shared by route handlers, the same way a Jinja2Templates
instance is.

Typical wiring:
    pug = Pug(base_path=Path(__file__).parent).install(app)

    @app.get("/")
    async def home(pug: Pug = Depends(get_pug)):
        return pug.TemplateResponse("home", {"title": "Welcome"})

Options passed at render time are merged with the registry globals (which
include the resolved configuration and any request-derived helpers).
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

from starlette.background import BackgroundTask
from starlette.responses import HTMLResponse

from fastapi_pug.config import Config, resolve_options, settings, views_path
from fastapi_pug.engine import TEMPLATE_EXTENSION, PugEngine, TemplateEngine
from fastapi_pug.middleware import PugMiddleware, RequestContextAdapter, current_request_globals
from fastapi_pug.registry import GlobalRegistry

logger = logging.getLogger(__name__)


class Pug:
    """
    Renders Pug templates with a shared set of globals.

    Args:
        config: Configuration source exposing get(key, default).
            Defaults to the PUG_* environment settings.
        base_path: Application root; views live in base_path/app.pug.basedir.
            Defaults to the current working directory.
        engine: Template engine; defaults to PugEngine.
    """

    def __init__(
        self,
        config: Any = None,
        base_path: Path | str | None = None,
        engine: TemplateEngine | None = None,
    ):
        self.config = config if config is not None else Config.from_settings(settings)
        self.base_path = Path(base_path) if base_path is not None else Path.cwd()

        # Options are resolved exactly once; later changes go through set_global
        self.registry = GlobalRegistry(resolve_options(self.config, self.base_path))
        self.views_path = views_path(self.config, self.base_path)
        self.engine = engine if engine is not None else PugEngine()

        # Legacy order lets registry globals overwrite per-call options
        self.call_options_win = bool(self.config.get("app.pug.call_options_win", False))

        self.context_adapter = RequestContextAdapter(
            self.registry,
            self.config,
            isolate_requests=bool(self.config.get("app.pug.isolate_requests", False)),
        )

    @property
    def options(self) -> dict[str, Any]:
        """Current registry snapshot."""
        return self.registry.snapshot()

    def render(self, template: str, options: dict[str, Any] | None = None) -> str:
        """
        Render a Pug template file.

        Args:
            template: Template name relative to the views directory, without
                the .pug extension (e.g. "users/profile")
            options: Per-call Pug options / template data

        Returns:
            Rendered HTML

        Example:
            pug.render("myTemplate", {"name": "Ada"})
        """
        path = self.views_path / f"{template}{TEMPLATE_EXTENSION}"
        return self.engine.render_file(path, self._merge_options(options))

    async def make(self, template: str, options: dict[str, Any] | None = None) -> str:
        """Async alias for render; the blocking render runs in a worker thread."""
        return await asyncio.to_thread(self.render, template, options)

    def render_string(self, source: str, options: dict[str, Any] | None = None) -> str:
        """
        Render a literal Pug source string.

        Example:
            pug.render_string("p Hello World")  # '<p>Hello World</p>'
        """
        return self.engine.render_source(source, self._merge_options(options))

    def set_global(self, name: str, value: Any) -> None:
        """Add a global value or function available to every view."""
        self.registry.set_global(name, value)

    # `global` is a keyword; keep the familiar name available
    global_ = set_global

    def TemplateResponse(
        self,
        name: str,
        context: dict[str, Any] | None = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        media_type: str | None = None,
        background: BackgroundTask | None = None,
    ) -> HTMLResponse:
        """Render a template file into an HTMLResponse."""
        content = self.render(name, context)
        return HTMLResponse(
            content,
            status_code=status_code,
            headers=headers,
            media_type=media_type,
            background=background,
        )

    def install(self, app: Any) -> "Pug":
        """
        Register the request middleware and expose this instance on app.state.

        Call it before adding session / CSRF middleware: middleware added
        later wraps this one and runs first.
        """
        app.add_middleware(PugMiddleware, pug=self)
        app.state.pug = self
        logger.debug("Pug renderer installed (views: %s)", self.views_path)
        return self

    def _merge_options(self, options: dict[str, Any] | None) -> dict[str, Any]:
        """
        Merge per-call options with the registry globals.

        By default the registry globals are copied onto the given options
        dict, so on a key collision the registry value wins and the caller's
        dict is modified. With app.pug.call_options_win a new dict is built
        and the per-call value wins instead. Without options the registry
        snapshot itself is used.
        """
        merged = self.registry.snapshot()

        request_globals = current_request_globals()
        if request_globals:
            merged = {**merged, **request_globals}

        if not options:
            return merged

        if self.call_options_win:
            return {**merged, **options}

        options.update(merged)
        return options
