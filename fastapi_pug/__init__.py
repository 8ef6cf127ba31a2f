"""
FastAPI Pug Package

Renders Pug templates from FastAPI/Starlette applications and shares a set
of global values and helpers with every template. The package is organized
as follows:

- config.py: Renderer settings and option resolution
- registry.py: Process-wide registry of template globals
- capabilities.py: Detection of request-derived data (flash, CSRF, nonce, input)
- middleware.py: Request middleware that injects those values as globals
- engine.py: Jinja2 + pypugjs engine used to render .pug files and strings
- templating.py: The Pug renderer (render, render_string, TemplateResponse)
- dependencies.py: FastAPI dependency injection functions
- cli.py: Typer CLI entry point

Subpackages:
- commands/: Developer commands (make:pug)
- utils/: File helpers
"""

from fastapi_pug.config import Config, PugSettings
from fastapi_pug.registry import GlobalRegistry
from fastapi_pug.templating import Pug

__all__ = ["Config", "GlobalRegistry", "Pug", "PugSettings"]
