"""
make:pug - Scaffold a Pug View

Creates a new view file from a fixed skeleton:

    fastapi-pug make:pug UserView.profile --layout layouts/main.pug
    -> resources/views/user/profile.pug (extending layouts/main)

The view path is derived from the name: it is lower-cased, every "view" is
removed and dots become directory separators. The command must be run from
the project root (the directory holding pyproject.toml).
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Optional

import typer
from jinja2 import Environment
from typing_extensions import Annotated

from fastapi_pug.config import DEFAULT_BASEDIR
from fastapi_pug.engine import TEMPLATE_EXTENSION
from fastapi_pug.utils.io import atomic_write_text

logger = logging.getLogger(__name__)

# File whose presence marks the project root
PROJECT_SENTINEL = "pyproject.toml"

SKELETON = """\
{% if layout %}
extends {{ layout }}

block content
  h1 {{ title }}
{% else %}
doctype html
html
  head
    title {{ title }}
  body
    block content
      h1 {{ title }}
{% endif %}
"""


class ScaffoldError(Exception):
    """Base error for view scaffolding."""


class ScaffoldPreconditionError(ScaffoldError):
    """Raised when the command is not run from a project root."""


class ViewExistsError(ScaffoldError):
    """Raised instead of overwriting an existing view."""


def view_path(name: str) -> PurePosixPath:
    """
    Derive the relative view path for a view name.

    Examples:
        >>> view_path("UserView.profile")
        PurePosixPath('resources/views/user/profile.pug')
        >>> view_path("admin.dashboard")
        PurePosixPath('resources/views/admin/dashboard.pug')
    """
    stripped = name.lower().replace("view", "")
    relative = stripped.replace(".", "/")
    if not relative.strip("/"):
        raise ScaffoldError(f"Invalid view name: {name!r}")
    return PurePosixPath(DEFAULT_BASEDIR) / f"{relative}{TEMPLATE_EXTENSION}"


def ensure_in_project_root(cwd: Path) -> None:
    """
    Ensure the command is executed within the project root.

    Raises:
        ScaffoldPreconditionError: If the sentinel file is missing
    """
    if not (cwd / PROJECT_SENTINEL).exists():
        raise ScaffoldPreconditionError(
            f"Make sure you are inside the project root ({PROJECT_SENTINEL} not found) "
            "to run the make:pug command"
        )


def render_skeleton(title: str, layout: Optional[str] = None) -> str:
    env = Environment(trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)
    if layout:
        layout = layout.replace(TEMPLATE_EXTENSION, "", 1)
    return env.from_string(SKELETON).render(title=title, layout=layout or None)


def generate_blueprint(name: str, layout: Optional[str] = None, cwd: Optional[Path] = None) -> str:
    """
    Generate a Pug view file.

    Args:
        name: View name (e.g. "UserView.profile")
        layout: Layout to extend; a .pug suffix is dropped
        cwd: Project root, defaults to the current working directory

    Returns:
        Created file path, relative to the project root

    Raises:
        ScaffoldError: Not in a project root, bad name, or the view exists
    """
    cwd = Path(cwd) if cwd is not None else Path.cwd()
    ensure_in_project_root(cwd)

    relative = view_path(name)
    target = cwd / relative
    if target.exists():
        raise ViewExistsError(f"{relative} already exists")

    atomic_write_text(target, render_skeleton(relative.stem, layout))
    logger.info("Created view %s", relative)
    return relative.as_posix()


def make_pug(
    name: Annotated[str, typer.Argument(help="Name of the view")],
    layout: Annotated[
        Optional[str],
        typer.Option("--layout", "-l", help="Define a layout to extend", metavar="LAYOUT"),
    ] = None,
) -> None:
    """Make a pug view file."""
    try:
        created = generate_blueprint(name, layout)
    except (ScaffoldError, OSError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{typer.style('create', fg=typer.colors.GREEN)}  {created}")
