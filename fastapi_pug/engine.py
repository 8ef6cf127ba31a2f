"""Pug template engine built on Jinja2 and the pypugjs extension."""

import logging
import os
from pathlib import Path
from typing import Any, Protocol

from jinja2 import Environment, FileSystemLoader
from pypugjs.ext.jinja import PyPugJSExtension

logger = logging.getLogger(__name__)

TEMPLATE_EXTENSION = ".pug"

# Name used when compiling literal source; the extension only converts .pug names
STRING_TEMPLATE_NAME = "<string>" + TEMPLATE_EXTENSION

# Variable holding all locals when the "self" option is on
SELF_NAMESPACE = "locals"


class TemplateEngine(Protocol):
    """What the renderer needs from a template engine."""

    def render_file(self, path: Path | str, options: dict[str, Any]) -> str: ...

    def render_source(self, text: str, options: dict[str, Any]) -> str: ...


class PugExtension(PyPugJSExtension):
    """pypugjs extension whose compiler options belong to one environment."""

    def __init__(self, environment: Environment):
        # The base class keeps options on the class; give each environment its own copy
        self.options = dict(getattr(PyPugJSExtension, "options", {}))
        super().__init__(environment)


class PugEngine:
    """
    Renders Pug files and strings through Jinja2.

    Options double as template locals, the same way a Pug options object
    does. Recognised options: basedir, pretty, cache, doctype, filters,
    self, debug. Errors raised by Jinja2 or pypugjs propagate unchanged.
    """

    def __init__(self) -> None:
        self._environments: dict[tuple, Environment] = {}

    def render_file(self, path: Path | str, options: dict[str, Any]) -> str:
        env = self._environment(options)
        basedir = options.get("basedir") or "."
        name = Path(os.path.relpath(path, basedir)).as_posix()

        if options.get("debug"):
            source, _, _ = env.loader.get_source(env, name)
            logger.debug("Compiled %s:\n%s", name, env.preprocess(source, name))

        template = env.get_template(name)
        return template.render(self._context(options))

    def render_source(self, text: str, options: dict[str, Any]) -> str:
        env = self._environment(options)
        compiled = env.preprocess(text, STRING_TEMPLATE_NAME)

        if options.get("debug"):
            logger.debug("Compiled %s:\n%s", STRING_TEMPLATE_NAME, compiled)

        return env.from_string(compiled).render(self._context(options))

    def _environment(self, options: dict[str, Any]) -> Environment:
        basedir = str(options.get("basedir") or ".")
        pretty = bool(options.get("pretty"))
        doctype = options.get("doctype")
        cache = bool(options.get("cache"))
        filters = options.get("filters") or {}

        key = (basedir, pretty, doctype, cache, tuple(sorted(filters.items())))
        env = self._environments.get(key)
        if env is None:
            env = Environment(
                loader=FileSystemLoader(basedir),
                extensions=[PugExtension],
                autoescape=False,
                cache_size=400 if cache else 0,
            )
            compiler_options = env.extensions[PugExtension.identifier].options
            compiler_options["pretty"] = pretty
            if doctype:
                compiler_options["doctype"] = doctype
            # Pug :name filter blocks, called as filter(text, attrs)
            if filters:
                compiler_options["filters"] = dict(filters)
            self._environments[key] = env

        return env

    @staticmethod
    def _context(options: dict[str, Any]) -> dict[str, Any]:
        # Jinja2 binds `self` to the template reference, so self mode uses locals.<name>
        if options.get("self"):
            return {SELF_NAMESPACE: options}
        return options
