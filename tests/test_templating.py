"""Tests for the Pug rendering facade."""

from __future__ import annotations

import asyncio

import pytest
from jinja2 import TemplateNotFound
from starlette.responses import HTMLResponse

from fastapi_pug.capabilities import RequestCapabilities
from fastapi_pug.templating import Pug

from .conftest import make_config


@pytest.fixture
def pug(tmp_path, engine):
    return Pug(make_config(basedir="views"), base_path=tmp_path, engine=engine)


class TestRender:
    def test_resolves_template_path(self, pug, engine, tmp_path):
        assert pug.render("users/profile") == "file:profile.pug"
        assert engine.calls[-1][1] == tmp_path / "views" / "users" / "profile.pug"

    def test_empty_options_match_no_options(self, pug, engine):
        first = pug.render("x", {})
        first_options = dict(engine.last_options)

        second = pug.render("x")
        second_options = dict(engine.last_options)

        assert first == second
        assert first_options == second_options

    def test_no_options_uses_registry_snapshot(self, pug, engine):
        pug.render("x")
        assert engine.last_options is pug.registry.snapshot()

    def test_registry_wins_over_call_options_by_default(self, pug, engine):
        assert pug.options["pretty"] is False
        call_options = {"pretty": True, "title": "Home"}

        pug.render("x", call_options)

        assert engine.last_options["pretty"] is False
        assert engine.last_options["title"] == "Home"
        # Registry values are copied onto the caller's dict
        assert engine.last_options is call_options
        assert call_options["pretty"] is False

    def test_call_options_win_when_configured(self, tmp_path, engine):
        pug = Pug(make_config(basedir="views", call_options_win=True), base_path=tmp_path, engine=engine)
        call_options = {"pretty": True}

        pug.render("x", call_options)

        assert engine.last_options["pretty"] is True
        assert call_options == {"pretty": True}
        assert pug.options["pretty"] is False

    def test_globals_are_visible_to_render(self, pug, engine):
        pug.set_global("siteName", "Docs")
        pug.global_("year", 2026)

        pug.render("x", {"title": "Home"})

        assert engine.last_options["siteName"] == "Docs"
        assert engine.last_options["year"] == 2026

    def test_engine_errors_propagate(self, tmp_path):
        class FailingEngine:
            def render_file(self, path, options):
                raise TemplateNotFound(str(path))

            def render_source(self, text, options):
                raise ValueError("bad template")

        pug = Pug(make_config(basedir="views"), base_path=tmp_path, engine=FailingEngine())

        with pytest.raises(TemplateNotFound):
            pug.render("missing")
        with pytest.raises(ValueError, match="bad template"):
            pug.render_string("p(")

    def test_make_is_async_render(self, pug, engine):
        result = asyncio.run(pug.make("x", {"title": "Async"}))

        assert result == "file:x.pug"
        assert engine.last_options["title"] == "Async"


class TestRenderString:
    def test_delegates_source(self, pug, engine):
        assert pug.render_string("p Hello") == "source:p Hello"
        assert engine.calls[-1][0] == "source"

    def test_same_merge_policy(self, pug, engine):
        pug.render_string("p= title", {"title": "Hi", "pretty": True})

        assert engine.last_options["title"] == "Hi"
        assert engine.last_options["pretty"] is False


class TestRequestIsolation:
    def test_bound_request_globals_are_merged(self, tmp_path, engine):
        pug = Pug(make_config(basedir="views", isolate_requests=True), base_path=tmp_path, engine=engine)

        with pug.context_adapter.bind(RequestCapabilities(csrf_token=lambda: "t-1")):
            pug.render("x")
            assert engine.last_options["csrfToken"] == "t-1"

        pug.render("x")
        assert "csrfToken" not in engine.last_options
        assert "csrfToken" not in pug.registry


class TestTemplateResponse:
    def test_returns_html_response(self, pug):
        response = pug.TemplateResponse("home", {"title": "Home"}, status_code=201, headers={"X-View": "home"})

        assert isinstance(response, HTMLResponse)
        assert response.status_code == 201
        assert response.body == b"file:home.pug"
        assert response.headers["x-view"] == "home"


def test_default_basedir_warns(tmp_path, engine, caplog):
    with caplog.at_level("WARNING"):
        pug = Pug(make_config(), base_path=tmp_path, engine=engine)

    assert pug.views_path == tmp_path / "resources" / "views"
    assert "not set" in caplog.text
