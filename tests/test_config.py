"""Tests for configuration loading and option resolution."""

from __future__ import annotations

import logging

from fastapi_pug.config import Config, PugSettings, resolve_options, views_path

from .conftest import make_config


def _warnings(caplog):
    return [r for r in caplog.records if r.name == "fastapi_pug.config" and r.levelno == logging.WARNING]


class TestConfig:
    def test_get_dotted_key(self):
        config = make_config(pretty=True)
        assert config.get("app.pug.pretty") is True

    def test_get_missing_key_returns_default(self):
        config = make_config()
        assert config.get("app.pug.basedir") is None
        assert config.get("app.pug.globals", {}) == {}
        assert config.get("app.other.key", "fallback") == "fallback"

    def test_get_through_non_mapping_returns_default(self):
        config = make_config(pretty=True)
        assert config.get("app.pug.pretty.deeper", "x") == "x"

    def test_from_settings_drops_unset_fields(self):
        config = Config.from_settings(PugSettings(basedir="templates", self_context=True))

        assert config.get("app.pug.basedir") == "templates"
        assert config.get("app.pug.self") is True
        assert config.get("app.pug.doctype") is None
        assert config.get("app.pug.globals") == {}

    def test_settings_read_environment(self, monkeypatch):
        monkeypatch.setenv("PUG_PRETTY", "true")
        monkeypatch.setenv("PUG_BASEDIR", "pages")

        settings = PugSettings()

        assert settings.pretty is True
        assert settings.basedir == "pages"


class TestResolveOptions:
    def test_missing_basedir_defaults_and_warns_once(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="fastapi_pug.config"):
            options = resolve_options(make_config(), tmp_path)

        assert options["basedir"] == tmp_path / "resources" / "views"
        assert len(_warnings(caplog)) == 1

    def test_configured_basedir_does_not_warn(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="fastapi_pug.config"):
            options = resolve_options(make_config(basedir="templates"), tmp_path)

        assert options["basedir"] == tmp_path / "templates"
        assert _warnings(caplog) == []

    def test_defaults(self, tmp_path):
        options = resolve_options(make_config(basedir="views"), tmp_path)

        assert options["pretty"] is False
        assert options["cache"] is False
        assert options["doctype"] is None
        assert options["filters"] is None
        assert options["self"] is False
        assert options["debug"] is False

    def test_copies_configured_values(self, tmp_path):
        filters = {"shout": str.upper}
        options = resolve_options(
            make_config(basedir="views", pretty=True, cache=True, doctype="html", filters=filters, debug=True),
            tmp_path,
        )

        assert options["pretty"] is True
        assert options["cache"] is True
        assert options["doctype"] == "html"
        assert options["filters"] is filters
        assert options["debug"] is True

    def test_falsy_values_fall_back_to_defaults(self, tmp_path):
        options = resolve_options(make_config(basedir="views", pretty=0, doctype=""), tmp_path)

        assert options["pretty"] is False
        assert options["doctype"] is None

    def test_globals_override_fixed_options(self, tmp_path):
        options = resolve_options(
            make_config(basedir="views", pretty=False, globals={"pretty": True, "siteName": "Docs"}),
            tmp_path,
        )

        assert options["pretty"] is True
        assert options["siteName"] == "Docs"

    def test_works_with_any_get_source(self, tmp_path):
        class DictSource:
            def __init__(self, values):
                self.values = values

            def get(self, key, default=None):
                return self.values.get(key, default)

        options = resolve_options(DictSource({"app.pug.basedir": "pages", "app.pug.cache": True}), tmp_path)

        assert options["basedir"] == tmp_path / "pages"
        assert options["cache"] is True

    def test_views_path_matches_resolved_basedir(self, tmp_path):
        config = make_config(basedir="pages")
        assert views_path(config, tmp_path) == resolve_options(config, tmp_path)["basedir"]
