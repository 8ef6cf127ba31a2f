"""Shared fixtures for renderer tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from fastapi_pug.config import Config


class RecordingEngine:
    """Template engine double that records what it was asked to render."""

    def __init__(self):
        self.calls = []

    def render_file(self, path, options):
        self.calls.append(("file", Path(path), options))
        return f"file:{Path(path).name}"

    def render_source(self, text, options):
        self.calls.append(("source", text, options))
        return f"source:{text}"

    @property
    def last_options(self):
        return self.calls[-1][2]


def make_config(**pug) -> Config:
    """Config with the given app.pug.* values."""
    return Config({"app": {"pug": pug}})


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def views(tmp_path):
    """Views directory under a temporary application root."""
    path = tmp_path / "views"
    path.mkdir()
    return path
