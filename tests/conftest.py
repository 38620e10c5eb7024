"""Shared test fixtures for warble."""

from __future__ import annotations

import textwrap
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def controllers_dir(tmp_path: Path) -> Path:
    """Create an empty controllers/ directory."""
    d = tmp_path / "controllers"
    d.mkdir()
    return d


def write_controller(controllers_dir: Path, name: str, content: str) -> Path:
    """Write a controller module (dedented) and return its path."""
    p = controllers_dir / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(content))
    return p


class RecordingRenderer:
    """Renderer collaborator that records each call and returns it."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, view_path: str, data: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        self.calls.append((view_path, data))
        return view_path, data


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


def fake_request(path: str = "/", **path_params: str) -> Any:
    """Minimal stand-in for ``chirp.Request`` with captured path values."""
    return SimpleNamespace(path=path, path_params=dict(path_params))
