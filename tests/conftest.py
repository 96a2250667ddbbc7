from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def write_template(tmp_path: Path) -> Callable[[str], Path]:
    """Write template source to a fresh file under tmp_path and return its path."""
    counter = {"n": 0}

    def _write(source: str, name: str | None = None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"template-{counter['n']}.ctmpl")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def utf8() -> str:
    """Canonical encoding used throughout tests."""
    return "utf-8"


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the developer's ~/.ctmpl/config.yml out of unit tests.

    If a test needs user config, it should write it under the returned home.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home
