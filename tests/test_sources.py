from __future__ import annotations

from pathlib import Path

import pytest

from justmcp.config import ServerConfig
from justmcp.models import Recipe
from justmcp.sources import load_recipes_for


def test_dump_is_default(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr("justmcp.sources.load_recipes", lambda _config: [Recipe("from_dump")])
    monkeypatch.setattr("justmcp.sources.load_recipes_from_listing", lambda _config: [Recipe("from_list")])

    assert [r.name for r in load_recipes_for(ServerConfig(project_dir=tmp_path))] == ["from_dump"]
    assert [r.name for r in load_recipes_for(ServerConfig(project_dir=tmp_path, source="list"))] == ["from_list"]
