from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from ghp_hooks.hooks.store import HookStore
from ghp_hooks.share import _resolve_config_dir


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the configuration directory at a temporary location."""
    path = tmp_path / "config"
    monkeypatch.setenv("GHP_CONFIG_DIR", str(path))
    _resolve_config_dir.cache_clear()
    yield path
    _resolve_config_dir.cache_clear()
    logger.remove()


@pytest.fixture
def hooks_file(tmp_path: Path) -> Path:
    return tmp_path / "hooks" / "event-hooks.json"


@pytest.fixture
def store(hooks_file: Path) -> HookStore:
    return HookStore(hooks_file)
