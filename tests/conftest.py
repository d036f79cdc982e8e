"""Shared pytest fixtures for DropModifier tests."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from dropmodifier.blocks import BlockRegistry, load_block_registry
from dropmodifier.command import (
    PERMISSION_GET,
    PERMISSION_REMOVE,
    PERMISSION_SET,
    PERMISSION_USE,
)
from dropmodifier.config import CONFIG_ENV_VAR, ChanceStore
from dropmodifier.host import MemoryWorld, RecordingSender

ALL_PERMISSIONS = {PERMISSION_USE, PERMISSION_SET, PERMISSION_GET, PERMISSION_REMOVE}


class FixedRandom:
    """Stands in for random.Random, returning queued samples in order."""

    def __init__(self, *values: float):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.values.pop(0)


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the real config path and working directory out of tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_log_level():
    """Undo the level the plugin sets on the dropmodifier logger."""
    yield
    logging.getLogger("dropmodifier").setLevel(logging.NOTSET)


# =============================================================================
# State Fixtures
# =============================================================================


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Path for a config file that does not exist yet."""
    return tmp_path / "plugins" / "DropModifier" / "config.yaml"


@pytest.fixture
def store(config_path: Path) -> ChanceStore:
    return ChanceStore(config_path)


@pytest.fixture(scope="session")
def registry() -> BlockRegistry:
    return load_block_registry()


@pytest.fixture
def world(registry: BlockRegistry) -> MemoryWorld:
    return MemoryWorld(registry)


@pytest.fixture
def operator() -> RecordingSender:
    """Sender holding every /drops permission."""
    return RecordingSender(name="operator", permissions=set(ALL_PERMISSIONS))


@pytest.fixture
def fixed_random() -> Callable[..., FixedRandom]:
    return FixedRandom
