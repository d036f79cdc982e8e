"""Unit tests for config loading and the chance store.

Tests YAML parsing, defaults, environment overrides and chance persistence.
"""

import logging
from pathlib import Path

import pytest
import yaml

from dropmodifier.config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG,
    ChanceStore,
    get_config_path,
    get_log_level,
    load_config,
    parse_chance,
    write_config,
)
from dropmodifier.errors import ConfigurationError, InvalidChanceError


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_returns_defaults(self, tmp_path: Path):
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config == DEFAULT_CONFIG

    def test_defaults_are_not_shared(self, tmp_path: Path):
        """Mutating a loaded config must not leak into DEFAULT_CONFIG."""
        config = load_config(str(tmp_path / "missing.yaml"))
        config["blocks"]["minecraft:stone"] = 0.5
        assert DEFAULT_CONFIG["blocks"] == {}

    def test_reads_blocks(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("blocks:\n  minecraft:wheat: 0.5\n")

        config = load_config(str(path))

        assert config["blocks"] == {"minecraft:wheat": 0.5}
        assert config["logging"]["level"] == "INFO"

    def test_empty_blocks_section(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("blocks:\n")

        assert load_config(str(path))["blocks"] == {}

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("blocks: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(str(path))

    def test_non_mapping_document_raises(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(str(path))

    def test_blocks_must_be_mapping(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("blocks:\n  - minecraft:wheat\n")

        with pytest.raises(ConfigurationError, match="'blocks'"):
            load_config(str(path))


class TestGetConfigPath:
    """Tests for config path resolution."""

    def test_explicit_path_wins(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, "/from/env.yaml")
        assert get_config_path("/explicit.yaml") == Path("/explicit.yaml")

    def test_env_var_used(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, "/from/env.yaml")
        assert get_config_path() == Path("/from/env.yaml")

    def test_defaults_to_cwd(self, tmp_path: Path):
        assert get_config_path() == tmp_path / "dropmodifier.yaml"


class TestWriteConfig:
    """Tests for write_config function."""

    def test_creates_parent_directories(self, tmp_path: Path):
        path = tmp_path / "deep" / "nested" / "config.yaml"
        write_config(path, {"blocks": {}})
        assert path.exists()

    def test_writes_header_and_valid_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        write_config(path, {"blocks": {"minecraft:stone": 0.25}})

        text = path.read_text()
        assert text.startswith("# DropModifier Configuration")
        assert yaml.safe_load(text) == {"blocks": {"minecraft:stone": 0.25}}


class TestLogLevel:
    """Tests for get_log_level function."""

    def test_default_is_info(self):
        assert get_log_level(DEFAULT_CONFIG) == logging.INFO

    def test_reads_level_case_insensitively(self):
        assert get_log_level({"logging": {"level": "debug"}}) == logging.DEBUG

    def test_unknown_level_falls_back(self):
        assert get_log_level({"logging": {"level": "chatty"}}) == logging.INFO


class TestParseChance:
    """Tests for parse_chance function."""

    @pytest.mark.parametrize("text,expected", [("0", 0.0), ("0.5", 0.5), ("1", 1.0), (".25", 0.25)])
    def test_valid(self, text: str, expected: float):
        assert parse_chance(text) == expected

    @pytest.mark.parametrize("text", ["abc", "", "0.5x", "nan"])
    def test_not_a_number(self, text: str):
        with pytest.raises(InvalidChanceError, match="must be a number"):
            parse_chance(text)

    @pytest.mark.parametrize("text", ["-0.1", "1.01", "2", "inf"])
    def test_out_of_range(self, text: str):
        with pytest.raises(InvalidChanceError, match="between 0 and 1"):
            parse_chance(text)


class TestChanceStore:
    """Tests for ChanceStore get/set/remove/items."""

    def test_get_unset_returns_none(self, store: ChanceStore):
        assert store.get("minecraft:stone") is None

    def test_set_then_get(self, store: ChanceStore):
        store.set("stone", 0.3)
        assert store.get("minecraft:stone") == 0.3

    def test_set_normalises_block(self, store: ChanceStore):
        assert store.set("STONE", 0.3) == "minecraft:stone"
        assert "minecraft:stone" in store

    def test_set_persists_immediately(self, store: ChanceStore, config_path: Path):
        store.set("wheat", 0.5)

        on_disk = yaml.safe_load(config_path.read_text())
        assert on_disk["blocks"] == {"minecraft:wheat": 0.5}

    def test_set_rejects_out_of_range(self, store: ChanceStore, config_path: Path):
        with pytest.raises(InvalidChanceError):
            store.set("wheat", 1.5)
        assert not config_path.exists()

    def test_remove_existing(self, store: ChanceStore, config_path: Path):
        store.set("wheat", 0.5)

        assert store.remove("WHEAT") is True
        assert store.get("wheat") is None
        assert yaml.safe_load(config_path.read_text())["blocks"] == {}

    def test_remove_missing(self, store: ChanceStore):
        assert store.remove("wheat") is False

    def test_items_in_insertion_order(self, store: ChanceStore):
        store.set("wheat", 0.5)
        store.set("stone", 0.1)
        assert store.items() == [("minecraft:wheat", 0.5), ("minecraft:stone", 0.1)]

    def test_new_store_sees_saved_values(self, store: ChanceStore, config_path: Path):
        store.set("carrots", 0.75)
        assert ChanceStore(config_path).get("carrots") == 0.75

    def test_reload_picks_up_external_edits(self, store: ChanceStore, config_path: Path):
        store.set("wheat", 0.5)
        config_path.write_text("blocks:\n  minecraft:wheat: 0.9\n")

        store.reload()

        assert store.get("wheat") == 0.9

    def test_integer_chance_accepted(self, config_path: Path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("blocks:\n  minecraft:stone: 1\n")

        assert ChanceStore(config_path).get("stone") == 1.0

    def test_invalid_entries_are_ignored(self, config_path: Path, caplog):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(
            "blocks:\n"
            "  minecraft:stone: lots\n"
            "  minecraft:dirt: 3\n"
            "  minecraft:sand: true\n"
            "  minecraft:wheat: 0.5\n"
        )
        store = ChanceStore(config_path)

        with caplog.at_level(logging.WARNING):
            assert store.get("stone") is None
            assert store.get("dirt") is None
            assert store.items() == [("minecraft:wheat", 0.5)]

        assert "non-numeric" in caplog.text
        assert "between 0 and 1" in caplog.text

    def test_nan_entry_logged_as_not_a_number(self, config_path: Path, caplog):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("blocks:\n  minecraft:stone: .nan\n")
        store = ChanceStore(config_path)

        with caplog.at_level(logging.WARNING):
            assert store.get("stone") is None

        assert "must be a number" in caplog.text
        assert "between 0 and 1" not in caplog.text

    def test_invalid_entry_still_contained(self, config_path: Path):
        """remove() can clear an entry that get() refuses to read."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("blocks:\n  minecraft:stone: lots\n")
        store = ChanceStore(config_path)

        assert "stone" in store
        assert store.remove("stone") is True

    def test_open_uses_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "env.yaml"
        path.write_text("blocks:\n  minecraft:wheat: 0.2\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        store = ChanceStore.open()

        assert store.config_path == path
        assert store.get("wheat") == 0.2
