"""DropModifier Configuration

Configuration loading with environment variable support and sensible defaults,
plus the chance store that the drops command and the break listener share.

Environment Variables:
    DROPMODIFIER_CONFIG_PATH: Path to config file (default: ./dropmodifier.yaml)

Configuration Schema:
    blocks:
        <block-id>: float - Drop chance in [0, 1] (e.g., {"minecraft:wheat": 0.5})
    logging:
        level: str - Logging level (default: "INFO")
"""

import copy
import logging
import math
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .blocks import format_block
from .errors import ConfigurationError, InvalidChanceError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DROPMODIFIER_CONFIG_PATH"
DEFAULT_CONFIG_FILE = "dropmodifier.yaml"

ERROR_INVALID_CHANCE = "Drop chance must be a number"
ERROR_CHANCE_RANGE = "Drop chance must be between 0 and 1"

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "blocks": {},
    "logging": {
        "level": "INFO",
    },
}

CONFIG_HEADER = """\
# DropModifier Configuration
# Edit with '/drops set|get|remove' in game or the 'drops' CLI.
#
# blocks: chance (0.0 - 1.0) that a broken block of that type drops its item.
#         Ageable blocks (crops) above a broken block use their own chance.
# logging: log level for the plugin (DEBUG, INFO, WARNING, ERROR)

"""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_config_path(config_path: Optional[str] = None) -> Path:
    """Resolve which config file to use.

    Priority: explicit argument > DROPMODIFIER_CONFIG_PATH > ./dropmodifier.yaml
    """
    file_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if file_path:
        return Path(file_path).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_FILE


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (config_path, DROPMODIFIER_CONFIG_PATH or ./dropmodifier.yaml)

    Args:
        config_path: Explicit config file path (overrides DROPMODIFIER_CONFIG_PATH)

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If config file exists but is invalid YAML
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    resolved_path = get_config_path(config_path)

    if not resolved_path.exists():
        logger.debug(f"Config file not found (using defaults): {resolved_path}")
        return config

    try:
        with open(resolved_path, "r") as f:
            file_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file: {e}")

    if not isinstance(file_config, dict):
        raise ConfigurationError(
            f"Config file must contain a mapping, got {type(file_config).__name__}"
        )

    if file_config.get("blocks") is None:
        file_config["blocks"] = {}
    elif not isinstance(file_config["blocks"], dict):
        raise ConfigurationError("'blocks' must be a mapping of block id to chance")

    config = _deep_merge(config, file_config)
    logger.debug(f"Loaded configuration from: {resolved_path}")
    return config


def write_config(config_path: Path, config: Dict[str, Any]) -> None:
    """Write configuration to YAML file.

    Args:
        config_path: Path to write config file
        config: Configuration dictionary
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        f.write(CONFIG_HEADER)
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def get_log_level(config: Dict[str, Any]) -> int:
    """Get the logging level from config, falling back to INFO."""
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level '{level_name}', using INFO")
        return logging.INFO
    return level


def validate_chance(chance: float) -> float:
    """Check that a chance lies in [0, 1].

    Raises:
        InvalidChanceError: If chance is NaN or out of range
    """
    if math.isnan(chance):
        raise InvalidChanceError(ERROR_INVALID_CHANCE)
    if chance < 0 or chance > 1:
        raise InvalidChanceError(ERROR_CHANCE_RANGE)
    return chance


def parse_chance(text: str) -> float:
    """Parse a drop chance typed by a user.

    Args:
        text: Raw argument, e.g. "0.25"

    Returns:
        The chance as a float

    Raises:
        InvalidChanceError: If text is not a number or is outside [0, 1]
    """
    try:
        chance = float(text)
    except (TypeError, ValueError):
        raise InvalidChanceError(ERROR_INVALID_CHANCE)
    return validate_chance(chance)


class ChanceStore:
    """Drop chances keyed by block id, backed by a YAML config file.

    Every mutation is saved immediately. Keys always pass through
    format_block, so "WHEAT" and "minecraft:wheat" address the same entry.
    """

    def __init__(self, config_path: Path, config: Optional[Dict[str, Any]] = None):
        self.config_path = Path(config_path)
        self._config = config if config is not None else load_config(str(self.config_path))

    @classmethod
    def open(cls, config_path: Optional[str] = None) -> "ChanceStore":
        path = get_config_path(config_path)
        return cls(path, load_config(str(path)))

    @property
    def config(self) -> Dict[str, Any]:
        return self._config

    @property
    def _blocks(self) -> Dict[str, Any]:
        blocks = self._config.get("blocks")
        if blocks is None:
            blocks = self._config["blocks"] = {}
        return blocks

    def reload(self) -> None:
        self._config = load_config(str(self.config_path))

    def save(self) -> None:
        write_config(self.config_path, self._config)
        logger.debug(f"Saved configuration to: {self.config_path}")

    def __contains__(self, block: str) -> bool:
        return format_block(block) in self._blocks

    def __len__(self) -> int:
        return len(self.items())

    def get(self, block: str) -> Optional[float]:
        """Get the drop chance for a block.

        Returns:
            The chance, or None if no valid chance is configured
        """
        block_id = format_block(block)
        if block_id not in self._blocks:
            return None
        return self._coerce(block_id, self._blocks[block_id])

    def set(self, block: str, chance: float) -> str:
        """Set and save the drop chance for a block.

        Returns:
            The normalised block id that was written
        """
        validate_chance(chance)
        block_id = format_block(block)
        self._blocks[block_id] = float(chance)
        self.save()
        logger.info(f"Set drop chance for {block_id} to {chance}")
        return block_id

    def remove(self, block: str) -> bool:
        """Remove and save the drop chance for a block.

        Returns:
            True if an entry was removed, False if none existed
        """
        block_id = format_block(block)
        if block_id not in self._blocks:
            return False
        del self._blocks[block_id]
        self.save()
        logger.info(f"Removed drop chance for {block_id}")
        return True

    def items(self) -> list[tuple[str, float]]:
        """All valid (block id, chance) entries in file order."""
        entries = []
        for block_id, raw in self._blocks.items():
            chance = self._coerce(str(block_id), raw)
            if chance is not None:
                entries.append((str(block_id), chance))
        return entries

    @staticmethod
    def _coerce(block_id: str, raw: Any) -> Optional[float]:
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            logger.warning(f"Ignoring non-numeric drop chance for {block_id}: {raw!r}")
            return None
        try:
            return validate_chance(float(raw))
        except InvalidChanceError as e:
            logger.warning(f"Ignoring drop chance for {block_id} ({e}): {raw!r}")
            return None
