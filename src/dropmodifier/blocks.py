"""Block identifiers and the bundled block registry."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

NAMESPACE = "minecraft"
PREFIX = f"{NAMESPACE}:"


def format_block(block_name: str) -> str:
    """Normalise a block name to a lowercase, namespaced id.

    Args:
        block_name: Block name as typed, e.g. "WHEAT" or "minecraft:wheat"

    Returns:
        Namespaced block id, e.g. "minecraft:wheat"
    """
    block_name = block_name.strip().lower()
    if not block_name.startswith(PREFIX):
        return PREFIX + block_name
    return block_name


def get_package_data_dir() -> Path:
    """Get the path to the bundled data directory.

    Returns:
        Path to the data directory within the package
    """
    data_dir = Path(__file__).parent / "data"

    if not data_dir.exists():
        raise FileNotFoundError(
            f"Data directory not found at {data_dir}. "
            "This may indicate a packaging issue."
        )

    return data_dir


@dataclass
class BlockRegistry:
    """Known block ids, in registry order, with their ageable flags."""

    blocks: list[str] = field(default_factory=list)
    ageable: set[str] = field(default_factory=set)

    def __contains__(self, block_id: str) -> bool:
        return format_block(block_id) in self.blocks

    def __len__(self) -> int:
        return len(self.blocks)

    def ids(self) -> list[str]:
        return list(self.blocks)

    def is_ageable(self, block_id: str) -> bool:
        return format_block(block_id) in self.ageable

    def complete(self, prefix: str) -> list[str]:
        """Return namespaced block ids whose name starts with prefix.

        Matching is case-insensitive and ignores the namespace, so both
        "whe" and "minecraft:whe" complete to "minecraft:wheat".
        """
        prefix = prefix.lower()
        if prefix.startswith(PREFIX):
            prefix = prefix[len(PREFIX):]
        return [
            block_id
            for block_id in self.blocks
            if block_id[len(PREFIX):].startswith(prefix)
        ]


def build_registry(data: dict[str, Any]) -> BlockRegistry:
    """Build a registry from a parsed blocks document.

    Args:
        data: Mapping with "blocks" and optional "ageable" name lists

    Returns:
        BlockRegistry with namespaced ids
    """
    blocks = [format_block(str(name)) for name in data.get("blocks") or []]
    ageable = {format_block(str(name)) for name in data.get("ageable") or []}

    unknown = ageable.difference(blocks)
    if unknown:
        raise ValueError(f"Ageable blocks missing from registry: {sorted(unknown)}")

    return BlockRegistry(blocks=blocks, ageable=ageable)


def load_block_registry(path: Optional[Path] = None) -> BlockRegistry:
    """Load the block registry.

    Args:
        path: Registry file; defaults to the bundled data/blocks.yaml

    Returns:
        BlockRegistry
    """
    if path is None:
        path = get_package_data_dir() / "blocks.yaml"

    if not path.exists():
        raise FileNotFoundError(f"Block registry not found at {path}")

    with open(path) as f:
        return build_registry(yaml.safe_load(f) or {})
