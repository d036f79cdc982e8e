"""Host interfaces and in-memory implementations.

The game server owns the world, event dispatch and command routing. The
protocols below are the narrow slice of it that DropModifier relies on.
MemoryWorld and friends implement them for the simulator and tests.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, Union

from rich.console import Console
from rich.text import Text

from .blocks import BlockRegistry, format_block

logger = logging.getLogger(__name__)

AIR = "minecraft:air"

Message = Union[str, Text]


class BlockFace(Enum):
    """Direction from a block to one of its neighbours."""

    UP = (0, 1, 0)
    DOWN = (0, -1, 0)
    NORTH = (0, 0, -1)
    SOUTH = (0, 0, 1)
    EAST = (1, 0, 0)
    WEST = (-1, 0, 0)

    @property
    def offset(self) -> tuple[int, int, int]:
        return self.value


class CommandSender(Protocol):
    """Anything that can run a command and receive messages."""

    name: str

    def has_permission(self, node: str) -> bool: ...

    def send_message(self, message: Message) -> None: ...


class Block(Protocol):
    """A block at a fixed position in the world."""

    @property
    def type(self) -> str: ...

    @property
    def is_ageable(self) -> bool: ...

    def relative(self, face: BlockFace) -> "Block": ...

    def set_type(self, block_type: str) -> None: ...


class BlockBreakEvent(Protocol):
    """Fired by the host when a player breaks a block."""

    @property
    def block(self) -> Block: ...

    def set_drop_items(self, drop_items: bool) -> None: ...


class Host(Protocol):
    """Plugin-facing services of the game server."""

    def register_listener(self, plugin: Any) -> None: ...

    def get_command(self, name: str) -> Optional[Any]: ...

    def disable_plugin(self, plugin: Any) -> None: ...


# =============================================================================
# In-memory implementations
# =============================================================================


class MemoryWorld:
    """Sparse block grid. Unset positions are air."""

    def __init__(self, registry: Optional[BlockRegistry] = None):
        self.registry = registry
        self._blocks: dict[tuple[int, int, int], str] = {}
        self._ageable: set[tuple[int, int, int]] = set()

    def get_type(self, position: tuple[int, int, int]) -> str:
        return self._blocks.get(position, AIR)

    def set_type(
        self,
        position: tuple[int, int, int],
        block_type: str,
        ageable: Optional[bool] = None,
    ) -> None:
        """Place a block; ageable defaults to the registry's flag."""
        block_type = format_block(block_type)
        if block_type == AIR:
            self._blocks.pop(position, None)
        else:
            self._blocks[position] = block_type

        if ageable is None:
            ageable = bool(self.registry and self.registry.is_ageable(block_type))
        if ageable and block_type != AIR:
            self._ageable.add(position)
        else:
            self._ageable.discard(position)

    def is_ageable(self, position: tuple[int, int, int]) -> bool:
        return position in self._ageable

    def block_at(self, x: int, y: int, z: int) -> "MemoryBlock":
        return MemoryBlock(self, (x, y, z))


@dataclass(frozen=True)
class MemoryBlock:
    world: MemoryWorld
    position: tuple[int, int, int]

    @property
    def type(self) -> str:
        return self.world.get_type(self.position)

    @property
    def is_ageable(self) -> bool:
        return self.world.is_ageable(self.position)

    def relative(self, face: BlockFace) -> "MemoryBlock":
        dx, dy, dz = face.offset
        x, y, z = self.position
        return MemoryBlock(self.world, (x + dx, y + dy, z + dz))

    def set_type(self, block_type: str) -> None:
        self.world.set_type(self.position, block_type)


@dataclass
class MemoryBreakEvent:
    block: MemoryBlock
    drop_items: bool = True

    def set_drop_items(self, drop_items: bool) -> None:
        self.drop_items = drop_items


class ConsoleSender:
    """The server console: holds every permission, prints to the terminal."""

    name = "CONSOLE"

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def has_permission(self, node: str) -> bool:
        return True

    def send_message(self, message: Message) -> None:
        self.console.print(message)


@dataclass
class RecordingSender:
    """A sender with an explicit permission set that records what it is sent."""

    name: str = "tester"
    permissions: set[str] = field(default_factory=set)
    messages: list[Text] = field(default_factory=list)

    def has_permission(self, node: str) -> bool:
        return node in self.permissions

    def send_message(self, message: Message) -> None:
        if isinstance(message, str):
            message = Text(message)
        self.messages.append(message)

    @property
    def plain_messages(self) -> list[str]:
        return [message.plain for message in self.messages]


@dataclass
class MemoryHost:
    """Records registrations the way a server's plugin manager would."""

    commands: set[str] = field(default_factory=lambda: {"drops"})
    listeners: list[Any] = field(default_factory=list)
    disabled: list[Any] = field(default_factory=list)
    executors: dict[str, Any] = field(default_factory=dict)

    def register_listener(self, plugin: Any) -> None:
        self.listeners.append(plugin)

    def get_command(self, name: str) -> Optional["MemoryCommand"]:
        if name not in self.commands:
            return None
        return MemoryCommand(self, name)

    def disable_plugin(self, plugin: Any) -> None:
        logger.info(f"Disabling plugin {type(plugin).__name__}")
        self.disabled.append(plugin)


@dataclass
class MemoryCommand:
    host: MemoryHost
    name: str

    def set_executor(self, executor: Any) -> None:
        self.host.executors[self.name] = executor
