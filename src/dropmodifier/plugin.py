"""DropModifier plugin entry point.

Wires the chance store, drop rules and /drops command into a host server.
"""

import logging
import random
from typing import Optional

from .blocks import BlockRegistry, load_block_registry
from .command import (
    PERMISSION_GET,
    PERMISSION_REMOVE,
    PERMISSION_SET,
    PERMISSION_USE,
    USAGE,
    DropsCommand,
)
from .config import ChanceStore, get_log_level
from .host import BlockBreakEvent, CommandSender, Host
from .rules import BreakOutcome, DropRules

logger = logging.getLogger(__name__)


class DropModifierPlugin:
    """Main plugin class for DropModifier"""

    name = "DropModifier"

    commands = {
        "drops": {
            "description": "Modify block drop chances",
            "usages": [USAGE],
            "permissions": [PERMISSION_USE],
        }
    }

    permissions = {
        PERMISSION_USE: {
            "description": "Allows use of the /drops command",
            "default": "op",
        },
        PERMISSION_SET: {
            "description": "Allows setting drop chances",
            "default": "op",
        },
        PERMISSION_GET: {
            "description": "Allows viewing drop chances",
            "default": "op",
        },
        PERMISSION_REMOVE: {
            "description": "Allows removing drop chances",
            "default": "op",
        },
    }

    def __init__(
        self,
        host: Host,
        config_path: Optional[str] = None,
        rng: Optional[random.Random] = None,
        registry: Optional[BlockRegistry] = None,
    ):
        self.host = host
        self.config_path = config_path
        self.rng = rng
        self.registry = registry
        self.store: Optional[ChanceStore] = None
        self.rules: Optional[DropRules] = None
        self.command: Optional[DropsCommand] = None
        self.enabled = False

    def on_enable(self) -> None:
        """Called when the plugin is enabled."""
        self.store = ChanceStore.open(self.config_path)
        logging.getLogger("dropmodifier").setLevel(get_log_level(self.store.config))

        if self.registry is None:
            self.registry = load_block_registry()
        self.rules = DropRules(self.store, self.rng)

        logger.info("DropModifier enabled!")
        self.host.register_listener(self)

        drops_command = self.host.get_command("drops")
        if drops_command is None:
            logger.error("Could not get drops command!")
            self.host.disable_plugin(self)
            return

        self.command = DropsCommand(self.store, self.registry)
        drops_command.set_executor(self)
        self.enabled = True

    def on_disable(self) -> None:
        """Called when the plugin is disabled."""
        self.enabled = False
        logger.info("DropModifier disabled!")

    def on_block_break(self, event: BlockBreakEvent) -> Optional[BreakOutcome]:
        """Called when a block is broken."""
        if self.rules is None:
            return None
        return self.rules.on_block_break(event)

    def on_command(self, sender: CommandSender, label: str, args: list[str]) -> bool:
        if self.command is None:
            return False
        return self.command.execute(sender, args)

    def on_tab_complete(
        self, sender: CommandSender, label: str, args: list[str]
    ) -> Optional[list[str]]:
        if self.command is None:
            return None
        return self.command.complete(sender, args)
