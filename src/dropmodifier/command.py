"""The /drops command.

Usage: /drops <subcommand> [args...]

Subcommands:
    set <block> <chance> - Sets the drop chance for a block
    get [block]          - Gets the drop chance for a block, or lists all
    remove <block>       - Removes the drop chance for a block

Handlers return whether the command was used correctly. False tells the
host to show the usage string; permission and validation failures that are
already explained to the sender return True.
"""

import logging
from typing import Callable, Optional

from rich.text import Text

from .blocks import BlockRegistry, format_block
from .config import ChanceStore, parse_chance
from .errors import InvalidChanceError
from .host import CommandSender

logger = logging.getLogger(__name__)

ERROR_NO_PERMISSION = "You do not have permission to use this command!"
ERROR_INVALID_SUBCOMMAND = "Invalid subcommand"
ERROR_PROVIDE_SUBCOMMAND = "Please provide a subcommand"
ERROR_PROVIDE_BLOCK = "Please provide a block"
ERROR_PROVIDE_CHANCE = "Please provide a drop chance"
ERROR_NO_CHANCES = "No drop chances have been set"
ERROR_NO_CHANCE_BLOCK = "No drop chance has been set for: {block}"
MESSAGE_SET_CHANCE = "Set drop chance for {block} to "
MESSAGE_GET_CHANCE = "Drop chance for {block} is "
MESSAGE_REMOVE_CHANCE = "Removed drop chance for {block}"
MESSAGE_LIST_CHANCES = "Drop chances:"

PERMISSION_USE = "dropmodifier.use"
PERMISSION_SET = "dropmodifier.set"
PERMISSION_GET = "dropmodifier.get"
PERMISSION_REMOVE = "dropmodifier.remove"

SUBCOMMANDS = ["set", "get", "remove"]

USAGE = "/drops <set|get|remove> [block] [chance]"

# Minecraft named text colours
RED = "#FF5555"
GOLD = "#FFAA00"
YELLOW = "#FFFF55"
GREEN = "#55FF55"


def color_chance(chance: float) -> Text:
    """Render a chance coloured from red (rare) to green (likely)."""
    if chance < 0.25:
        color = RED
    elif chance < 0.5:
        color = GOLD
    elif chance < 0.75:
        color = YELLOW
    else:
        color = GREEN
    return Text(str(chance), style=color)


def _error(sender: CommandSender, message: str) -> None:
    sender.send_message(Text(message, style=RED))


def _has_block(args: list[str]) -> bool:
    """Blank or whitespace-only block ids count as missing."""
    return bool(args) and bool(args[0].strip())


class DropsCommand:
    """Executor and tab completer for /drops."""

    def __init__(self, store: ChanceStore, registry: BlockRegistry):
        self.store = store
        self.registry = registry
        self._handlers: dict[str, Callable[[CommandSender, list[str]], bool]] = {
            "set": self.handle_set,
            "get": self.handle_get,
            "remove": self.handle_remove,
        }

    def complete(self, sender: CommandSender, args: list[str]) -> Optional[list[str]]:
        """Completions for the final argument, or None."""
        if len(args) == 1:
            current = args[0].lower()
            return [sub for sub in SUBCOMMANDS if sub.startswith(current)]

        if len(args) == 2:
            return self.registry.complete(args[1])

        return None

    def execute(self, sender: CommandSender, args: list[str]) -> bool:
        if not sender.has_permission(PERMISSION_USE):
            _error(sender, ERROR_NO_PERMISSION)
            return True

        if not args:
            _error(sender, ERROR_PROVIDE_SUBCOMMAND)
            return False

        subcommand = args[0].lower()
        handler = self._handlers.get(subcommand)
        if handler is None:
            _error(sender, ERROR_INVALID_SUBCOMMAND)
            return False

        logger.debug(f"{sender.name} ran /drops {' '.join(args)}")
        return handler(sender, list(args[1:]))

    def handle_set(self, sender: CommandSender, args: list[str]) -> bool:
        """Usage: /drops set <block> <chance>"""
        if not sender.has_permission(PERMISSION_SET):
            _error(sender, ERROR_NO_PERMISSION)
            return True

        if not _has_block(args):
            _error(sender, ERROR_PROVIDE_BLOCK)
            return False

        if len(args) < 2:
            _error(sender, ERROR_PROVIDE_CHANCE)
            return False

        try:
            chance = parse_chance(args[1])
        except InvalidChanceError as e:
            _error(sender, str(e))
            return True

        block = self.store.set(args[0], chance)

        sender.send_message(
            Text(MESSAGE_SET_CHANCE.format(block=block)) + color_chance(chance)
        )
        return True

    def handle_get(self, sender: CommandSender, args: list[str]) -> bool:
        """Usage: /drops get [block]"""
        if not sender.has_permission(PERMISSION_GET):
            _error(sender, ERROR_NO_PERMISSION)
            return True

        if len(args) < 1:
            entries = self.store.items()
            if not entries:
                _error(sender, ERROR_NO_CHANCES)
                return True

            sender.send_message(Text(MESSAGE_LIST_CHANCES, style=GOLD))
            for block, chance in entries:
                sender.send_message(Text(f" - {block}: ") + color_chance(chance))
            return True

        if not _has_block(args):
            _error(sender, ERROR_PROVIDE_BLOCK)
            return False

        block = format_block(args[0])
        chance = self.store.get(block)
        if chance is None:
            _error(sender, ERROR_NO_CHANCE_BLOCK.format(block=block))
            return True

        sender.send_message(
            Text(MESSAGE_GET_CHANCE.format(block=block)) + color_chance(chance)
        )
        return True

    def handle_remove(self, sender: CommandSender, args: list[str]) -> bool:
        """Usage: /drops remove <block>"""
        if not sender.has_permission(PERMISSION_REMOVE):
            _error(sender, ERROR_NO_PERMISSION)
            return True

        if not _has_block(args):
            _error(sender, ERROR_PROVIDE_BLOCK)
            return False

        block = format_block(args[0])
        if not self.store.remove(block):
            _error(sender, ERROR_NO_CHANCE_BLOCK.format(block=block))
            return True

        sender.send_message(
            Text(MESSAGE_REMOVE_CHANCE.format(block=block), style=GREEN)
        )
        return True
