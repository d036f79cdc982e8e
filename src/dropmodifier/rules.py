"""Drop chance rules applied when a block is broken."""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from .config import ChanceStore
from .host import AIR, BlockBreakEvent, BlockFace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakOutcome:
    """What the rules decided for one broken block."""

    block: str
    drop_items: bool
    above: str
    above_cleared: bool


def should_drop(chance: Optional[float], rng: random.Random) -> bool:
    """Roll a drop chance.

    An unconfigured chance (None) keeps the host's default and always drops.
    A chance of 0 never drops and draws no sample.

    Args:
        chance: Configured chance in [0, 1], or None
        rng: Random source

    Returns:
        True if the item should drop
    """
    if chance is None:
        return True
    if chance == 0:
        return False
    return rng.random() <= chance


class DropRules:
    """Applies configured drop chances to block break events."""

    def __init__(self, store: ChanceStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random.Random()

    def on_block_break(self, event: BlockBreakEvent) -> BreakOutcome:
        block = event.block
        block_type = block.type
        chance = self.store.get(block_type)

        above = block.relative(BlockFace.UP)
        above_type = above.type
        above_chance = self.store.get(above_type)

        # Crops above the broken block pop off with their own drop, so the
        # only way to suppress it is to remove the crop first.
        above_cleared = False
        if above_chance is not None and above.is_ageable:
            if not should_drop(above_chance, self.rng):
                above.set_type(AIR)
                above_cleared = True
                logger.debug(f"Cleared {above_type} above {block_type} (chance {above_chance})")

        if chance is None:
            return BreakOutcome(block_type, True, above_type, above_cleared)

        drop_items = should_drop(chance, self.rng)
        if not drop_items:
            event.set_drop_items(False)
        logger.debug(f"Break {block_type}: drop={drop_items} (chance {chance})")

        return BreakOutcome(block_type, drop_items, above_type, above_cleared)
