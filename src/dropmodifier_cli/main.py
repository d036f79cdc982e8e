"""DropModifier CLI entry point."""

import logging
import random
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from dropmodifier.blocks import format_block, load_block_registry
from dropmodifier.command import USAGE, DropsCommand, color_chance
from dropmodifier.config import ChanceStore
from dropmodifier.errors import ConfigurationError
from dropmodifier.host import ConsoleSender, MemoryBreakEvent, MemoryWorld
from dropmodifier.rules import DropRules

from . import __version__
from .console import console, create_table, print_error, print_panel, print_table, print_warning

app = typer.Typer(
    name="drops",
    help="DropModifier - per-block drop chances for your server",
    no_args_is_help=True,
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Position of the simulated block; the block above sits at y + 1.
SIM_POSITION = (0, 64, 0)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"drops version {__version__}")
        raise typer.Exit()


def complete_block(incomplete: str) -> list[str]:
    """Shell completion for block arguments."""
    return load_block_registry().complete(incomplete)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: $DROPMODIFIER_CONFIG_PATH or ./dropmodifier.yaml)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """DropModifier - per-block drop chances for your server."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    ctx.obj = {"config": str(config) if config else None}


def _open_store(ctx: typer.Context) -> ChanceStore:
    config_path = (ctx.obj or {}).get("config")
    try:
        return ChanceStore.open(config_path)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)


def _run(ctx: typer.Context, args: list[str]) -> None:
    """Run /drops with console permissions, exiting 2 on bad usage."""
    store = _open_store(ctx)
    command = DropsCommand(store, load_block_registry())
    if not command.execute(ConsoleSender(console), args):
        console.print(f"Usage: {escape(USAGE)}")
        raise typer.Exit(2)


@app.command(name="set")
def set_chance(
    ctx: typer.Context,
    block: str = typer.Argument(
        ..., help="Block id, e.g. wheat or minecraft:wheat", autocompletion=complete_block
    ),
    chance: str = typer.Argument(..., help="Drop chance between 0 and 1"),
) -> None:
    """Set the drop chance for a block."""
    _run(ctx, ["set", block, chance])


@app.command(name="get")
def get_chance(
    ctx: typer.Context,
    block: Optional[str] = typer.Argument(
        None, help="Block id; omit to list every chance", autocompletion=complete_block
    ),
) -> None:
    """Get the drop chance for a block, or all blocks."""
    _run(ctx, ["get"] + ([block] if block is not None else []))


@app.command(name="remove")
def remove_chance(
    ctx: typer.Context,
    block: str = typer.Argument(..., help="Block id", autocompletion=complete_block),
) -> None:
    """Remove the drop chance for a block."""
    _run(ctx, ["remove", block])


@app.command(name="list")
def list_chances(ctx: typer.Context) -> None:
    """Show every configured drop chance as a table."""
    store = _open_store(ctx)
    entries = store.items()

    if not entries:
        console.print("[dim]No drop chances have been set.[/dim]")
        return

    table = create_table("Drop Chances")
    table.add_column("Block", style="cyan")
    table.add_column("Chance", justify="right")

    for block, chance in entries:
        table.add_row(block, color_chance(chance))

    print_table(table)
    console.print(f"\n[dim]Config: {escape(str(store.config_path))}[/dim]")


@app.command(name="simulate")
def simulate(
    ctx: typer.Context,
    block: str = typer.Argument(..., help="Block to break", autocompletion=complete_block),
    above: Optional[str] = typer.Option(
        None,
        "--above",
        "-a",
        help="Block sitting on top of the broken block",
        autocompletion=complete_block,
    ),
    ageable: Optional[bool] = typer.Option(
        None,
        "--ageable/--not-ageable",
        help="Treat the block above as a crop (default: from the block registry)",
    ),
    trials: int = typer.Option(1000, "--trials", "-n", min=1, help="Number of breaks"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
) -> None:
    """Break a block repeatedly and report observed drop rates."""
    store = _open_store(ctx)
    registry = load_block_registry()
    rules = DropRules(store, random.Random(seed))

    block_id = format_block(block)
    above_id = format_block(above) if above else None
    for name in filter(None, [block_id, above_id]):
        if name not in registry:
            print_warning(f"{name} is not a known block")

    x, y, z = SIM_POSITION
    drops = 0
    cleared = 0
    for _ in range(trials):
        world = MemoryWorld(registry)
        world.set_type(SIM_POSITION, block_id)
        if above_id:
            world.set_type((x, y + 1, z), above_id, ageable=ageable)

        outcome = rules.on_block_break(MemoryBreakEvent(world.block_at(x, y, z)))
        drops += outcome.drop_items
        cleared += outcome.above_cleared

    print_panel(
        "Simulation",
        escape(f"Broke {block_id} {trials} times" + (f" under {above_id}" if above_id else "")),
    )

    table = create_table()
    table.add_column("Rule", style="cyan")
    table.add_column("Block")
    table.add_column("Configured", justify="right")
    table.add_column("Observed", justify="right")

    chance = store.get(block_id)
    table.add_row(
        "drop",
        block_id,
        "default" if chance is None else str(chance),
        f"{drops / trials:.3f}",
    )

    if above_id:
        above_chance = store.get(above_id)
        table.add_row(
            "keep above",
            above_id,
            "default" if above_chance is None else str(above_chance),
            f"{1 - cleared / trials:.3f}",
        )

    print_table(table)


if __name__ == "__main__":
    app()
