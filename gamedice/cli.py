"""
gamedice.cli
------------

Small command line front-end for the dice generators.

Commands:
  - generators : List the available generator kinds.
  - roll       : Roll dice with a chosen generator and seed.
  - seed-info  : Show the seed a generator would start from.
  - bbs        : Build a Blum-Blum-Shub modulus from two factors and roll with it.

Environment:
  GAMEDICE_* variables are read through `DiceConfig.from_env` (see
  gamedice.config); `--config FILE` loads a JSON/YAML file instead.

Example:
  gamedice roll --generator isaac --seed 42 -n 5
  gamedice roll --generator file --file dice.txt -n 10
  gamedice bbs --p 4 --q 9 --seed 3
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional, Sequence, Tuple

import typer

from .config import DiceConfig
from .context import GeneratorContext
from .errors import DiceError
from .types.core import DieRoll, GeneratorKind

__all__ = ["app", "main"]

app = typer.Typer(
    name="gamedice",
    help="Roll fair dice from pluggable entropy sources.",
    no_args_is_help=True,
    add_completion=False,
)


def _load_config(path: Optional[str]) -> DiceConfig:
    try:
        return DiceConfig.from_file(path) if path else DiceConfig.from_env()
    except (OSError, ValueError) as e:
        raise typer.BadParameter(str(e), param_hint="--config")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _prompt_dice() -> Tuple[int, int]:
    # manual dice are not range-checked downstream
    while True:
        raw = typer.prompt("Dice (two numbers 1-6)")
        parts = raw.replace(",", " ").split()
        try:
            return DieRoll(*(int(p) for p in parts)).as_tuple()
        except (TypeError, ValueError):
            typer.echo("Enter two numbers between 1 and 6.", err=True)


def _fail(e: DiceError) -> None:
    typer.echo(str(e), err=True)
    raise typer.Exit(code=1)


@app.command("generators")
def cmd_generators() -> None:
    """List the available generator kinds."""
    for kind in GeneratorKind:
        typer.echo(f"{kind.value:<11} {kind.display_name:<20} {kind.description}")


@app.command("roll")
def cmd_roll(
    generator: Optional[str] = typer.Option(None, "--generator", "-g", help="Generator kind (default from config)."),
    seed: Optional[str] = typer.Option(None, "--seed", "-s", help="Decimal seed; omit to seed from system entropy."),
    count: int = typer.Option(1, "--count", "-n", min=1, max=100_000, help="Number of rolls."),
    dice_file: Optional[str] = typer.Option(None, "--file", "-f", help="Dice file for the 'file' generator."),
    as_json: bool = typer.Option(False, "--json", help="Print rolls as JSON."),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="JSON/YAML config file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Roll dice and print one pair per line."""
    _setup_logging(verbose)
    cfg = _load_config(config)
    try:
        with GeneratorContext(
            generator, config=cfg, seed=seed, manual_dice=_prompt_dice, replay_path=dice_file
        ) as ctx:
            rolls = [ctx.roll().as_tuple() for _ in range(count)]
            counter = ctx.query_counter_display()
            kind = ctx.kind
    except DiceError as e:
        _fail(e)
        return

    if as_json:
        typer.echo(json.dumps({"generator": kind.value, "rolls": rolls}))
        return
    for first, second in rolls:
        typer.echo(f"{first} {second}")
    if counter:
        typer.echo(counter)


@app.command("seed-info")
def cmd_seed_info(
    generator: Optional[str] = typer.Option(None, "--generator", "-g", help="Generator kind (default from config)."),
    seed: Optional[str] = typer.Option(None, "--seed", "-s", help="Decimal seed; omit to seed from system entropy."),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="JSON/YAML config file."),
) -> None:
    """Show the seed the generator starts from."""
    cfg = _load_config(config)
    try:
        with GeneratorContext(generator, config=cfg, seed=seed) as ctx:
            typer.echo(ctx.query_seed_display())
    except DiceError as e:
        _fail(e)


@app.command("bbs")
def cmd_bbs(
    p: Optional[str] = typer.Option(None, "--p", help="First Blum factor."),
    q: Optional[str] = typer.Option(None, "--q", help="Second Blum factor."),
    modulus: Optional[str] = typer.Option(None, "--modulus", "-m", help="Raw modulus instead of factors."),
    seed: Optional[str] = typer.Option(None, "--seed", "-s", help="Decimal seed; omit to seed from system entropy."),
    count: int = typer.Option(1, "--count", "-n", min=0, max=100_000, help="Number of rolls."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Roll with Blum, Blum and Shub using the given factors or modulus."""
    _setup_logging(verbose)
    if modulus is None and (p is None or q is None):
        raise typer.BadParameter("give --modulus or both --p and --q")
    cfg = DiceConfig.from_env()
    try:
        with GeneratorContext(GeneratorKind.BBS, config=cfg, seed=seed) as ctx:
            if modulus is not None:
                blum = ctx.configure_bbs(modulus=modulus)
            else:
                blum = ctx.configure_bbs(factors=(p, q))
            if blum.has_factors:
                typer.echo(f"p={blum.p} q={blum.q}")
            typer.echo(ctx.query_seed_display())
            for _ in range(count):
                first, second = ctx.roll()
                typer.echo(f"{first} {second}")
    except DiceError as e:
        _fail(e)


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover - thin wrapper
    """Entry-point for the `gamedice` console script."""
    try:
        app(args=list(argv) if argv is not None else None, prog_name="gamedice")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
