"""Command-line interface for unitcalc."""

from __future__ import annotations

import json
import logging

import click

from unitcalc.calculator import CALC_ERRORS, evaluate, parse
from unitcalc.parser.nodes import to_dict
from unitcalc.units.builtin import default_registry


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log parsing and evaluation details.")
def cli(verbose: bool) -> None:
    """Units-aware calculator."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG)


# Expressions may start with a minus sign ("-2^2"), which click would
# otherwise read as an option.
EXPRESSION_SETTINGS = {"ignore_unknown_options": True}


@cli.command("eval", context_settings=EXPRESSION_SETTINGS)
@click.argument("expression", nargs=-1, required=True)
def eval_command(expression: tuple[str, ...]) -> None:
    """Evaluate EXPRESSION and print the result, e.g. `unitcalc eval 1 kg + 12 g`."""

    text = " ".join(expression)
    try:
        result = evaluate(text)
    except CALC_ERRORS as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(str(result))


@cli.command("parse", context_settings=EXPRESSION_SETTINGS)
@click.argument("expression", nargs=-1, required=True)
def parse_command(expression: tuple[str, ...]) -> None:
    """Print the expression tree of EXPRESSION as JSON."""

    text = " ".join(expression)
    try:
        tree = parse(text)
    except CALC_ERRORS as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(to_dict(tree), indent=2))


@cli.command("units")
def units_command() -> None:
    """List every registered unit name."""

    for name in default_registry().names():
        click.echo(name)


if __name__ == "__main__":
    cli()
