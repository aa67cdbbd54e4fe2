"""Command-line entrypoints for stoichlab."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Annotated, Any, Dict, NoReturn

import typer

from stoichlab.balancer import balance_reaction
from stoichlab.config import configure_logging, get_settings
from stoichlab.errors import StoichLabError
from stoichlab.forms import StoichFormInputs, parse_reactant_option, run_stoich_form
from stoichlab.formula import normalize_formula, parse_formula_counts
from stoichlab.masses import resolve_molar_mass
from stoichlab.models import Reaction
from stoichlab.reactions import format_equation, parse_reaction

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option(help="Logging level (defaults to STOICHLAB_LOG_LEVEL).")
    ] = None,
) -> None:
    """Balance chemical equations and run stoichiometry calculations."""
    configure_logging(log_level)


def reaction_payload(reaction: Reaction, pretty: bool = False) -> Dict[str, Any]:
    return {
        "equation": format_equation(reaction, pretty=pretty),
        "balanced": reaction.balanced,
        "reactants": [
            {"formula": s.formula, "coefficient": s.coefficient, "molar_mass": s.molar_mass}
            for s in reaction.reactants
        ],
        "products": [
            {"formula": s.formula, "coefficient": s.coefficient, "molar_mass": s.molar_mass}
            for s in reaction.products
        ],
    }


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.command()
def balance(
    reaction: Annotated[str, typer.Argument(help="Reaction, e.g. 'H2 + O2 -> H2O'.")],
    pretty: Annotated[bool, typer.Option(help="Render subscript digits.")] = False,
) -> None:
    """Balance a chemical equation."""
    settings = get_settings()
    balanced = balance_reaction(
        parse_reaction(reaction, fallback_molar_mass=settings.fallback_molar_mass),
        epsilon=settings.pivot_epsilon,
        tolerance=settings.fraction_tolerance,
        max_denominator=settings.max_denominator,
    )
    typer.echo(json.dumps(reaction_payload(balanced, pretty), indent=2, ensure_ascii=False))
    if not balanced.balanced:
        _fail(f"could not balance {format_equation(balanced)}")


@app.command()
def stoich(
    reaction: Annotated[str, typer.Argument(help="Reaction, e.g. '2 Ag + Cl2 -> 2 AgCl'.")],
    reactant: Annotated[
        list[str] | None,
        typer.Option("--reactant", "-r", help="Reactant mass as COMPOUND=GRAMS; repeatable."),
    ] = None,
    target: Annotated[
        str, typer.Option(help="Product to compute the yield for (defaults to the first).")
    ] = "",
) -> None:
    """Find the limiting reagent and theoretical yield."""
    try:
        rows = [parse_reactant_option(option) for option in reactant or []]
    except ValueError as exc:
        _fail(str(exc))

    try:
        outcome = run_stoich_form(StoichFormInputs(reaction, rows, target))
    except StoichLabError as exc:
        _fail(str(exc))

    if outcome.result is None:
        _fail(f"{outcome.message} ({format_equation(outcome.reaction)})")

    payload = {"reaction": reaction_payload(outcome.reaction), "result": asdict(outcome.result)}
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command("molar-mass")
def molar_mass(
    formula: Annotated[str, typer.Argument(help="Formula, e.g. 'Ca(OH)2'.")],
    strict: Annotated[bool, typer.Option(help="Fail instead of using the fallback value.")] = False,
) -> None:
    """Resolve the molar mass of a formula."""
    settings = get_settings()
    try:
        resolved = resolve_molar_mass(
            formula,
            fallback=settings.fallback_molar_mass,
            strict=strict or settings.strict_molar_mass,
        )
    except StoichLabError as exc:
        _fail(str(exc))
    typer.echo(json.dumps(asdict(resolved), indent=2, ensure_ascii=False))


@app.command()
def composition(
    formula: Annotated[str, typer.Argument(help="Formula, e.g. 'Ca3(PO4)2'.")],
) -> None:
    """Print the element counts of a formula."""
    payload = {
        "formula": normalize_formula(formula),
        "counts": parse_formula_counts(formula),
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
