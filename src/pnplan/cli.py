"""CLI interface using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from pnplan.config import Settings, get_settings
from pnplan.data import get_default_catalog, get_formula
from pnplan.export import JSONFormatter, TableFormatter, catalog_table
from pnplan.optimizer import NutritionConstraints, OptimizationEngine
from pnplan.optimizer.constraints import ALL
from pnplan.optimizer.models import UnknownFormulaError

app = typer.Typer(
    help="Parenteral nutrition cost optimization with integer programming",
    no_args_is_help=True,
)
console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def parse_custom_costs(values: Optional[list[str]]) -> dict[str, float]:
    """Parse repeated ID=VALUE options into a cost override mapping.

    Raises:
        typer.BadParameter: If a value is malformed
        UnknownFormulaError: If an id is not in the catalog
    """
    costs: dict[str, float] = {}
    for item in values or []:
        formula_id, sep, raw_cost = item.partition("=")
        if not sep:
            raise typer.BadParameter(f"Expected ID=VALUE, got '{item}'", param_hint="--cost")
        formula_id = formula_id.strip()
        get_formula(formula_id)
        try:
            costs[formula_id] = float(raw_cost)
        except ValueError:
            raise typer.BadParameter(
                f"Cost for {formula_id} is not a number: '{raw_cost}'", param_hint="--cost"
            ) from None
    return costs


@app.command()
def optimize(
    kcal_min: Optional[float] = typer.Option(None, "--kcal-min", help="Minimum calories"),
    kcal_max: Optional[float] = typer.Option(None, "--kcal-max", help="Maximum calories"),
    protein_min: Optional[float] = typer.Option(
        None, "--protein-min", help="Minimum protein (g)"
    ),
    protein_max: Optional[float] = typer.Option(
        None, "--protein-max", help="Maximum protein (g)"
    ),
    volume_max: Optional[float] = typer.Option(
        None, "--volume-max", help="Maximum volume (mL)"
    ),
    max_bags: Optional[int] = typer.Option(
        None, "--max-bags", help="Maximum total number of bags"
    ),
    no_bag_limit: bool = typer.Option(
        False, "--no-bag-limit", help="Do not limit the number of bags"
    ),
    formula: Optional[list[str]] = typer.Option(
        None, "--formula", "-f", help="Formula ID to consider. Repeatable."
    ),
    cost: Optional[list[str]] = typer.Option(
        None, "--cost", help="Custom unit cost as ID=VALUE. Repeatable."
    ),
    emulsion: str = typer.Option(ALL, "--emulsion", help="Emulsion type filter"),
    route: str = typer.Option(ALL, "--route", help="Route filter: All, Central, Peripheral"),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output format: table, json"
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Find the cheapest formula combination for the given targets."""
    configure_logging(verbose)
    settings = Settings.load(config) if config else get_settings()
    defaults = settings.defaults

    if no_bag_limit:
        max_bags = None
    elif max_bags is None:
        max_bags = defaults.max_bags

    constraints = NutritionConstraints(
        kcal_min=kcal_min if kcal_min is not None else defaults.kcal_min,
        kcal_max=kcal_max if kcal_max is not None else defaults.kcal_max,
        protein_min=protein_min if protein_min is not None else defaults.protein_min,
        protein_max=protein_max if protein_max is not None else defaults.protein_max,
        volume_max=volume_max if volume_max is not None else defaults.volume_max,
        max_bags=max_bags,
    )

    try:
        custom_costs = parse_custom_costs(cost)
    except UnknownFormulaError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    engine = OptimizationEngine(get_default_catalog(), settings.optimization)
    result = engine.optimize_with_validation(
        constraints,
        selected_formula_ids=formula,
        custom_unit_costs=custom_costs,
        emulsion_filter=emulsion,
        route_filter=route,
    )

    output_format = output or defaults.output_format
    if output_format == "json":
        print(JSONFormatter().format(result, constraints))
    else:
        TableFormatter(console).format(result, constraints)

    if not result.success:
        raise typer.Exit(1)


@app.command()
def formulas(
    route: str = typer.Option(ALL, "--route", help="Route filter: All, Central, Peripheral"),
    emulsion: str = typer.Option(ALL, "--emulsion", help="Emulsion type filter"),
) -> None:
    """List the reference formula catalog."""
    engine = OptimizationEngine(get_default_catalog())
    available = engine.available_formulas(emulsion_filter=emulsion, route_filter=route)

    if not available:
        console.print("[yellow]No formulas match the filters.[/yellow]")
        raise typer.Exit(1)

    console.print(catalog_table(available))


if __name__ == "__main__":
    app()
