"""Output formatters for optimization results."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pnplan.optimizer.models import (
    Formula,
    NutritionConstraints,
    OptimizationResult,
    OptimizationStatus,
)

_STATUS_COLORS = {
    OptimizationStatus.OPTIMAL: "green",
    OptimizationStatus.INFEASIBLE: "yellow",
    OptimizationStatus.ERROR: "red",
}


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format(
        self,
        result: OptimizationResult,
        constraints: Optional[NutritionConstraints] = None,
    ) -> None:
        """Print formatted tables to console.

        Args:
            result: Optimization result to format
            constraints: Targets to show next to the totals
        """
        status_color = _STATUS_COLORS[result.status]
        header_lines = [
            f"[bold]OPTIMIZATION RESULT[/bold] - {datetime.now().strftime('%Y-%m-%d %H:%M')}",
            f"Status: [{status_color}]{result.status.value.upper()}[/{status_color}]",
        ]
        if result.message:
            header_lines.append(result.message)

        self.console.print(Panel("\n".join(header_lines), title="PN Plan"))

        if not result.selected_bags:
            return

        bag_table = Table(title="Selected Bags")
        bag_table.add_column("ID", style="cyan")
        bag_table.add_column("Formula", max_width=40)
        bag_table.add_column("Route")
        bag_table.add_column("Qty", justify="right")
        bag_table.add_column("kcal", justify="right")
        bag_table.add_column("Protein (g)", justify="right")
        bag_table.add_column("Volume (mL)", justify="right")
        bag_table.add_column("Cost", justify="right", style="green")

        for bag in result.selected_bags:
            bag_table.add_row(
                bag.formula_id,
                bag.name,
                bag.route.value,
                str(bag.quantity),
                f"{bag.kcal_contribution:.1f}",
                f"{bag.protein_contribution:.2f}",
                f"{bag.volume_contribution:.1f}",
                f"${bag.total_cost:.2f}",
            )

        total_cost = f"${result.total_cost:.2f}" if result.total_cost is not None else "-"
        bag_table.add_row(
            "[bold]TOTAL[/bold]",
            "",
            "",
            f"[bold]{result.total_units}[/bold]",
            f"[bold]{result.total_kcal:.1f}[/bold]",
            f"[bold]{result.total_protein:.2f}[/bold]",
            f"[bold]{result.total_volume:.1f}[/bold]",
            f"[bold]{total_cost}[/bold]",
            style="bold",
        )

        self.console.print(bag_table)

        if constraints is not None:
            self.console.print(self._constraint_table(result, constraints))

        if result.solver_info.get("elapsed_seconds") is not None:
            self.console.print(
                f"[dim]Time: {result.solver_info['elapsed_seconds']:.3f}s | "
                f"Solver: {result.solver_info.get('solver', '?')}[/dim]"
            )

    def _constraint_table(
        self, result: OptimizationResult, constraints: NutritionConstraints
    ) -> Table:
        met = result.constraints_met
        table = Table(title="Nutrition Summary")
        table.add_column("Target")
        table.add_column("Amount", justify="right")
        table.add_column("Min", justify="right")
        table.add_column("Max", justify="right")
        table.add_column("Status", justify="center")

        def status(*flags: bool) -> str:
            return "[green]OK[/green]" if all(flags) else "[red]![/red]"

        table.add_row(
            "Energy",
            f"{result.total_kcal:.1f} kcal",
            f"{constraints.kcal_min:g}",
            f"{constraints.kcal_max:g}",
            status(met.kcal_min, met.kcal_max),
        )
        table.add_row(
            "Protein",
            f"{result.total_protein:.2f} g",
            f"{constraints.protein_min:g}",
            f"{constraints.protein_max:g}",
            status(met.protein_min, met.protein_max),
        )
        table.add_row(
            "Volume",
            f"{result.total_volume:.1f} mL",
            "-",
            f"{constraints.volume_max:g}",
            status(met.volume_max),
        )
        table.add_row("Nitrogen", f"{result.total_nitrogen:.2f} g", "-", "-", "")
        table.add_row("Glucose", f"{result.total_glucose:.2f} g", "-", "-", "")
        table.add_row("Fat", f"{result.total_fat:.2f} g", "-", "-", "")
        return table


class JSONFormatter:
    """Format results as JSON for programmatic use."""

    def format(
        self,
        result: OptimizationResult,
        constraints: Optional[NutritionConstraints] = None,
    ) -> str:
        """Return JSON string.

        Args:
            result: Optimization result to format
            constraints: Optional targets, echoed back in the output

        Returns:
            JSON string
        """
        data = {
            "timestamp": datetime.now().isoformat(),
            "success": result.success,
            "constraints": constraints.to_dict() if constraints is not None else None,
            "result": result.to_dict(),
        }
        return json.dumps(data, indent=2, ensure_ascii=False)


def catalog_table(formulas: Sequence[Formula], title: str = "Formula Catalog") -> Table:
    """Build a Rich table listing formulas."""
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Name", max_width=40)
    table.add_column("Manufacturer")
    table.add_column("Route")
    table.add_column("Emulsion")
    table.add_column("Volume (mL)", justify="right")
    table.add_column("kcal", justify="right")
    table.add_column("Protein (g)", justify="right")
    table.add_column("Cost", justify="right", style="green")

    for f in formulas:
        table.add_row(
            f.id,
            f.name,
            f.manufacturer,
            f.route.value,
            f.emulsion_type,
            f"{f.volume_ml:g}",
            f"{f.kcal:g}",
            f"{f.protein_g:.2f}",
            f"${f.base_cost:.2f}",
        )

    return table
