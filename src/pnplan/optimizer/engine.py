"""Cost-minimizing parenteral nutrition optimization engine.

Selects whole-bag quantities of catalog formulas that minimize total cost
while keeping calories, protein, volume and bag count inside the requested
ranges. The integer program is solved by scipy's HiGHS MILP backend; this
module owns filtering, model assembly, and turning the raw solution into a
rounded, re-validated OptimizationResult.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

import numpy as np

from pnplan.config.settings import OptimizationConfig
from pnplan.optimizer.constraints import (
    ALL,
    COEFFICIENT_KEYS,
    ModelBuilder,
    check_constraint_fields,
    filter_formulas,
)
from pnplan.optimizer.diagnosis import explain_infeasibility
from pnplan.optimizer.models import (
    ConstraintsMet,
    Formula,
    NutritionConstraints,
    OptimizationResult,
    OptimizationStatus,
    Route,
    SelectedBag,
)
from pnplan.optimizer.solver import solve_milp

logger = logging.getLogger(__name__)

INVALID_CONSTRAINTS_MESSAGE = "Invalid constraints provided"
NO_FORMULAS_MESSAGE = "No formulas available with the current filters"
INFEASIBLE_MESSAGE = "Problem infeasible: constraints cannot be satisfied simultaneously"

SOLVER_NAME = "milp_highs"

_KCAL = COEFFICIENT_KEYS.index("kcal")
_PROTEIN = COEFFICIENT_KEYS.index("protein")
_NITROGEN = COEFFICIENT_KEYS.index("nitrogen")
_GLUCOSE = COEFFICIENT_KEYS.index("glucose")
_FAT = COEFFICIENT_KEYS.index("fat")
_VOLUME = COEFFICIENT_KEYS.index("volume")


def error_result(message: str) -> OptimizationResult:
    """Result for caller-correctable problems and solver failures."""
    return OptimizationResult(status=OptimizationStatus.ERROR, message=message)


def infeasible_result(message: str = INFEASIBLE_MESSAGE) -> OptimizationResult:
    """Result for a well-formed request with no feasible assignment."""
    return OptimizationResult(status=OptimizationStatus.INFEASIBLE, message=message)


class OptimizationEngine:
    """Finds the cheapest whole-bag combination of formulas.

    The catalog is stored as given and never mutated. Every optimize() call
    builds its model in local state, so one engine can serve concurrent
    callers.
    """

    def __init__(
        self,
        formulas: Sequence[Formula],
        config: Optional[OptimizationConfig] = None,
    ):
        """Initialize the engine.

        Args:
            formulas: Formula catalog. May be empty.
            config: Solver settings. Defaults to OptimizationConfig().
        """
        self.formulas: tuple[Formula, ...] = tuple(formulas)
        self.config = config or OptimizationConfig()

    def available_formulas(
        self,
        selected_formula_ids: Optional[Sequence[str]] = None,
        emulsion_filter: str = ALL,
        route_filter: Union[str, Route] = ALL,
    ) -> list[Formula]:
        """Catalog entries that pass the given filters."""
        return filter_formulas(
            self.formulas, selected_formula_ids, emulsion_filter, route_filter
        )

    def optimize(
        self,
        constraints: NutritionConstraints,
        selected_formula_ids: Optional[Sequence[str]] = None,
        custom_unit_costs: Optional[Mapping[str, float]] = None,
        emulsion_filter: str = ALL,
        route_filter: Union[str, Route] = ALL,
    ) -> OptimizationResult:
        """Compute the cost-minimizing formula combination.

        Args:
            constraints: Nutrition targets
            selected_formula_ids: Restrict candidates to these ids (empty = all)
            custom_unit_costs: Per-formula cost overrides
            emulsion_filter: Emulsion type to keep, or "All"
            route_filter: Route to keep, or "All"

        Returns:
            OptimizationResult. Failures are reported through its status,
            never raised.
        """
        if not constraints.is_valid():
            return error_result(INVALID_CONSTRAINTS_MESSAGE)

        candidates = self.available_formulas(
            selected_formula_ids, emulsion_filter, route_filter
        )
        if not candidates:
            return error_result(NO_FORMULAS_MESSAGE)

        builder = ModelBuilder(candidates, constraints, custom_unit_costs)
        model = builder.build()
        logger.debug(
            "Solving model with %d formulas and rows %s",
            len(candidates),
            model["row_names"],
        )

        try:
            solution = solve_milp(
                costs=model["costs"],
                constraint_matrix=model["constraint_matrix"],
                row_mins=model["row_mins"],
                row_maxs=model["row_maxs"],
                integrality=model["integrality"],
                time_limit=self.config.time_limit_seconds,
                presolve=self.config.presolve,
            )
        except Exception as e:
            logger.exception("Optimization error")
            return error_result(f"Optimization error: {e}")

        if solution["infeasible"]:
            logger.info("Optimization infeasible for %s", constraints)
            return infeasible_result()

        if not solution["success"]:
            logger.warning("Solver did not finish: %s", solution["message"])
            return error_result(f"Optimization error: {solution['message']}")

        result = self._extract_result(solution, candidates, model, constraints)
        result.solver_info = {
            "solver": SOLVER_NAME,
            "elapsed_seconds": solution["elapsed_seconds"],
            "candidates": len(candidates),
        }
        logger.info(
            "Optimization finished: status=%s cost=%s bags=%d",
            result.status.value,
            result.total_cost,
            result.total_units,
        )
        return result

    def optimize_with_validation(
        self,
        constraints: NutritionConstraints,
        selected_formula_ids: Optional[Sequence[str]] = None,
        custom_unit_costs: Optional[Mapping[str, float]] = None,
        emulsion_filter: str = ALL,
        route_filter: Union[str, Route] = ALL,
    ) -> OptimizationResult:
        """optimize() preceded by field validation and followed by diagnosis.

        Field problems produce an Error listing all of them. Infeasible
        results that carry a realized solution get a message naming the
        unmet targets.
        """
        issues = check_constraint_fields(constraints)
        if issues:
            return error_result(
                "Invalid constraints: " + ", ".join(issue.message for issue in issues)
            )

        result = self.optimize(
            constraints,
            selected_formula_ids,
            custom_unit_costs,
            emulsion_filter,
            route_filter,
        )

        if result.status is OptimizationStatus.INFEASIBLE and result.selected_bags:
            explanation = explain_infeasibility(result, constraints)
            if explanation:
                result.message = explanation

        return result

    def _extract_result(
        self,
        solution: dict[str, Any],
        candidates: list[Formula],
        model: dict[str, Any],
        constraints: NutritionConstraints,
    ) -> OptimizationResult:
        """Round the raw solution to whole bags and recompute totals from them."""
        x = solution["x"]
        costs = model["costs"]
        coefficients = model["coefficients"]

        selected_bags: list[SelectedBag] = []
        totals = np.zeros(len(COEFFICIENT_KEYS))

        for i, formula in enumerate(candidates):
            raw = float(x[i])
            if raw < self.config.zero_threshold:
                continue

            quantity = int(round(raw))
            if quantity < 1:
                continue

            contribution = quantity * coefficients[i]
            totals += contribution
            unit_cost = float(costs[i])

            selected_bags.append(
                SelectedBag(
                    formula_id=formula.id,
                    name=formula.name,
                    quantity=quantity,
                    unit_cost=unit_cost,
                    total_cost=round(quantity * unit_cost, 2),
                    kcal_contribution=round(float(contribution[_KCAL]), 1),
                    protein_contribution=round(float(contribution[_PROTEIN]), 2),
                    volume_contribution=round(float(contribution[_VOLUME]), 1),
                    nitrogen_contribution=round(float(contribution[_NITROGEN]), 2),
                    glucose_contribution=round(float(contribution[_GLUCOSE]), 2),
                    fat_contribution=round(float(contribution[_FAT]), 2),
                    manufacturer=formula.manufacturer,
                    route=formula.route,
                    emulsion_type=formula.emulsion_type,
                )
            )

        selected_bags.sort(key=lambda bag: -bag.total_cost)

        total_kcal = float(totals[_KCAL])
        total_protein = float(totals[_PROTEIN])
        total_volume = float(totals[_VOLUME])

        result = OptimizationResult(
            status=OptimizationStatus.OPTIMAL,
            total_cost=round(solution["fun"], 2),
            total_kcal=round(total_kcal, 1),
            total_protein=round(total_protein, 2),
            total_volume=round(total_volume, 1),
            total_nitrogen=round(float(totals[_NITROGEN]), 2),
            total_glucose=round(float(totals[_GLUCOSE]), 2),
            total_fat=round(float(totals[_FAT]), 2),
            selected_bags=selected_bags,
            constraints_met=self._check_constraints(
                total_kcal, total_protein, total_volume, constraints
            ),
            num_bags=len(selected_bags),
        )

        limit = constraints.bag_limit
        total_units = result.total_units
        if limit is not None and total_units > limit + self.config.max_bags_tolerance:
            logger.warning(
                "Rounded solution uses %d bags, above the limit of %d",
                total_units,
                limit,
            )
            result.status = OptimizationStatus.INFEASIBLE
            result.message = (
                f"Total bags {total_units} exceeds the maximum of {limit}"
            )
            result.total_cost = None

        return result

    def _check_constraints(
        self,
        total_kcal: float,
        total_protein: float,
        total_volume: float,
        constraints: NutritionConstraints,
    ) -> ConstraintsMet:
        """Re-check each bound against the whole-bag totals.

        A zero upper bound means the side is unbounded.
        """
        tol = self.config.constraint_tolerance

        def upper(bound: float) -> float:
            return bound if bound else float("inf")

        return ConstraintsMet(
            kcal_min=total_kcal >= (constraints.kcal_min or 0) - tol,
            kcal_max=total_kcal <= upper(constraints.kcal_max) + tol,
            protein_min=total_protein >= (constraints.protein_min or 0) - tol,
            protein_max=total_protein <= upper(constraints.protein_max) + tol,
            volume_max=total_volume <= upper(constraints.volume_max) + tol,
        )
