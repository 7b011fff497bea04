"""Build the integer program from a formula catalog and nutrition targets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

import numpy as np

from pnplan.optimizer.models import Formula, NutritionConstraints, Route

ALL = "All"

# Per-unit coefficients tracked for every candidate, in column order
COEFFICIENT_KEYS = ("kcal", "protein", "nitrogen", "glucose", "fat", "volume")


@dataclass
class ValidationIssue:
    """A field-level problem with user-entered constraints."""

    field: str
    message: str


def check_constraint_fields(constraints: NutritionConstraints) -> list[ValidationIssue]:
    """Per-field validation for constraint forms.

    Stricter than NutritionConstraints.is_valid(): a supplied max_bags
    must be positive. Returns every issue found, in field order.
    """
    issues: list[ValidationIssue] = []

    if constraints.kcal_min < 0:
        issues.append(ValidationIssue("kcal_min", "Minimum calories cannot be negative"))
    if constraints.kcal_max < constraints.kcal_min:
        issues.append(
            ValidationIssue("kcal_max", "Maximum calories must be greater than minimum")
        )
    if constraints.protein_min < 0:
        issues.append(ValidationIssue("protein_min", "Minimum protein cannot be negative"))
    if constraints.protein_max < constraints.protein_min:
        issues.append(
            ValidationIssue("protein_max", "Maximum protein must be greater than minimum")
        )
    if constraints.volume_max <= 0:
        issues.append(ValidationIssue("volume_max", "Maximum volume must be positive"))
    if constraints.max_bags is not None and constraints.max_bags <= 0:
        issues.append(ValidationIssue("max_bags", "Maximum number of bags must be positive"))

    return issues


def filter_formulas(
    formulas: Sequence[Formula],
    selected_formula_ids: Optional[Sequence[str]] = None,
    emulsion_filter: str = ALL,
    route_filter: Union[str, Route] = ALL,
) -> list[Formula]:
    """Narrow a catalog by selected ids, emulsion type and route.

    An empty or missing id selection keeps every formula; "All" disables
    the emulsion and route filters.
    """
    candidates = list(formulas)

    if selected_formula_ids:
        wanted = set(selected_formula_ids)
        candidates = [f for f in candidates if f.id in wanted]

    if emulsion_filter != ALL:
        candidates = [f for f in candidates if f.emulsion_type == emulsion_filter]

    if isinstance(route_filter, Route):
        route_filter = route_filter.value
    if route_filter != ALL:
        candidates = [f for f in candidates if f.route.value == route_filter]

    return candidates


class ModelBuilder:
    """Builds the matrices for an integer cost-minimization model.

    All state lives on the builder instance, which is created per call.
    """

    def __init__(
        self,
        formulas: Sequence[Formula],
        constraints: NutritionConstraints,
        custom_unit_costs: Optional[Mapping[str, float]] = None,
    ):
        """Initialize the model builder.

        Args:
            formulas: Candidate formulas, already filtered
            constraints: Nutrition targets for this call
            custom_unit_costs: Optional per-formula cost overrides
        """
        self.formulas = list(formulas)
        self.constraints = constraints
        self.custom_unit_costs = dict(custom_unit_costs or {})

    def build(self) -> dict[str, Any]:
        """Build all vectors and matrices needed by the solver.

        Returns:
            Dict with:
                - formula_ids: list[str] - variable order
                - costs: np.ndarray - unit cost per formula
                - coefficients: np.ndarray - shape (n_formulas, len(COEFFICIENT_KEYS))
                - constraint_matrix: np.ndarray - shape (n_rows, n_formulas)
                - row_mins: np.ndarray - lower bound per row
                - row_maxs: np.ndarray - upper bound per row
                - row_names: list[str] - "kcal", "protein", "volume", "bags"
                - integrality: np.ndarray - 1 for every variable
        """
        coefficients = self._build_coefficient_matrix()
        matrix, row_mins, row_maxs, row_names = self._build_constraint_rows(coefficients)

        return {
            "formula_ids": [f.id for f in self.formulas],
            "costs": self._build_cost_vector(),
            "coefficients": coefficients,
            "constraint_matrix": matrix,
            "row_mins": row_mins,
            "row_maxs": row_maxs,
            "row_names": row_names,
            "integrality": np.ones(len(self.formulas), dtype=int),
        }

    def unit_cost(self, formula: Formula) -> float:
        """Cost of one bag, honoring any override for this formula."""
        return float(self.custom_unit_costs.get(formula.id, formula.base_cost))

    def _build_cost_vector(self) -> np.ndarray:
        return np.array([self.unit_cost(f) for f in self.formulas], dtype=float)

    def _build_coefficient_matrix(self) -> np.ndarray:
        """Per-bag yield of each tracked quantity.

        Returns:
            Array of shape (n_formulas, n_coefficients)
        """
        if not self.formulas:
            return np.zeros((0, len(COEFFICIENT_KEYS)))

        return np.array(
            [
                [
                    f.kcal,
                    f.protein_g,
                    f.nitrogen_g,
                    f.glucose_g,
                    f.fat_g,
                    f.volume_ml,
                ]
                for f in self.formulas
            ],
            dtype=float,
        )

    def _build_constraint_rows(
        self, coefficients: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray, list[str]]:
        """Range rows: row_min <= A @ x <= row_max."""
        c = self.constraints
        n_formulas = len(self.formulas)
        rows: list[np.ndarray] = []
        mins: list[float] = []
        maxs: list[float] = []
        names: list[str] = []

        def column(key: str) -> np.ndarray:
            return coefficients[:, COEFFICIENT_KEYS.index(key)]

        if c.kcal_min > 0 or c.kcal_max > 0:
            rows.append(column("kcal"))
            mins.append(c.kcal_min)
            maxs.append(c.kcal_max)
            names.append("kcal")

        if c.protein_min > 0 or c.protein_max > 0:
            rows.append(column("protein"))
            mins.append(c.protein_min)
            maxs.append(c.protein_max)
            names.append("protein")

        if c.volume_max > 0:
            rows.append(column("volume"))
            mins.append(-np.inf)
            maxs.append(c.volume_max)
            names.append("volume")

        if c.bag_limit is not None:
            rows.append(np.ones(n_formulas))
            mins.append(-np.inf)
            maxs.append(float(c.bag_limit))
            names.append("bags")

        matrix = np.array(rows) if rows else np.zeros((0, n_formulas))
        return matrix, np.array(mins, dtype=float), np.array(maxs, dtype=float), names
