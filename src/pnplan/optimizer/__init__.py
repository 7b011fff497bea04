"""Optimization engine for parenteral nutrition formulas."""

from pnplan.optimizer.constraints import ValidationIssue, check_constraint_fields
from pnplan.optimizer.engine import OptimizationEngine
from pnplan.optimizer.models import (
    ConstraintsMet,
    Formula,
    NutritionConstraints,
    OptimizationResult,
    OptimizationStatus,
    Route,
    SelectedBag,
)

__all__ = [
    "Route",
    "OptimizationStatus",
    "Formula",
    "NutritionConstraints",
    "SelectedBag",
    "ConstraintsMet",
    "OptimizationResult",
    "ValidationIssue",
    "check_constraint_fields",
    "OptimizationEngine",
]
