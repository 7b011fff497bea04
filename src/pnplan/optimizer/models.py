"""Data models for formulas, optimization inputs and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Route(Enum):
    """Administration route of a formula."""

    CENTRAL = "Central"
    PERIPHERAL = "Peripheral"


class OptimizationStatus(Enum):
    """Outcome of an optimization call."""

    OPTIMAL = "Optimal"
    INFEASIBLE = "Infeasible"
    ERROR = "Error"


@dataclass(frozen=True)
class Formula:
    """A commercial parenteral nutrition product.

    Concentrations are grams per liter; kcal and base_cost are per unit (bag).
    """

    id: str
    name: str
    manufacturer: str
    volume_ml: float
    kcal: float
    protein_g_l: float
    nitrogen_g_l: float
    glucose_g_l: float
    fat_g_l: float
    emulsion_type: str
    route: Route
    base_cost: float
    osmolarity: Optional[float] = None

    def __post_init__(self) -> None:
        if self.volume_ml <= 0:
            raise ValueError(f"Formula {self.id}: volume_ml must be positive")
        if self.base_cost <= 0:
            raise ValueError(f"Formula {self.id}: base_cost must be positive")
        if not isinstance(self.route, Route):
            object.__setattr__(self, "route", Route(self.route))

    def _per_unit(self, grams_per_liter: float) -> float:
        return grams_per_liter * self.volume_ml / 1000

    @property
    def protein_g(self) -> float:
        """Grams of protein in one bag."""
        return self._per_unit(self.protein_g_l)

    @property
    def nitrogen_g(self) -> float:
        return self._per_unit(self.nitrogen_g_l)

    @property
    def glucose_g(self) -> float:
        return self._per_unit(self.glucose_g_l)

    @property
    def fat_g(self) -> float:
        return self._per_unit(self.fat_g_l)


@dataclass
class NutritionConstraints:
    """Target ranges for one optimization call.

    max_bags limits the total number of units across all formulas.
    A missing or non-positive max_bags means no limit.
    """

    kcal_min: float
    kcal_max: float
    protein_min: float
    protein_max: float
    volume_max: float
    max_bags: Optional[int] = None

    def is_valid(self) -> bool:
        """Check range shape (non-negative, ordered, positive volume)."""
        if self.kcal_min < 0 or self.kcal_max < 0 or self.kcal_min > self.kcal_max:
            return False
        if (
            self.protein_min < 0
            or self.protein_max < 0
            or self.protein_min > self.protein_max
        ):
            return False
        return self.volume_max > 0

    def validate(self) -> None:
        """Raise InvalidConstraintsError if the ranges are malformed."""
        if not self.is_valid():
            raise InvalidConstraintsError(
                "Invalid constraints: check that minimums are non-negative, "
                "do not exceed maximums, and that volume_max is positive"
            )

    @property
    def bag_limit(self) -> Optional[int]:
        """max_bags when it is an effective limit, else None."""
        if self.max_bags is not None and self.max_bags > 0:
            return self.max_bags
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kcal_min": self.kcal_min,
            "kcal_max": self.kcal_max,
            "protein_min": self.protein_min,
            "protein_max": self.protein_max,
            "volume_max": self.volume_max,
            "max_bags": self.max_bags,
        }


@dataclass
class SelectedBag:
    """A single formula in the optimization result."""

    formula_id: str
    name: str
    quantity: int
    unit_cost: float
    total_cost: float
    kcal_contribution: float
    protein_contribution: float
    volume_contribution: float
    nitrogen_contribution: float
    glucose_contribution: float
    fat_contribution: float
    manufacturer: str
    route: Route
    emulsion_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "formula_id": self.formula_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_cost": self.unit_cost,
            "total_cost": self.total_cost,
            "kcal_contribution": self.kcal_contribution,
            "protein_contribution": self.protein_contribution,
            "volume_contribution": self.volume_contribution,
            "nitrogen_contribution": self.nitrogen_contribution,
            "glucose_contribution": self.glucose_contribution,
            "fat_contribution": self.fat_contribution,
            "manufacturer": self.manufacturer,
            "route": self.route.value,
            "emulsion_type": self.emulsion_type,
        }


@dataclass
class ConstraintsMet:
    """Whether each named bound was met by the realized solution."""

    kcal_min: bool
    kcal_max: bool
    protein_min: bool
    protein_max: bool
    volume_max: bool

    @classmethod
    def none(cls) -> "ConstraintsMet":
        return cls(False, False, False, False, False)

    @property
    def all_met(self) -> bool:
        return all(self.to_dict().values())

    def to_dict(self) -> dict[str, bool]:
        return {
            "kcal_min": self.kcal_min,
            "kcal_max": self.kcal_max,
            "protein_min": self.protein_min,
            "protein_max": self.protein_max,
            "volume_max": self.volume_max,
        }


@dataclass
class OptimizationResult:
    """Complete output from the optimizer."""

    status: OptimizationStatus
    message: Optional[str] = None
    total_cost: Optional[float] = None
    total_kcal: float = 0.0
    total_protein: float = 0.0
    total_volume: float = 0.0
    total_nitrogen: float = 0.0
    total_glucose: float = 0.0
    total_fat: float = 0.0
    selected_bags: list[SelectedBag] = field(default_factory=list)
    constraints_met: ConstraintsMet = field(default_factory=ConstraintsMet.none)
    num_bags: int = 0
    solver_info: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status is OptimizationStatus.OPTIMAL

    @property
    def total_units(self) -> int:
        """Sum of bag quantities (num_bags counts distinct formulas)."""
        return sum(bag.quantity for bag in self.selected_bags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "total_cost": self.total_cost,
            "total_kcal": self.total_kcal,
            "total_protein": self.total_protein,
            "total_volume": self.total_volume,
            "total_nitrogen": self.total_nitrogen,
            "total_glucose": self.total_glucose,
            "total_fat": self.total_fat,
            "selected_bags": [bag.to_dict() for bag in self.selected_bags],
            "constraints_met": self.constraints_met.to_dict(),
            "num_bags": self.num_bags,
            "total_units": self.total_units,
            "solver_info": self.solver_info,
        }


# Custom exceptions


class PNPlanError(Exception):
    """Base exception for pnplan errors."""

    pass


class InvalidConstraintsError(PNPlanError):
    """Raised when a constraint set has malformed ranges."""

    pass


class UnknownFormulaError(PNPlanError, KeyError):
    """Raised when a formula id is not in the catalog."""

    def __init__(self, formula_id: str):
        super().__init__(f"Unknown formula: {formula_id}")
        self.formula_id = formula_id

    def __str__(self) -> str:
        return self.args[0]
