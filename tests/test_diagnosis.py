"""Tests for infeasibility explanations."""

from __future__ import annotations

from pnplan.optimizer.diagnosis import describe_unmet_constraints, explain_infeasibility
from pnplan.optimizer.models import (
    ConstraintsMet,
    NutritionConstraints,
    OptimizationResult,
    OptimizationStatus,
)

CONSTRAINTS = NutritionConstraints(
    kcal_min=1800, kcal_max=2400, protein_min=60, protein_max=90, volume_max=2500
)


def make_result(met: ConstraintsMet) -> OptimizationResult:
    return OptimizationResult(
        status=OptimizationStatus.INFEASIBLE,
        total_kcal=600.0,
        total_protein=15.0,
        total_volume=3000.0,
        constraints_met=met,
    )


class TestDescribeUnmetConstraints:
    def test_all_met(self):
        met = ConstraintsMet(True, True, True, True, True)
        assert describe_unmet_constraints(make_result(met), CONSTRAINTS) == []
        assert explain_infeasibility(make_result(met), CONSTRAINTS) is None

    def test_phrases(self):
        met = ConstraintsMet(
            kcal_min=False, kcal_max=True, protein_min=False, protein_max=True, volume_max=False
        )

        phrases = describe_unmet_constraints(make_result(met), CONSTRAINTS)

        assert phrases == [
            "insufficient calories (600/1800 kcal)",
            "insufficient protein (15.0/60 g)",
            "excess volume (3000/2500 mL)",
        ]

    def test_explanation_sentence(self):
        met = ConstraintsMet(
            kcal_min=True, kcal_max=False, protein_min=True, protein_max=False, volume_max=True
        )

        message = explain_infeasibility(make_result(met), CONSTRAINTS)

        assert message == (
            "Could not find a solution: excess calories (600/2400 kcal), "
            "excess protein (15.0/90 g)"
        )
