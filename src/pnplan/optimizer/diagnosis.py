"""Explain which nutrition targets an unsuccessful result misses."""

from __future__ import annotations

from typing import Optional

from pnplan.optimizer.models import NutritionConstraints, OptimizationResult


def describe_unmet_constraints(
    result: OptimizationResult,
    constraints: NutritionConstraints,
) -> list[str]:
    """Return one phrase per bound marked unmet in the result.

    Args:
        result: Result whose constraints_met map is inspected
        constraints: The constraints the result was computed for

    Returns:
        Phrases such as "insufficient calories (600/1800 kcal)", in the
        order kcal_min, kcal_max, protein_min, protein_max, volume_max
    """
    met = result.constraints_met
    phrases: list[str] = []

    if not met.kcal_min:
        phrases.append(
            f"insufficient calories ({result.total_kcal:.0f}/{constraints.kcal_min:g} kcal)"
        )
    if not met.kcal_max:
        phrases.append(
            f"excess calories ({result.total_kcal:.0f}/{constraints.kcal_max:g} kcal)"
        )
    if not met.protein_min:
        phrases.append(
            f"insufficient protein ({result.total_protein:.1f}/{constraints.protein_min:g} g)"
        )
    if not met.protein_max:
        phrases.append(
            f"excess protein ({result.total_protein:.1f}/{constraints.protein_max:g} g)"
        )
    if not met.volume_max:
        phrases.append(
            f"excess volume ({result.total_volume:.0f}/{constraints.volume_max:g} mL)"
        )

    return phrases


def explain_infeasibility(
    result: OptimizationResult,
    constraints: NutritionConstraints,
) -> Optional[str]:
    """Sentence listing unmet targets, or None when none can be named."""
    phrases = describe_unmet_constraints(result, constraints)
    if not phrases:
        return None
    return "Could not find a solution: " + ", ".join(phrases)
