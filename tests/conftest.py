"""Pytest fixtures for pnplan tests."""

from __future__ import annotations

import pytest

from pnplan.optimizer.engine import OptimizationEngine
from pnplan.optimizer.models import Formula, NutritionConstraints, Route


def make_formula(**overrides) -> Formula:
    """Build a formula with sensible defaults for the fields a test ignores."""
    fields = {
        "id": "TEST001",
        "name": "Test Formula",
        "manufacturer": "Test Manufacturer",
        "volume_ml": 1000,
        "kcal": 1000,
        "protein_g_l": 30,
        "nitrogen_g_l": 5,
        "glucose_g_l": 150,
        "fat_g_l": 40,
        "emulsion_type": "Soja",
        "route": Route.CENTRAL,
        "base_cost": 50.00,
    }
    fields.update(overrides)
    return Formula(**fields)


@pytest.fixture
def formula_factory():
    """Return make_formula for tests that need custom catalog entries."""
    return make_formula


@pytest.fixture
def sample_formulas() -> list[Formula]:
    """Three 1000 mL formulas: one peripheral soy, one central soy, one central SMOF."""
    return [
        make_formula(
            id="PN001",
            name="NuTRIflex® peri 1000mL",
            manufacturer="B. Braun",
            kcal=600,
            protein_g_l=15.0,
            nitrogen_g_l=2.4,
            glucose_g_l=80,
            fat_g_l=20,
            emulsion_type="Soja",
            route=Route.PERIPHERAL,
            osmolarity=850,
            base_cost=45.50,
        ),
        make_formula(
            id="PN002",
            name="NuTRIflex® central 1000mL",
            manufacturer="B. Braun",
            kcal=1050,
            protein_g_l=28.75,
            nitrogen_g_l=4.6,
            glucose_g_l=140,
            fat_g_l=40,
            emulsion_type="Soja",
            route=Route.CENTRAL,
            osmolarity=1380,
            base_cost=68.90,
        ),
        make_formula(
            id="PN003",
            name="SMOFlipid® Central 1000mL",
            manufacturer="Fresenius Kabi",
            kcal=1200,
            protein_g_l=32.5,
            nitrogen_g_l=5.2,
            glucose_g_l=160,
            fat_g_l=40,
            emulsion_type="SMOF",
            route=Route.CENTRAL,
            osmolarity=1450,
            base_cost=89.30,
        ),
    ]


@pytest.fixture
def engine(sample_formulas) -> OptimizationEngine:
    """Engine over the three sample formulas."""
    return OptimizationEngine(sample_formulas)


@pytest.fixture
def moderate_constraints() -> NutritionConstraints:
    """Targets a single central bag can meet."""
    return NutritionConstraints(
        kcal_min=1000,
        kcal_max=1500,
        protein_min=25,
        protein_max=40,
        volume_max=2000,
    )
