"""Reference catalog of commercial parenteral nutrition formulas.

Values are per bag; concentrations are grams per liter. Costs are list
prices and are usually overridden per institution through custom costs.
"""

from __future__ import annotations

from pnplan.optimizer.models import Formula, Route, UnknownFormulaError

# Known lipid emulsion categories
EMULSION_TYPES: list[str] = [
    "Soja",  # soybean oil (LCT)
    "LCT",
    "TCM/TCL",  # MCT/LCT blend
    "Oliva/TCL",  # olive oil / LCT
    "SMOF",  # soy, MCT, olive, fish oil
    "Sem lipídio",  # lipid-free
]

DEFAULT_FORMULAS: tuple[Formula, ...] = (
    Formula(
        id="PN001",
        name="NuTRIflex® peri 1000mL",
        manufacturer="B. Braun",
        volume_ml=1000,
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
    Formula(
        id="PN002",
        name="NuTRIflex® central 1000mL",
        manufacturer="B. Braun",
        volume_ml=1000,
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
    Formula(
        id="PN003",
        name="SMOFlipid® Central 1000mL",
        manufacturer="Fresenius Kabi",
        volume_ml=1000,
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
    Formula(
        id="PN004",
        name="OliClinomel® Central 1000mL",
        manufacturer="Baxter",
        volume_ml=1000,
        kcal=800,
        protein_g_l=20.0,
        nitrogen_g_l=3.2,
        glucose_g_l=100,
        fat_g_l=30,
        emulsion_type="Oliva/TCL",
        route=Route.CENTRAL,
        osmolarity=1200,
        base_cost=75.00,
    ),
    Formula(
        id="PN005",
        name="SmofKabiven® Peripheral 1448mL",
        manufacturer="Fresenius Kabi",
        volume_ml=1448,
        kcal=1000,
        protein_g_l=32.0,
        nitrogen_g_l=5.1,
        glucose_g_l=71,
        fat_g_l=28,
        emulsion_type="SMOF",
        route=Route.PERIPHERAL,
        osmolarity=850,
        base_cost=112.40,
    ),
    Formula(
        id="PN037",
        name="NuTRIflex® Lipid Special 1000mL",
        manufacturer="B. Braun",
        volume_ml=1000,
        kcal=1200,
        protein_g_l=43.75,
        nitrogen_g_l=7.0,
        glucose_g_l=144,
        fat_g_l=40,
        emulsion_type="TCM/TCL",
        route=Route.CENTRAL,
        osmolarity=1545,
        base_cost=94.20,
    ),
)

_BY_ID: dict[str, Formula] = {f.id: f for f in DEFAULT_FORMULAS}


def get_default_catalog() -> list[Formula]:
    """Return the reference formulas as a new list."""
    return list(DEFAULT_FORMULAS)


def get_formula(formula_id: str) -> Formula:
    """Look up a reference formula by id.

    Raises:
        UnknownFormulaError: If the id is not in the catalog
    """
    try:
        return _BY_ID[formula_id]
    except KeyError:
        raise UnknownFormulaError(formula_id) from None
