"""Reference formula data."""

from pnplan.data.catalog import (
    DEFAULT_FORMULAS,
    EMULSION_TYPES,
    get_default_catalog,
    get_formula,
)

__all__ = ["DEFAULT_FORMULAS", "EMULSION_TYPES", "get_default_catalog", "get_formula"]
