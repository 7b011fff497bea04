"""Export functionality for optimization results."""

from pnplan.export.formatters import JSONFormatter, TableFormatter, catalog_table

__all__ = ["TableFormatter", "JSONFormatter", "catalog_table"]
