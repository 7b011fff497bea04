"""Cost-minimizing parenteral nutrition formula planning."""

__version__ = "0.1.0"
