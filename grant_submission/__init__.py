"""Grant and funding-program submission workflow."""

__version__ = "0.1.0"
