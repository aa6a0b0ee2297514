"""Layer tree and base layer management for an interactive map viewer."""

__version__ = "0.1.0"
