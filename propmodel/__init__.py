"""Property models of multi-way constraints, solved incrementally with DeltaBlue."""

__version__ = "0.1.0"