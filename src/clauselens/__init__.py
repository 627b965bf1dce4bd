"""
ClauseLens: structured contract analysis.

This package normalizes untyped AI contract analysis into a strict
data model, compares analyzed contracts side by side, and computes
portfolio-level analytics over a user's contract collection.
"""

__version__ = "0.1.0"
__author__ = "ClauseLens Team"

from clauselens.config import get_settings

__all__ = ["get_settings", "__version__"]
