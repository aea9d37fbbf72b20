"""Ingredient quantity normalization and shopping-list generation."""

__version__ = "0.1.0"
