"""Bankr: bank branch search with abbreviation-aware query interpretation."""

__version__ = "3.0.0"
