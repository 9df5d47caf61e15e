"""Gazetteer-based entity parser: find and resolve entity values in written queries."""

__version__ = "0.9.0"