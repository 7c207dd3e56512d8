"""Modules and record types for indexing a Cosmos-based chain into a database."""

__version__ = "2.0.0"