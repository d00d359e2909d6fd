"""TDS protocol building blocks and helpers for running and printing SQL statements."""

__version__ = "0.1.0"