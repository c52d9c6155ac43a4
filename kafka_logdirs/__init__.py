"""Inspect and relocate Kafka partition log directories."""

__version__ = "0.1.0"
