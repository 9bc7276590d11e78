"""Bulk work order operations and technician route planning."""

__version__ = "0.1.0"
