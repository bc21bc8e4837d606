"""Validation helpers for generated records."""

from .foreign_key import ForeignKeyValidator

__all__ = ["ForeignKeyValidator"]
