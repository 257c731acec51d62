"""Storage layer - SQLite scans and pages."""

from .database import ScanDatabase

__all__ = ["ScanDatabase"]
