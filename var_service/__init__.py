"""Value-at-Risk estimation service."""

__version__ = "0.1.0"
