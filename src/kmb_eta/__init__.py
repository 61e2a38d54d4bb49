"""KMB route lookup and reconciled arrival boards."""

__version__ = "0.1.0"
