"""Guard Report: incident-reporting backend for security-guard staff."""

__version__ = "0.1.0"
__author__ = "Guard Report Team"

__all__ = ["__version__", "__author__"]
