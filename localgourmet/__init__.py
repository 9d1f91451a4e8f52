"""LocalGourmet — local restaurant discovery API."""

__version__ = "1.0.0"
