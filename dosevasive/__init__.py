"""Detection and blocking of HTTP flooding for WSGI applications."""

__version__ = "1.0.0"