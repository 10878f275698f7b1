"""Balance tracker: monthly-compounded interest for a small personal bank."""

__version__ = "0.1.0"
