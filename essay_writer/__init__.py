"""Essay Writer - essay drafting, review and revision backed by a completion API."""

__version__ = "0.1.0"
