"""unialias - type a short alias, get a Unicode character."""

__version__ = "0.3.0"
