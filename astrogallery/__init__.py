"""Build tooling for the astrophotography gallery site."""

__version__ = "1.0.0"
