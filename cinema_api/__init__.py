# cinema_api/__init__.py
"""Movie catalog API with scoped bearer tokens, permission checks and optimistic concurrency."""

__version__ = "1.0.0"
