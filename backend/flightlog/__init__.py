"""
Flight log storage.

Persistence layer for locations, coordinates, country parts and users.
"""
__version__ = "0.1.0"
