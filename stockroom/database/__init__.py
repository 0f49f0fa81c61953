"""
Database package: declarative base, models and connection management.

Import submodules explicitly (``stockroom.database.connection``,
``stockroom.database.models``) to avoid circular imports.
"""

__all__ = []
