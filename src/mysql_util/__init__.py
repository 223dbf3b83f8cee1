"""
Utility functions for working with MySQL table metadata
"""

from .database import (
    CacheKind,
    CyclicSchemaError,
    DatabaseConnectionError,
    MySQLUtil,
    MySQLUtilError,
    QueryError,
    TableNotFoundError,
)

__version__ = '0.1.0'

__all__ = [
    'CacheKind',
    'CyclicSchemaError',
    'DatabaseConnectionError',
    'MySQLUtil',
    'MySQLUtilError',
    'QueryError',
    'TableNotFoundError',
]
