"""
MySQL connection adapter and table metadata access
"""

from .models import ColumnInfo, ConstraintColumn, ConstraintType, IndexColumn
from .adapters import MySQLAdapter
from .factory import DatabaseFactory
from .cache import CacheKind, MetadataCache
from .errors import (
    CyclicSchemaError,
    DatabaseConnectionError,
    MySQLUtilError,
    QueryError,
    TableNotFoundError,
)
from .introspector import MySQLUtil

__all__ = [
    'ColumnInfo',
    'ConstraintColumn',
    'ConstraintType',
    'IndexColumn',
    'MySQLAdapter',
    'DatabaseFactory',
    'CacheKind',
    'MetadataCache',
    'CyclicSchemaError',
    'DatabaseConnectionError',
    'MySQLUtilError',
    'QueryError',
    'TableNotFoundError',
    'MySQLUtil'
]
