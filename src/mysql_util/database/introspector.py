"""
Table metadata accessor for MySQL
"""

from types import MappingProxyType
from typing import Dict, List, Optional

from pymysql.constants import ER

from .adapters import MySQLAdapter
from .cache import CacheKey, CacheKind, MetadataCache
from .errors import QueryError, TableNotFoundError
from .factory import DatabaseFactory
from .models import (
    ColumnInfo,
    Constraints,
    ConstraintColumn,
    ConstraintType,
    IndexColumn,
    Indexes,
    place,
)
from .quoting import escape_like, quote_identifier
from ..config import Settings
from ..utils.logger import setup_logger
from ..utils.schema_analyzer import SchemaAnalyzer

# mysql forces this name on the primary key index
PRIMARY_INDEX = 'PRIMARY'

CONSTRAINTS_SQL = """
    select kcu.constraint_name, tc.constraint_type, kcu.column_name,
      kcu.ordinal_position, kcu.position_in_unique_constraint,
      kcu.referenced_table_name, kcu.referenced_column_name
    from information_schema.table_constraints tc
    join information_schema.key_column_usage kcu
      on tc.table_name = kcu.table_name
     and tc.constraint_name = kcu.constraint_name
     and kcu.constraint_schema = tc.constraint_schema
    where tc.table_name = %s
      and tc.constraint_schema = schema()
    order by kcu.constraint_name, kcu.ordinal_position
"""


class MySQLUtil:
    """Cached access to the tables, columns, indexes and constraints of one MySQL schema.

    Example::

        with MySQLUtil.connect("mysql+pymysql://localhost/shop", user="app") as util:
            for col in util.describe_table("orders"):
                print(col.field, col.type)
            print(util.get_depth("order_items"))
    """

    def __init__(self, adapter: MySQLAdapter):
        self.adapter = adapter
        self.cache = MetadataCache()
        self.analyzer = SchemaAnalyzer(self)
        self.logger = setup_logger("mysql_util.introspector")

    @classmethod
    def connect(cls, dsn: str, user: Optional[str] = None, password: Optional[str] = None) -> "MySQLUtil":
        """Connect to dsn (mysql+pymysql://host[:port]/schema) and wrap the connection"""
        return cls(DatabaseFactory.from_dsn(dsn, user=user, password=password))

    @classmethod
    def from_env(cls, settings: Optional[Settings] = None) -> "MySQLUtil":
        """Connect using MYSQL_* environment variables (see mysql_util.config)"""
        return cls(DatabaseFactory.from_settings(settings))

    @property
    def database(self) -> Optional[str]:
        return self.adapter.database

    def close(self):
        self.adapter.close()

    def __enter__(self) -> "MySQLUtil":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _key(self, table: str) -> CacheKey:
        return (self.database, table)

    def _fetch_or_empty(self, sql: str, table: str):
        """Rows of sql, or None when the table does not exist"""
        try:
            return self.adapter.fetch_all(sql)
        except QueryError as e:
            if e.errno == ER.NO_SUCH_TABLE:
                self.logger.debug(f"Table {table} not found: {e.detail}")
                return None
            raise

    def cache_hits(self, kind: CacheKind, table: str) -> int:
        """Number of cache reads of the populated entry for table (0 if none)"""
        return self.cache.hits(kind, self._key(table))

    def describe_table(self, table: str) -> List[ColumnInfo]:
        """Column info for table, as reported by `describe <table>`.

        Returns an empty list if the table does not exist.
        """
        cached = self.cache.get(CacheKind.DESCRIBE, self._key(table))
        if cached is None:
            rows = self._fetch_or_empty(f"describe {quote_identifier(table)}", table)
            if rows is None:
                return []
            columns = tuple(ColumnInfo.from_row(row) for row in rows)
            cached = self.cache.put(CacheKind.DESCRIBE, self._key(table), columns)

        return list(cached)

    def get_constraints(self, table: str) -> Constraints:
        """Constraints of table keyed by constraint name.

        Each value lists the constraint's columns in ordinal position order.
        Raises TableNotFoundError if the table does not exist.
        """
        cached = self.cache.get(CacheKind.CONSTRAINTS, self._key(table))
        if cached is None:
            if not self.table_exists(table):
                raise TableNotFoundError(table, self.database)

            grouped: Dict[str, List[ConstraintColumn]] = {}
            for row in self.adapter.fetch_all(CONSTRAINTS_SQL, (table,)):
                column = ConstraintColumn.from_row(row)
                grouped.setdefault(column.constraint_name, []).append(column)

            frozen = MappingProxyType({name: tuple(columns) for name, columns in grouped.items()})
            cached = self.cache.put(CacheKind.CONSTRAINTS, self._key(table), frozen)

        # callers get their own containers; the cached entry stays as fetched
        return {name: list(columns) for name, columns in cached.items()}

    def _get_indexes(self, table: str) -> List[IndexColumn]:
        """Rows of `show indexes` for table, in the order the server returns them"""
        cached = self.cache.get(CacheKind.INDEXES, self._key(table))
        if cached is None:
            rows = self._fetch_or_empty(f"show indexes in {quote_identifier(table)}", table)
            if rows is None:
                return []
            indexes = tuple(IndexColumn.from_row(row) for row in rows)
            cached = self.cache.put(CacheKind.INDEXES, self._key(table), indexes)

        return list(cached)

    def get_indexes(self, table: str) -> Indexes:
        """Indexes of table keyed by index name.

        Each column sits at slot seq_in_index - 1; missing positions are None.
        """
        indexes: Indexes = {}
        for column in self._get_indexes(table):
            place(indexes.setdefault(column.key_name, []), column.seq_in_index, column)
        return indexes

    def _constraints_of_type(self, table: str, constraint_type: ConstraintType) -> Constraints:
        return {
            name: columns
            for name, columns in self.get_constraints(table).items()
            if columns[0].constraint_type is constraint_type
        }

    def get_pk_constraint(self, table: str) -> List[ConstraintColumn]:
        return next(iter(self._constraints_of_type(table, ConstraintType.PRIMARY_KEY).values()), [])

    def get_pk_index(self, table: str) -> List[Optional[IndexColumn]]:
        return self.get_indexes(table).get(PRIMARY_INDEX, [])

    def get_ak_constraints(self, table: str) -> Constraints:
        """Unique constraints other than the primary key"""
        return self._constraints_of_type(table, ConstraintType.UNIQUE)

    def get_ak_indexes(self, table: str) -> Indexes:
        """Unique indexes other than the primary key index"""
        return {
            name: columns
            for name, columns in self.get_indexes(table).items()
            if name != PRIMARY_INDEX and _first(columns).unique
        }

    def get_fk_constraints(self, table: str) -> Constraints:
        return self._constraints_of_type(table, ConstraintType.FOREIGN_KEY)

    def get_fk_indexes(self, table: str) -> Indexes:
        """Indexes whose columns match a foreign key constraint column for column.

        For each foreign key the first matching index wins. The same index may
        be matched by more than one foreign key.
        """
        matched: Indexes = {}
        indexes = self.get_indexes(table)

        for constraint_columns in self.get_fk_constraints(table).values():
            wanted = [col.column_name for col in constraint_columns]

            for name, index_columns in indexes.items():
                if [col.column_name if col else None for col in index_columns] == wanted:
                    matched[name] = index_columns
                    break

        return matched

    def get_other_constraints(self, table: str) -> Constraints:
        """Constraints that are not primary, unique or foreign keys (e.g. CHECK)"""
        classified = (ConstraintType.PRIMARY_KEY, ConstraintType.UNIQUE, ConstraintType.FOREIGN_KEY)
        return {
            name: columns
            for name, columns in self.get_constraints(table).items()
            if columns[0].constraint_type not in classified
        }

    def get_other_indexes(self, table: str) -> Indexes:
        """Indexes that are not the primary, an alternate key or a foreign key index"""
        ak = self.get_ak_indexes(table)
        fk = self.get_fk_indexes(table)

        return {
            name: columns
            for name, columns in self.get_indexes(table).items()
            if name != PRIMARY_INDEX and name not in ak and name not in fk
        }

    def get_tables(self) -> List[str]:
        """Table names in the current database; an empty list when there are none"""
        return self.adapter.fetch_column("show tables")

    def table_exists(self, table: str) -> bool:
        rows = self.adapter.fetch_column("show tables like %s", (escape_like(table),))
        return len(rows) > 0

    def use_database(self, name: str) -> bool:
        """Point the connection at another database.

        Cached results stay keyed by the database they were read from, so
        switching back reuses them and other databases never see them.
        """
        return self.adapter.use_database(name)

    def get_depth(self, table: str) -> int:
        """See SchemaAnalyzer.get_depth"""
        return self.analyzer.get_depth(table)

    def get_max_depth(self) -> int:
        return self.analyzer.get_max_depth()


def _first(columns: List[Optional[IndexColumn]]) -> IndexColumn:
    return next(col for col in columns if col is not None)
