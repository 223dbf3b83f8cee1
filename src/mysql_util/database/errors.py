"""
Error types raised by the metadata accessor
"""

from typing import List, Optional


class MySQLUtilError(Exception):
    """Base class for all mysql_util errors"""


class DatabaseConnectionError(MySQLUtilError, ConnectionError):
    """The connection could not be established or is no longer usable"""

    def __init__(self, message: str, sql: Optional[str] = None, errno: Optional[int] = None):
        self.sql = sql
        self.errno = errno
        super().__init__(message)


class QueryError(MySQLUtilError):
    """The server rejected a statement"""

    def __init__(self, sql: str, errno: Optional[int], detail: str):
        self.sql = sql
        self.errno = errno
        self.detail = detail
        super().__init__(f"Query failed ({errno}): {detail}\n{sql.strip()}")


class TableNotFoundError(MySQLUtilError, LookupError):
    """The referenced table does not exist in the active schema"""

    def __init__(self, table: str, database: Optional[str] = None):
        self.table = table
        self.database = database
        where = f" in database '{database}'" if database else ""
        super().__init__(f"table '{table}' does not exist{where}")


class CyclicSchemaError(MySQLUtilError):
    """Foreign keys form a cycle through two or more tables"""

    def __init__(self, cycle: List[str]):
        self.cycle = cycle
        super().__init__("cyclic foreign key references: " + " -> ".join(cycle))
