"""
MySQL connection adapter
"""

from typing import Any, Dict, List, Optional, Sequence

import pymysql
import pymysql.cursors

from .errors import DatabaseConnectionError, QueryError
from .quoting import quote_identifier
from ..utils.logger import setup_logger

# client-side error numbers (CR_*) start at 2000
CLIENT_ERROR_MIN = 2000


class MySQLAdapter:
    """Owns one pymysql connection and runs the fixed metadata queries on it"""

    def __init__(self, config: Dict[str, Any]):
        self.config = dict(config)
        self.connection = None
        self.logger = setup_logger("mysql_util.adapter")

    @property
    def database(self) -> Optional[str]:
        """Name of the database unqualified table names resolve against"""
        return self.config.get('database')

    def connect(self) -> Any:
        """Connect to MySQL database"""
        try:
            self.connection = pymysql.connect(
                host=self.config['host'],
                port=int(self.config.get('port') or 3306),
                user=self.config['user'],
                password=self.config.get('password') or '',
                database=self.config.get('database'),
                cursorclass=pymysql.cursors.DictCursor,
            )
        except pymysql.MySQLError as e:
            self.logger.error(f"MySQL connection to {self.config.get('host')} failed: {e}")
            raise DatabaseConnectionError(f"MySQL connection failed: {e}") from e

        self.logger.info(f"Connected to {self.config.get('host')}/{self.database}")
        return self.connection

    def fetch_all(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """Run a query and return its rows with upper-cased column labels"""
        connection = self._require_connection()
        self.logger.debug(f"Executing: {' '.join(sql.split())} params={params}")

        try:
            with connection.cursor() as cursor:
                cursor.execute(sql, params)
                rows = cursor.fetchall()
        except pymysql.MySQLError as e:
            raise self._translate_error(e, sql) from e

        return [{str(label).upper(): value for label, value in row.items()} for row in rows]

    def fetch_column(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Any]:
        """Run a query and return the first column of every row"""
        return [next(iter(row.values())) for row in self.fetch_all(sql, params) if row]

    def use_database(self, name: str) -> bool:
        """Switch the connection to another database. Returns True on success."""
        self.fetch_all(f"use {quote_identifier(name)}")
        self.logger.info(f"Switched database from {self.database} to {name}")
        self.config['database'] = name
        return True

    def close(self):
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def _require_connection(self):
        if self.connection is None:
            raise DatabaseConnectionError("MySQL connection is not open")
        return self.connection

    @staticmethod
    def _translate_error(error: Exception, sql: str) -> Exception:
        errno = error.args[0] if error.args and isinstance(error.args[0], int) else None
        detail = str(error.args[1]) if len(error.args) > 1 else str(error)

        if isinstance(error, pymysql.err.InterfaceError) or (errno is not None and errno >= CLIENT_ERROR_MIN):
            return DatabaseConnectionError(f"MySQL connection error ({errno}): {detail}\n{sql.strip()}", sql=sql, errno=errno)
        return QueryError(sql, errno, detail)
