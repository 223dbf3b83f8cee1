"""
Database factory for creating connected MySQL adapters
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .adapters import MySQLAdapter
from ..config import DEFAULT_PORT, Settings, load_settings


class DatabaseFactory:
    """Factory class to create MySQL adapters from a URL, a config dict or the environment"""

    REQUIRED_CONFIG = ['host', 'user', 'database']

    @staticmethod
    def parse_dsn(dsn: str) -> Dict[str, Any]:
        """Split a SQLAlchemy style URL such as mysql+pymysql://host:3306/schema"""
        try:
            url = make_url(dsn)
        except ArgumentError as e:
            raise ValueError(f"Invalid MySQL URL {dsn!r}: {e}") from e

        if url.get_backend_name() != 'mysql':
            raise ValueError(f"Unsupported database type: {url.get_backend_name()}")

        return {
            'host': url.host,
            'port': url.port or DEFAULT_PORT,
            'user': url.username,
            'password': url.password,
            'database': url.database,
        }

    @classmethod
    def create_connector(cls, config: Dict[str, Any], connect: bool = True) -> MySQLAdapter:
        """Create an adapter for config, connecting it unless told otherwise"""
        missing = cls.get_missing_config(config)
        if missing:
            raise ValueError(f"Missing MySQL configuration: {', '.join(missing)}")

        adapter = MySQLAdapter(config)
        if connect:
            adapter.connect()
        return adapter

    @classmethod
    def from_dsn(cls, dsn: str, user: Optional[str] = None,
                 password: Optional[str] = None, connect: bool = True) -> MySQLAdapter:
        """Create an adapter from a URL; explicit user/password win over the URL's"""
        config = cls.parse_dsn(dsn)
        if user is not None:
            config['user'] = user
        if password is not None:
            config['password'] = password
        return cls.create_connector(config, connect=connect)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, connect: bool = True) -> MySQLAdapter:
        """Create an adapter from environment settings (MYSQL_URL wins over MYSQL_HOST/PORT/DB)"""
        settings = settings or load_settings()
        if settings.url:
            return cls.from_dsn(settings.url, user=settings.user,
                                password=settings.password, connect=connect)
        return cls.create_connector(settings.to_config(), connect=connect)

    @classmethod
    def get_missing_config(cls, config: Dict[str, Any]) -> List[str]:
        return [key for key in cls.REQUIRED_CONFIG if not config.get(key)]
