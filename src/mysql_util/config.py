"""
Connection settings loaded from the environment and an optional .env file
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

DEFAULT_PORT = 3306


@dataclass
class Settings:
    """MySQL connection settings"""
    host: Optional[str] = None
    port: int = DEFAULT_PORT
    user: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None
    url: Optional[str] = None

    def to_config(self) -> Dict[str, Any]:
        """Connection config dict in the shape DatabaseFactory expects"""
        return {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': self.database,
        }


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Read MYSQL_* variables, after loading .env without overriding the process environment"""
    load_dotenv(dotenv_path)

    return Settings(
        host=os.getenv('MYSQL_HOST'),
        port=int(os.getenv('MYSQL_PORT', DEFAULT_PORT)),
        user=os.getenv('MYSQL_USER'),
        password=os.getenv('MYSQL_PASSWORD'),
        database=os.getenv('MYSQL_DB'),
        url=os.getenv('MYSQL_URL'),
    )
