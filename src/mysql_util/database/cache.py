"""
Per-accessor memoization of metadata query results
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..utils.logger import setup_logger

# (database, table)
CacheKey = Tuple[Optional[str], str]


class CacheKind(Enum):
    """Result kinds the accessor memoizes"""
    DESCRIBE = "describe"
    CONSTRAINTS = "constraints"
    INDEXES = "indexes"


class TableCache:
    """A cached result plus the number of times it has been read"""

    def __init__(self, data: Any):
        self.value = data
        self.hits = 0

    def read(self) -> Any:
        self.hits += 1
        return self.value


class MetadataCache:
    """Unbounded cache with one store per CacheKind. Entries are never replaced or evicted."""

    def __init__(self):
        self._describe: Dict[CacheKey, TableCache] = {}
        self._constraints: Dict[CacheKey, TableCache] = {}
        self._indexes: Dict[CacheKey, TableCache] = {}
        self.logger = setup_logger("mysql_util.cache")

    def _store(self, kind: CacheKind) -> Dict[CacheKey, TableCache]:
        if kind is CacheKind.DESCRIBE:
            return self._describe
        if kind is CacheKind.CONSTRAINTS:
            return self._constraints
        return self._indexes

    def get(self, kind: CacheKind, key: CacheKey) -> Optional[Any]:
        entry = self._store(kind).get(key)
        if entry is None:
            return None
        value = entry.read()
        self.logger.debug(f"Cache hit {kind.value} {key} (hits={entry.hits})")
        return value

    def put(self, kind: CacheKind, key: CacheKey, value: Any) -> Any:
        """Store value unless key is already populated; returns the cached value"""
        store = self._store(kind)
        if key not in store:
            store[key] = TableCache(value)
        return store[key].value

    def hits(self, kind: CacheKind, key: CacheKey) -> int:
        entry = self._store(kind).get(key)
        return entry.hits if entry else 0

    def __contains__(self, item: Tuple[CacheKind, CacheKey]) -> bool:
        kind, key = item
        return key in self._store(kind)

    def __len__(self) -> int:
        return len(self._describe) + len(self._constraints) + len(self._indexes)
