"""
Table hierarchy analysis over foreign key relationships
"""

import networkx as nx
from typing import Dict, List, Optional, Set, Tuple

from ..database.errors import CyclicSchemaError
from .logger import setup_logger


class SchemaAnalyzer:
    """Compute table depths and the foreign key reference graph.

    ``util`` is the metadata accessor that owns this analyzer; it supplies
    ``get_tables()``, ``get_fk_constraints(table)`` and ``database``.
    Depths are memoized per (database, table) for the lifetime of the analyzer.
    """

    def __init__(self, util):
        self.util = util
        self._depth_cache: Dict[Tuple[Optional[str], str], int] = {}
        self.logger = setup_logger("mysql_util.schema_analyzer")

    def get_parent_tables(self, table: str) -> List[str]:
        """Tables referenced by the foreign keys of table, self references excluded"""
        parents = []
        for columns in self.util.get_fk_constraints(table).values():
            # every column of one constraint references the same table
            parent = columns[0].referenced_table_name
            if parent is None or parent == table or parent in parents:
                continue
            parents.append(parent)
        return parents

    def get_depth(self, table: str) -> int:
        """Zero based depth of table in the model hierarchy.

        A table with no foreign keys to other tables has depth 0. Otherwise its
        depth is one more than the deepest parent. Raises CyclicSchemaError when
        the foreign keys loop back through other tables.
        """
        return self._resolve(table, [], set())

    def _resolve(self, table: str, path: List[str], on_path: Set[str]) -> int:
        key = (self.util.database, table)
        if key in self._depth_cache:
            return self._depth_cache[key]

        if table in on_path:
            cycle = path[path.index(table):] + [table]
            self.logger.error(f"Cycle detected while computing depth: {' -> '.join(cycle)}")
            raise CyclicSchemaError(cycle)

        path.append(table)
        on_path.add(table)
        try:
            depth = 0
            for parent in self.get_parent_tables(table):
                depth = max(depth, self._resolve(parent, path, on_path) + 1)
        finally:
            path.pop()
            on_path.discard(table)

        self._depth_cache[key] = depth
        self.logger.debug(f"Depth of {table} is {depth}")
        return depth

    def get_max_depth(self) -> int:
        """Deepest table depth in the current database, 0 when it has no tables"""
        return max((self.get_depth(table) for table in self.util.get_tables()), default=0)

    def build_reference_graph(self) -> nx.DiGraph:
        """Directed graph with an edge child -> parent per foreign key"""
        graph = nx.DiGraph()

        for table in self.util.get_tables():
            graph.add_node(table)
            for name, columns in self.util.get_fk_constraints(table).items():
                parent = columns[0].referenced_table_name
                if parent is None or parent == table:
                    continue
                graph.add_edge(
                    table,
                    parent,
                    constraint_name=name,
                    columns=[col.column_name for col in columns],
                    referenced_columns=[col.referenced_column_name for col in columns],
                )

        return graph

    def find_circular_references(self) -> List[List[str]]:
        """Find circular references in the schema"""
        return list(nx.simple_cycles(self.build_reference_graph()))

    def get_insertion_order(self) -> List[str]:
        """Tables ordered parents first, so rows can be loaded without violating foreign keys"""
        return sorted(self.util.get_tables(), key=lambda table: (self.get_depth(table), table))
