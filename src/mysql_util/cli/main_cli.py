"""
Command line tools for dumping table metadata
"""

import argparse
import sys
from typing import List, Optional

from ..database import MySQLUtil, MySQLUtilError
from ..database.models import Constraints, Indexes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="myutil", description="Dump MySQL table metadata")
    parser.add_argument("--dsn", help="mysql+pymysql://host[:port]/schema (default: MYSQL_* environment)")
    parser.add_argument("--user", help="MySQL user (overrides the DSN/environment)")
    parser.add_argument("--password", help="MySQL password (overrides the DSN/environment)")
    parser.add_argument("--database", help="switch to this database after connecting")

    commands = parser.add_subparsers(dest="command", required=True)

    tables = commands.add_parser("tables", help="list tables")
    tables.add_argument("--depth", action="store_true", help="show each table's depth")

    for name, help_text in (
        ("describe", "show columns"),
        ("constraints", "show all constraints"),
        ("fks", "show foreign keys"),
        ("indexes", "show indexes classified as pk/ak/fk/other"),
        ("depth", "show table depth in the foreign key hierarchy"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("tables", nargs="*", help="tables to dump (default: all)")

    return parser


def connect(args: argparse.Namespace) -> MySQLUtil:
    if args.dsn:
        util = MySQLUtil.connect(args.dsn, user=args.user, password=args.password)
    else:
        util = MySQLUtil.from_env()
    if args.database:
        util.use_database(args.database)
    return util


def _format_constraints(constraints: Constraints) -> List[str]:
    lines = []
    for name, columns in constraints.items():
        cols = ", ".join(col.column_name for col in columns)
        line = f"  {name} ({columns[0].constraint_type.value}): {cols}"
        if columns[0].referenced_table_name:
            refs = ", ".join(col.referenced_column_name or "?" for col in columns)
            line += f" -> {columns[0].referenced_table_name}({refs})"
        lines.append(line)
    return lines


def _format_indexes(label: str, indexes: Indexes) -> List[str]:
    return [
        f"  [{label}] {name}: " + ", ".join(col.column_name if col else "?" for col in columns)
        for name, columns in indexes.items()
    ]


def print_tables(util: MySQLUtil, with_depth: bool = False):
    tables = util.get_tables()
    if not tables:
        print(f"No tables found in {util.database}")
        return
    for table in tables:
        print(f"{table} (depth {util.get_depth(table)})" if with_depth else table)


def print_describe(util: MySQLUtil, table: str):
    print(table)
    for col in util.describe_table(table):
        null = "NULL" if col.null else "NOT NULL"
        extra = f" {col.extra}" if col.extra else ""
        print(f"  {col.field}: {col.type} {null}{extra}")


def print_constraints(util: MySQLUtil, table: str):
    print(table)
    for line in _format_constraints(util.get_constraints(table)):
        print(line)


def print_fks(util: MySQLUtil, table: str):
    print(table)
    for line in _format_constraints(util.get_fk_constraints(table)):
        print(line)


def print_indexes(util: MySQLUtil, table: str):
    print(table)
    pk = util.get_pk_index(table)
    if pk:
        print("  [pk] PRIMARY: " + ", ".join(col.column_name if col else "?" for col in pk))
    for line in _format_indexes("ak", util.get_ak_indexes(table)):
        print(line)
    for line in _format_indexes("fk", util.get_fk_indexes(table)):
        print(line)
    for line in _format_indexes("other", util.get_other_indexes(table)):
        print(line)


def print_depth(util: MySQLUtil, table: str):
    print(f"{table}: {util.get_depth(table)}")


PRINTERS = {
    "describe": print_describe,
    "constraints": print_constraints,
    "fks": print_fks,
    "indexes": print_indexes,
    "depth": print_depth,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the myutil command"""
    args = build_parser().parse_args(argv)

    try:
        with connect(args) as util:
            if args.command == "tables":
                print_tables(util, with_depth=args.depth)
                return 0

            for table in args.tables or util.get_tables():
                PRINTERS[args.command](util, table)

            if args.command == "depth" and not args.tables:
                print(f"max depth: {util.get_max_depth()}")
    except (MySQLUtilError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def _run(command: str, argv: Optional[List[str]]) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    # connection options go before the subcommand
    options, tables = [], []
    while argv:
        arg = argv.pop(0)
        if arg in ("--dsn", "--user", "--password", "--database") and argv:
            options += [arg, argv.pop(0)]
        elif arg.split("=", 1)[0] in ("--dsn", "--user", "--password", "--database"):
            options.append(arg)
        else:
            tables.append(arg)
    return main(options + [command] + tables)


def dump_tables(argv: Optional[List[str]] = None) -> int:
    """myutil_dump_tables: list tables with their depth"""
    return _run("tables", (sys.argv[1:] if argv is None else argv) + ["--depth"])


def dump_table_constraints(argv: Optional[List[str]] = None) -> int:
    """myutil_dump_table_constraints [TABLE ...]"""
    return _run("constraints", argv)


def dump_table_fks(argv: Optional[List[str]] = None) -> int:
    """myutil_dump_table_fks [TABLE ...]"""
    return _run("fks", argv)


if __name__ == "__main__":
    sys.exit(main())
