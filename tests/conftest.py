"""Shared fixtures: an in-memory stand-in for a pymysql connection."""
import pymysql
import pytest

from mysql_util import MySQLUtil

SHOP_URL = "mysql+pymysql://localhost/shop"


def col(field, type_, null="NO", key="", default=None, extra=""):
    return {"Field": field, "Type": type_, "Null": null, "Key": key, "Default": default, "Extra": extra}


def idx(table, key_name, seq, column, non_unique):
    return {
        "Table": table,
        "Non_unique": non_unique,
        "Key_name": key_name,
        "Seq_in_index": seq,
        "Column_name": column,
        "Collation": "A",
        "Cardinality": 0,
        "Sub_part": None,
        "Packed": None,
        "Null": "",
        "Index_type": "BTREE",
        "Comment": "",
        "Index_comment": "",
    }


def con(name, type_, column, pos, ref_table=None, ref_col=None):
    return {
        "constraint_name": name,
        "constraint_type": type_,
        "column_name": column,
        "ordinal_position": pos,
        "position_in_unique_constraint": 1 if ref_table else None,
        "referenced_table_name": ref_table,
        "referenced_column_name": ref_col,
    }


def shop_database():
    """customers <- orders <- order_items, shipments -> (orders, customers), employees -> employees"""
    return {
        "tables": ["audit_log", "customers", "employees", "order_items", "orders", "shipments"],
        "columns": {
            "audit_log": [col("ts", "datetime"), col("message", "text", null="YES"), col("user_id", "int")],
            "customers": [
                col("id", "int", key="PRI", extra="auto_increment"),
                col("email", "varchar(255)", key="UNI"),
                col("name", "varchar(100)", null="YES"),
            ],
            "employees": [col("id", "int", key="PRI"), col("manager_id", "int", null="YES", key="MUL")],
            "order_items": [
                col("id", "int", key="PRI"),
                col("order_id", "int", key="MUL"),
                col("line_no", "int"),
            ],
            "orders": [
                col("id", "int", key="PRI"),
                col("customer_id", "int", key="MUL"),
                col("created_at", "datetime", default="CURRENT_TIMESTAMP"),
            ],
            "shipments": [
                col("id", "int", key="PRI"),
                col("order_id", "int", key="MUL"),
                col("customer_id", "int", key="MUL"),
            ],
        },
        "indexes": {
            "audit_log": [
                idx("audit_log", "ix_gap", 3, "user_id", 1),
                idx("audit_log", "ix_gap", 1, "ts", 1),
            ],
            "customers": [
                idx("customers", "PRIMARY", 1, "id", 0),
                idx("customers", "uq_email", 1, "email", 0),
            ],
            "employees": [
                idx("employees", "PRIMARY", 1, "id", 0),
                idx("employees", "fk_emp_manager", 1, "manager_id", 1),
            ],
            "order_items": [
                idx("order_items", "PRIMARY", 1, "id", 0),
                idx("order_items", "UQ1", 2, "line_no", 0),
                idx("order_items", "UQ1", 1, "order_id", 0),
                idx("order_items", "ix_order", 1, "order_id", 1),
            ],
            "orders": [
                idx("orders", "PRIMARY", 1, "id", 0),
                idx("orders", "fk_orders_customer", 1, "customer_id", 1),
                idx("orders", "idx_created", 1, "created_at", 1),
            ],
            "shipments": [
                idx("shipments", "PRIMARY", 1, "id", 0),
                idx("shipments", "ix_ship_order", 1, "order_id", 1),
                idx("shipments", "ix_ship_customer", 1, "customer_id", 1),
            ],
        },
        "constraints": {
            "audit_log": [],
            "customers": [
                con("PRIMARY", "PRIMARY KEY", "id", 1),
                con("chk_email", "CHECK", "email", 1),
                con("uq_email", "UNIQUE", "email", 1),
            ],
            "employees": [
                con("PRIMARY", "PRIMARY KEY", "id", 1),
                con("fk_emp_manager", "FOREIGN KEY", "manager_id", 1, "employees", "id"),
            ],
            "order_items": [
                con("PRIMARY", "PRIMARY KEY", "id", 1),
                con("UQ1", "UNIQUE", "order_id", 1),
                con("UQ1", "UNIQUE", "line_no", 2),
                con("fk_items_order", "FOREIGN KEY", "order_id", 1, "orders", "id"),
            ],
            "orders": [
                con("PRIMARY", "PRIMARY KEY", "id", 1),
                con("fk_orders_customer", "FOREIGN KEY", "customer_id", 1, "customers", "id"),
            ],
            "shipments": [
                con("PRIMARY", "PRIMARY KEY", "id", 1),
                con("fk_ship_customer", "FOREIGN KEY", "customer_id", 1, "customers", "id"),
                con("fk_ship_order", "FOREIGN KEY", "order_id", 1, "orders", "id"),
                con("fk_ship_order_again", "FOREIGN KEY", "order_id", 1, "orders", "id"),
            ],
        },
    }


def cyclic_database():
    """a -> b -> a"""
    return {
        "tables": ["a", "b", "c"],
        "columns": {"a": [col("id", "int", key="PRI")], "b": [col("id", "int", key="PRI")], "c": []},
        "indexes": {"a": [], "b": [], "c": []},
        "constraints": {
            "a": [con("fk_a_b", "FOREIGN KEY", "b_id", 1, "b", "id")],
            "b": [con("fk_b_a", "FOREIGN KEY", "a_id", 1, "a", "id")],
            "c": [con("fk_c_a", "FOREIGN KEY", "a_id", 1, "a", "id")],
        },
    }


def billing_database():
    """invoices -> customers, with two indexes covering the FK column"""
    return {
        "tables": ["customers", "invoices"],
        "columns": {
            "customers": [col("id", "int", key="PRI")],
            "invoices": [col("id", "int", key="PRI"), col("customer_id", "int", key="MUL")],
        },
        "indexes": {
            "customers": [idx("customers", "PRIMARY", 1, "id", 0)],
            "invoices": [
                idx("invoices", "PRIMARY", 1, "id", 0),
                idx("invoices", "ix_first", 1, "customer_id", 1),
                idx("invoices", "fk_invoices_customer", 1, "customer_id", 1),
            ],
        },
        "constraints": {
            "customers": [con("PRIMARY", "PRIMARY KEY", "id", 1)],
            "invoices": [
                con("PRIMARY", "PRIMARY KEY", "id", 1),
                con("fk_invoices_customer", "FOREIGN KEY", "customer_id", 1, "customers", "id"),
            ],
        },
    }


def empty_database():
    return {"tables": [], "columns": {}, "indexes": {}, "constraints": {}}


def _unquote(identifier):
    return identifier.strip().strip("`").replace("``", "`")


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self._rows = ()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def execute(self, sql, params=None):
        self.connection.queries.append((sql, params))
        if self.connection.fail_next is not None:
            error, self.connection.fail_next = self.connection.fail_next, None
            raise error
        self._rows = self.connection.respond(" ".join(sql.split()), params)

    def fetchall(self):
        return [dict(row) for row in self._rows]


class FakeConnection:
    """Answers the handful of statements the accessor issues, per database"""

    def __init__(self, databases, database):
        self.databases = databases
        self.database = database
        self.queries = []
        self.fail_next = None
        self.closed = False
        self.connect_kwargs = None

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True

    def _missing_table(self, table):
        return pymysql.err.ProgrammingError(1146, f"Table '{self.database}.{table}' doesn't exist")

    def respond(self, sql, params):
        db = self.databases[self.database]
        lower = sql.lower()

        if lower.startswith("describe "):
            table = _unquote(sql[len("describe "):])
            if table not in db["columns"]:
                raise self._missing_table(table)
            return db["columns"][table]

        if lower.startswith("show indexes in "):
            table = _unquote(sql[len("show indexes in "):])
            if table not in db["indexes"]:
                raise self._missing_table(table)
            return db["indexes"][table]

        if lower.startswith("show tables like "):
            name = params[0].replace("\\_", "_").replace("\\%", "%").replace("\\\\", "\\")
            return [{f"Tables_in_{self.database}": name}] if name in db["tables"] else []

        if lower == "show tables":
            return [{f"Tables_in_{self.database}": table} for table in db["tables"]]

        if "information_schema.table_constraints" in lower:
            return db["constraints"].get(params[0], [])

        if lower.startswith("use "):
            name = _unquote(sql[len("use "):])
            if name not in self.databases:
                raise pymysql.err.OperationalError(1049, f"Unknown database '{name}'")
            self.database = name
            return ()

        raise pymysql.err.ProgrammingError(1064, "You have an error in your SQL syntax")


@pytest.fixture
def fake_server():
    """Fake MySQL server holding the shop, billing, cyclic and empty databases."""
    return FakeConnection(
        {
            "shop": shop_database(),
            "billing": billing_database(),
            "cyclic": cyclic_database(),
            "empty": empty_database(),
        },
        "shop",
    )


@pytest.fixture
def patched_connect(fake_server, monkeypatch):
    """Route pymysql.connect to the fake server."""
    def connect(**kwargs):
        fake_server.connect_kwargs = kwargs
        fake_server.database = kwargs.get("database") or fake_server.database
        return fake_server

    monkeypatch.setattr(pymysql, "connect", connect)
    return fake_server


@pytest.fixture
def util(patched_connect):
    """Accessor connected to the shop database."""
    return MySQLUtil.connect(SHOP_URL, user="tester", password="secret")
