"""
Shared fixtures: an in-memory stand-in for an Access database and an SQLite target.
"""

import sqlite3

import pytest

from mdb_sqlite.access import Column
from mdb_sqlite.converter import quote_identifier
from mdb_sqlite.errors import SourceReadError


class FakeTable:
    """Table with fixed rows. Raises `error` (SourceReadError by default) after `fail_after` rows when set."""

    def __init__(self, name, columns, rows=(), fail_after=None, error=SourceReadError):
        self.name = name
        self.columns = [Column(*column) for column in columns]
        self._rows = list(rows)
        self.fail_after = fail_after
        self.error = error
        self.rows_requested = 0

    def rows(self):
        self.rows_requested += 1
        for i, row in enumerate(self._rows):
            if self.fail_after is not None and i == self.fail_after:
                raise self.error(f"Simulated read failure in {self.name} at row {i}")
            yield dict(row)


class FakeDatabase:
    def __init__(self, *tables):
        self.tables = {table.name: table for table in tables}

    def __repr__(self):
        return "FakeDatabase()"

    def table_names(self):
        return list(self.tables)

    def get_table(self, name):
        return self.tables[name]


@pytest.fixture
def sqlite_conn():
    """In-memory SQLite connection in autocommit mode."""
    conn = sqlite3.connect(":memory:", autocommit=True)
    yield conn
    conn.close()


def table_names(conn):
    return [row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")]


def table_columns(conn, table):
    """(name, declared type) pairs in column order."""
    return [(row[1], row[2]) for row in conn.execute(f"PRAGMA table_info({quote_identifier(table)})")]
