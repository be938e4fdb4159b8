#!/usr/bin/env python3
"""
MS Access to SQLite Converter
Exports the tables of an MS Access database into an SQLite database.
"""

import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Union
import logging

from .access import AccessDatabase, Column
from .errors import UnsupportedTypeError
from .types import DataType, sqlite_type_for

logger = logging.getLogger(__name__)


def quote_identifier(identifier: str) -> str:
    """Quote a table or column name for SQLite, doubling embedded quotes."""
    return '"' + identifier.replace('"', '""') + '"'


def coerce_value(data_type: Union[DataType, str], value):
    """Convert a non-NULL source value to the value bound for its column."""
    if data_type == DataType.MONEY:
        # Exact decimal text, never a float
        return str(value)
    if data_type == DataType.BOOLEAN:
        return 1 if value else 0
    if data_type == DataType.SHORT_DATE_TIME:
        if isinstance(value, datetime):
            return value.isoformat(' ')
        if isinstance(value, date):
            return value.isoformat()
    return value


class AccessToSqlite:
    """Exports an MS Access database to an SQLite connection."""

    # Configuration constants
    BATCH_SIZE = 1000
    PROGRESS_INTERVAL = 10000

    def __init__(self, database):
        self.database = database

    def export(self, connection: sqlite3.Connection) -> Dict[str, int]:
        """Create and populate one SQLite table per Access table in a single transaction.

        The target database should be empty. On failure the transaction is rolled
        back and the exception is re-raised. Returns the row count per table.
        """
        table_names = sorted(self.database.table_names())
        logger.info(f"Exporting {len(table_names)} tables")

        connection.autocommit = False
        try:
            self._create_tables(connection, table_names)
            row_counts = self._populate_tables(connection, table_names)
            connection.commit()
        except BaseException as e:
            # Interrupts too: turning autocommit back on would commit the open transaction
            logger.error(f"Export failed: {e!r}")
            connection.rollback()
            raise
        finally:
            connection.autocommit = True

        logger.info(f"Export completed: {sum(row_counts.values())} rows in {len(row_counts)} tables")
        return row_counts

    def _create_tables(self, connection: sqlite3.Connection, table_names: List[str]):
        for table_name in table_names:
            self._create_table(connection, self.database.get_table(table_name))

    def _create_table(self, connection: sqlite3.Connection, table):
        """Create a single table in SQLite."""
        logger.info(f"Creating table: {table.name}")

        column_defs = []
        for column in table.columns:
            sqlite_type = sqlite_type_for(column.type)
            if sqlite_type is None:
                raise UnsupportedTypeError(table.name, column.name, column.type)
            column_defs.append(f"{quote_identifier(column.name)} {sqlite_type}")

        create_sql = f"CREATE TABLE {quote_identifier(table.name)} ({', '.join(column_defs)})"
        logger.debug(f"SQL: {create_sql}")
        connection.execute(create_sql)

    def _populate_tables(self, connection: sqlite3.Connection, table_names: List[str]) -> Dict[str, int]:
        row_counts = {}
        for table_name in table_names:
            row_counts[table_name] = self._populate_table(connection, self.database.get_table(table_name))
        return row_counts

    def _populate_table(self, connection: sqlite3.Connection, table) -> int:
        """Copy every row of a table. Returns the number of rows inserted."""
        columns = table.columns
        column_names = ', '.join(quote_identifier(column.name) for column in columns)
        placeholders = ', '.join('?' for _ in columns)
        insert_sql = f"INSERT INTO {quote_identifier(table.name)} ({column_names}) VALUES ({placeholders})"

        logger.debug(f"SQL: {insert_sql}")

        cursor = connection.cursor()
        rows_imported = 0
        batch_data = []

        for row in table.rows():
            batch_data.append(self._bind_row(columns, row))

            if len(batch_data) >= self.BATCH_SIZE:
                cursor.executemany(insert_sql, batch_data)
                rows_imported += len(batch_data)
                batch_data = []

                if rows_imported % self.PROGRESS_INTERVAL == 0:
                    logger.debug(f"Imported {rows_imported} rows for {table.name}")

        if batch_data:
            cursor.executemany(insert_sql, batch_data)
            rows_imported += len(batch_data)

        logger.info(f"Completed import for {table.name}: {rows_imported} rows")
        return rows_imported

    @staticmethod
    def _bind_row(columns: List[Column], row) -> List:
        values = []
        for column in columns:
            value = row.get(column.name)
            values.append(None if value is None else coerce_value(column.type, value))
        return values


def main(argv=None):
    """Command line interface."""
    import argparse

    parser = argparse.ArgumentParser(description='Convert MS Access files to SQLite')
    parser.add_argument('access_file', help='Path to MS Access file')
    parser.add_argument('sqlite_file', help='Output SQLite file path')
    parser.add_argument('--overwrite', action='store_true', help='Replace the output file if it exists')
    parser.add_argument('--mdbtools-dir', help='Directory holding the mdbtools programs')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose logging')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    access_path = Path(args.access_file)
    sqlite_path = Path(args.sqlite_file)

    if not access_path.is_file():
        parser.error(f"Access file not found: {access_path}")
    if sqlite_path.exists():
        if not args.overwrite:
            parser.error(f"Output file already exists: {sqlite_path} (use --overwrite to replace it)")
        logger.warning(f"Output file already exists and will be overwritten: {sqlite_path}")
        sqlite_path.unlink()

    # Create parent directory if it doesn't exist
    sqlite_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Converting {access_path} to {sqlite_path}")

    converter = AccessToSqlite(AccessDatabase(access_path, mdbtools_dir=args.mdbtools_dir))
    connection = sqlite3.connect(sqlite_path, autocommit=True)
    try:
        converter.export(connection)
    finally:
        connection.close()

    print(f"Conversion completed: {sqlite_path}")


if __name__ == '__main__':
    main()
