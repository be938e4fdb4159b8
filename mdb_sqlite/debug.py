#!/usr/bin/env python3
"""
Debug tool for looking inside an MS Access file before converting it.
"""

from itertools import islice
import logging

from .access import AccessDatabase
from .types import sqlite_type_for

logger = logging.getLogger(__name__)


def debug_access_file(database, sample_rows=1):
    """Print tables, column types and the first rows of an Access database."""
    print(f"\n=== DEBUGGING ACCESS FILE: {database} ===")

    table_names = sorted(database.table_names())
    print(f"\n1. Tables: {len(table_names)}")

    unsupported = 0
    for table_name in table_names:
        table = database.get_table(table_name)
        print(f"\n   Table {table.name} ({len(table.columns)} columns)")

        for column in table.columns:
            type_name = column.type.name if hasattr(column.type, 'name') else column.type
            sqlite_type = sqlite_type_for(column.type)
            if sqlite_type is None:
                unsupported += 1
                sqlite_type = 'UNSUPPORTED'
            print(f"     {column.name}: {type_name} -> {sqlite_type}")

        if sample_rows > 0:
            for i, row in enumerate(islice(table.rows(), sample_rows)):
                print(f"     Row {i + 1}: {row}")

    print(f"\n2. Unsupported columns: {unsupported}")
    if unsupported:
        print("   Export will fail until these columns are removed from the source.")
    return unsupported


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description='Inspect an MS Access file')
    parser.add_argument('access_file', help='Path to MS Access file')
    parser.add_argument('--rows', type=int, default=1, help='Sample rows to print per table')
    parser.add_argument('--mdbtools-dir', help='Directory holding the mdbtools programs')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG)

    debug_access_file(AccessDatabase(args.access_file, mdbtools_dir=args.mdbtools_dir), sample_rows=args.rows)


if __name__ == "__main__":
    main()
