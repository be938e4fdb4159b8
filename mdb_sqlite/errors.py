"""
Exceptions raised while converting an Access database.
"""

import sqlite3


class ConversionError(Exception):
    """Base class for conversion failures."""


class UnsupportedTypeError(ConversionError):
    """A source column has a type with no SQLite mapping."""

    def __init__(self, table: str, column: str, data_type):
        self.table = table
        self.column = column
        self.data_type = data_type
        type_name = data_type.name if hasattr(data_type, 'name') else data_type
        super().__init__(f"Unhandled MS Access datatype {type_name} for column {column!r} in table {table!r}")


class SourceReadError(ConversionError):
    """The Access file could not be opened or read."""


# Destination failures propagate as the sqlite3 exception itself
DestinationExecutionError = sqlite3.Error
