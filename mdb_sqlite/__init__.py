"""MS Access to SQLite Converter

A Python tool for converting MS Access database files to SQLite databases,
schema first and then data, in a single transaction.
"""

from .access import AccessDatabase, AccessTable, Column
from .converter import AccessToSqlite, coerce_value, main, quote_identifier
from .errors import ConversionError, SourceReadError, UnsupportedTypeError
from .types import TYPE_MAPPING, DataType, sqlite_type_for

__version__ = "0.1.0"
__all__ = [
    "AccessDatabase",
    "AccessTable",
    "AccessToSqlite",
    "Column",
    "ConversionError",
    "DataType",
    "SourceReadError",
    "TYPE_MAPPING",
    "UnsupportedTypeError",
    "coerce_value",
    "main",
    "quote_identifier",
    "sqlite_type_for",
]
