"""
Access column types and their SQLite counterparts.
"""

from enum import IntEnum
from typing import Optional, Union


class DataType(IntEnum):
    """Access column type tags, valued by their on-disk type codes."""

    BOOLEAN = 0x01
    BYTE = 0x02
    INT = 0x03
    LONG = 0x04
    MONEY = 0x05
    FLOAT = 0x06
    DOUBLE = 0x07
    SHORT_DATE_TIME = 0x08
    BINARY = 0x09
    TEXT = 0x0A
    OLE = 0x0B
    MEMO = 0x0C
    UNKNOWN_0D = 0x0D
    GUID = 0x0F
    NUMERIC = 0x10
    UNKNOWN_11 = 0x11
    COMPLEX_TYPE = 0x12
    BIG_INT = 0x13
    EXT_DATE_TIME = 0x14


# Types missing here cannot be exported
TYPE_MAPPING = {
    DataType.BINARY: 'BLOB',
    DataType.OLE: 'BLOB',
    DataType.BOOLEAN: 'INTEGER',
    DataType.BYTE: 'INTEGER',
    DataType.INT: 'INTEGER',
    DataType.LONG: 'INTEGER',
    DataType.SHORT_DATE_TIME: 'DATETIME',
    DataType.DOUBLE: 'DOUBLE',
    DataType.FLOAT: 'DOUBLE',
    DataType.NUMERIC: 'DOUBLE',
    DataType.TEXT: 'TEXT',
    DataType.GUID: 'TEXT',
    DataType.MEMO: 'TEXT',
    # Money can't be floating point, so it is kept as decimal text
    DataType.MONEY: 'TEXT',
}


def sqlite_type_for(data_type: Union[DataType, str]) -> Optional[str]:
    """Return the SQLite column type for an Access type, or None if unsupported."""
    if not isinstance(data_type, DataType):
        return None
    return TYPE_MAPPING.get(data_type)
