"""
Read access to MS Access files through the mdbtools command line programs.

mdb-tables lists the user tables, mdb-schema (access backend) describes their
columns and mdb-export streams each table as CSV. Values are converted from
CSV text to Python values according to the column's Access type.
"""

import csv
import io
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union
import logging

from .errors import SourceReadError
from .types import DataType

logger = logging.getLogger(__name__)

# Type names printed by `mdb-schema <file> access`
ACCESS_TYPE_NAMES = {
    'boolean': DataType.BOOLEAN,
    'byte': DataType.BYTE,
    'integer': DataType.INT,
    'long integer': DataType.LONG,
    'currency': DataType.MONEY,
    'single': DataType.FLOAT,
    'double': DataType.DOUBLE,
    'datetime': DataType.SHORT_DATE_TIME,
    'date/time': DataType.SHORT_DATE_TIME,
    'binary': DataType.BINARY,
    'text': DataType.TEXT,
    'ole': DataType.OLE,
    'memo/hyperlink': DataType.MEMO,
    'replication id': DataType.GUID,
    'numeric': DataType.NUMERIC,
}

CREATE_TABLE_RE = re.compile(r'^\s*CREATE TABLE \[(?P<name>[^\]]+)\]')
COLUMN_RE = re.compile(r'^\s*\[(?P<name>[^\]]+)\]\s+(?P<type>.*?)\s*,?\s*$')
UNKNOWN_TYPE_RE = re.compile(r'^Unknown 0x(?P<code>[0-9a-fA-F]+)$')

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


@dataclass(frozen=True)
class Column:
    """A source column: its name and Access type (or the raw type name if unrecognised)."""

    name: str
    type: Union[DataType, str]


def parse_type_name(type_name: str) -> Union[DataType, str]:
    """Map an mdb-schema type name such as ``Text (50)`` to a DataType."""
    base = re.sub(r'\s+NOT NULL$', '', type_name.strip(), flags=re.IGNORECASE)
    base = re.sub(r'\s*\(.*\)$', '', base)

    data_type = ACCESS_TYPE_NAMES.get(base.lower())
    if data_type is not None:
        return data_type

    match = UNKNOWN_TYPE_RE.match(base)
    if match:
        code = int(match.group('code'), 16)
        if code in set(DataType):
            return DataType(code)

    logger.debug(f"Unrecognised Access type name: {type_name!r}")
    return base


def parse_schema(text: str) -> Dict[str, List[Column]]:
    """Parse `mdb-schema <file> access` output into columns per table, in declared order."""
    tables = {}
    current = None

    for line in text.splitlines():
        if current is None:
            match = CREATE_TABLE_RE.match(line)
            if match:
                current = tables.setdefault(match.group('name'), [])
            continue

        if line.strip().startswith(');'):
            current = None
            continue

        match = COLUMN_RE.match(line)
        if match:
            current.append(Column(match.group('name'), parse_type_name(match.group('type'))))

    return tables


def convert_field(data_type: Union[DataType, str], text: Optional[str]):
    """Convert one exported CSV field to a Python value. Raises ValueError on bad input."""
    if text is None:
        return None

    if data_type == DataType.BOOLEAN:
        flag = text.strip().upper()
        if flag in ('1', '-1', 'TRUE'):
            return True
        if flag in ('0', 'FALSE'):
            return False
        raise ValueError(f"not a boolean: {text!r}")
    if data_type in (DataType.BYTE, DataType.INT, DataType.LONG, DataType.BIG_INT):
        return int(text)
    if data_type == DataType.MONEY:
        return Decimal(text.strip())
    if data_type in (DataType.FLOAT, DataType.DOUBLE, DataType.NUMERIC):
        return float(text)
    if data_type in (DataType.SHORT_DATE_TIME, DataType.EXT_DATE_TIME):
        return datetime.strptime(text.strip(), DATE_FORMAT)
    if data_type in (DataType.BINARY, DataType.OLE):
        return bytes.fromhex(text)

    return text


def _read_records(reader, table_name: str) -> Iterator[List[Optional[str]]]:
    """Yield CSV records, turning decoding and CSV errors into SourceReadError."""
    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except (UnicodeDecodeError, csv.Error) as e:
            raise SourceReadError(f"Table {table_name!r} line {reader.line_num + 1}: {e}") from e
        yield record


def parse_rows(lines: Iterable[str], columns: List[Column], table_name: str = '') -> Iterator[Dict]:
    """Parse mdb-export CSV output into row dicts keyed by column name.

    Unquoted empty fields are NULL; quoted empty fields are empty strings.
    The CSV header must list the schema's columns in order.
    """
    reader = csv.reader(lines, quoting=csv.QUOTE_NOTNULL)
    records = _read_records(reader, table_name)
    header = next(records, None)
    if header is None:
        return

    expected = [column.name for column in columns]
    if header != expected:
        raise SourceReadError(f"Table {table_name!r}: exported columns {header} do not match schema {expected}")

    for line_number, record in enumerate(records, start=2):
        if len(record) != len(columns):
            raise SourceReadError(
                f"Table {table_name!r} line {line_number}: expected {len(columns)} fields, got {len(record)}")

        row = {}
        for column, field in zip(columns, record):
            try:
                row[column.name] = convert_field(column.type, field)
            except (ValueError, ArithmeticError) as e:
                raise SourceReadError(
                    f"Table {table_name!r} line {line_number}: cannot read column {column.name!r} value {field!r}: {e}"
                ) from e
        yield row


class AccessTable:
    """A table of an Access file: ordered columns and a lazy row stream."""

    def __init__(self, name: str, columns: List[Column], database: 'AccessDatabase'):
        self.name = name
        self.columns = columns
        self.database = database

    def __repr__(self):
        return f"AccessTable({self.name!r}, {len(self.columns)} columns)"

    def rows(self) -> Iterator[Dict]:
        """Stream the table's rows. The mdb-export process is reaped even if iteration stops early."""
        command = self.database.export_command(self.name)
        logger.debug(f"Running: {command}")

        # stderr goes to a file so a chatty child can't block on a full pipe
        with tempfile.TemporaryFile() as stderr_file:
            try:
                process = subprocess.Popen(command, stdout=subprocess.PIPE, stderr=stderr_file)
            except OSError as e:
                raise SourceReadError(f"Could not run {command[0]}: {e}") from e

            with process:
                finished = False
                try:
                    stdout = io.TextIOWrapper(process.stdout, encoding='utf-8', newline='')
                    yield from parse_rows(stdout, self.columns, self.name)
                    finished = True
                finally:
                    if not finished:
                        process.kill()

            if process.returncode != 0:
                stderr_file.seek(0)
                stderr = stderr_file.read().decode('utf-8', errors='replace')
                raise SourceReadError(
                    f"{command[0]} failed for table {self.name!r} (exit {process.returncode}): {stderr.strip()}")


class AccessDatabase:
    """An opened MS Access file."""

    TABLES_TOOL = 'mdb-tables'
    SCHEMA_TOOL = 'mdb-schema'
    EXPORT_TOOL = 'mdb-export'

    def __init__(self, access_path: str, mdbtools_dir: Optional[str] = None):
        self.access_path = Path(access_path)
        self.mdbtools_dir = Path(mdbtools_dir) if mdbtools_dir else None
        self._tools = {}
        self._schema = None

        self._validate_input()

    def __repr__(self):
        return f"AccessDatabase({str(self.access_path)!r})"

    def _validate_input(self):
        """Check the Access file and the mdbtools programs are available."""
        if not self.access_path.is_file():
            raise SourceReadError(f"Access file not found: {self.access_path}")

        search_path = str(self.mdbtools_dir) if self.mdbtools_dir else None
        for tool in (self.TABLES_TOOL, self.SCHEMA_TOOL, self.EXPORT_TOOL):
            resolved = shutil.which(tool, path=search_path)
            if resolved is None:
                raise SourceReadError(f"'{tool}' not found. Please ensure mdbtools is installed and in your PATH.")
            self._tools[tool] = resolved

    def _run(self, *args: str) -> str:
        command = [self._tools[args[0]], *args[1:]]
        logger.debug(f"Running: {command}")

        try:
            result = subprocess.run(command, capture_output=True)
        except OSError as e:
            raise SourceReadError(f"Could not run {args[0]}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode('utf-8', errors='replace').strip()
            raise SourceReadError(f"{args[0]} failed on {self.access_path} (exit {result.returncode}): {stderr}")
        try:
            return result.stdout.decode('utf-8')
        except UnicodeDecodeError as e:
            raise SourceReadError(f"{args[0]} output for {self.access_path} is not valid UTF-8: {e}") from e

    def table_names(self) -> List[str]:
        """Return the user table names, in catalog order."""
        output = self._run(self.TABLES_TOOL, '-1', str(self.access_path))
        return [line for line in output.splitlines() if line.strip()]

    def schema(self) -> Dict[str, List[Column]]:
        """Columns of every table, read once per database handle."""
        if self._schema is None:
            self._schema = parse_schema(self._run(self.SCHEMA_TOOL, str(self.access_path), 'access'))
            logger.debug(f"Schema lists {len(self._schema)} tables")
        return self._schema

    def get_table(self, name: str) -> AccessTable:
        columns = self.schema().get(name)
        if columns is None:
            raise SourceReadError(f"Table {name!r} not found in schema of {self.access_path}")
        return AccessTable(name, columns, self)

    def export_command(self, table_name: str) -> List[str]:
        return [
            self._tools[self.EXPORT_TOOL],
            '-D', DATE_FORMAT,
            '-T', DATE_FORMAT,
            '-b', 'hex',
            str(self.access_path),
            table_name,
        ]
