from conftest import FakeDatabase, FakeTable
from mdb_sqlite import debug
from mdb_sqlite.types import DataType


def test_debug_lists_tables_columns_and_rows(capsys):
    database = FakeDatabase(
        FakeTable("People", [("Name", DataType.TEXT), ("Active", DataType.BOOLEAN)],
                  [{"Name": "Ann", "Active": True}, {"Name": "Bo", "Active": False}]),
        FakeTable("Docs", [("scan", "Attachment")]),
    )

    unsupported = debug.debug_access_file(database, sample_rows=1)

    out = capsys.readouterr().out
    assert unsupported == 1
    assert "Tables: 2" in out
    assert "Name: TEXT -> TEXT" in out
    assert "Active: BOOLEAN -> INTEGER" in out
    assert "scan: Attachment -> UNSUPPORTED" in out
    assert "'Ann'" in out
    assert "'Bo'" not in out
    assert out.index("Table Docs") < out.index("Table People")


def test_debug_without_rows(capsys):
    table = FakeTable("People", [("Name", DataType.TEXT)], [{"Name": "Ann"}])

    assert debug.debug_access_file(FakeDatabase(table), sample_rows=0) == 0
    assert table.rows_requested == 0
    assert "Unsupported columns: 0" in capsys.readouterr().out


def test_main_opens_database(monkeypatch, capsys):
    opened = []

    def open_database(path, mdbtools_dir=None):
        opened.append(path)
        return FakeDatabase(FakeTable("T", [("id", DataType.LONG)], [{"id": 1}]))

    monkeypatch.setattr(debug, "AccessDatabase", open_database)

    debug.main(["example.mdb", "--rows", "2"])

    assert opened == ["example.mdb"]
    assert "Row 1: {'id': 1}" in capsys.readouterr().out
