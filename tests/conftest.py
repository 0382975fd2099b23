"""Pytest configuration and shared fixtures."""
import copy

import pytest

from app import create_app
from config import Config
from extensions import sheets


class TestConfig(Config):
    """In-memory SQLite, fake spreadsheet id."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    GOOGLE_SHEET_ID = "test-sheet"
    GOOGLE_APPLICATION_CREDENTIALS = None


SHEET_DATA = {
    "MachineMaster!A2:C": [
        ["5", "Blow Moulder 1", "Blow"],
        ["7", "Blow Moulder 2", "Blow"],
        ["9", "Roto 1", "Roto"],
        ["10", "Spare"],  # API обрізає порожні хвости
    ],
    "ItemMaster!A2:G": [
        ["1", "Blow", "Tanks", "", "", "GR8", "500L"],
        ["2", "Blow", "Tanks", "", "", "GR8", "1000L"],
        ["3", "Blow", "Tanks", "", "", "Loft", "500L"],
        ["4", "Blow", "Drums", "", "", "Std", "200L"],
        ["5", "Blow", "Tanks", "", "", "GR8", "500L"],
        ["6", "Roto", "Tanks", "", "", "GR8", "5000L"],
    ],
    "Doers!A2:D": [
        ["1", "D1", "d1@example.com", "111"],
        ["2", "D2"],
    ],
    "Supervisors!A2:D": [
        ["1", "S1", "s1@example.com", "222"],
    ],
}


class _Request:
    def __init__(self, run):
        self._run = run

    def execute(self):
        return self._run()


class _Values:
    def __init__(self, book):
        self.book = book

    def get(self, spreadsheetId, range):
        def run():
            self.book.reads.append(range)
            if self.book.fail_reads:
                raise ConnectionError("sheets unavailable")
            return {"values": [list(r) for r in self.book.data.get(range, [])]}
        return _Request(run)

    def append(self, spreadsheetId, range, valueInputOption, body):
        def run():
            if self.book.fail_writes:
                raise ConnectionError("sheets unavailable")
            self.book.appended.append(
                {"range": range, "valueInputOption": valueInputOption, "values": body["values"]}
            )
            return {"updates": {"updatedRows": len(body["values"])}}
        return _Request(run)


class FakeSheetsService:
    """Minimal stand-in for the googleapiclient Sheets v4 resource."""

    def __init__(self, data=None):
        self.data = {k: [list(r) for r in v] for k, v in (data or SHEET_DATA).items()}
        self.reads = []
        self.appended = []
        self.fail_reads = False
        self.fail_writes = False

    def spreadsheets(self):
        return self

    def values(self):
        return _Values(self)


@pytest.fixture
def sheets_service():
    return FakeSheetsService()


@pytest.fixture
def app(sheets_service):
    app = create_app(TestConfig)
    sheets.init_app(app, service=sheets_service)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


EXAMPLE_PAYLOAD = {
    "productionDate": "2026-10-18",
    "shift": "A",
    "supervisor": "S1",
    "doer": "D1",
    "types": [{
        "typeName": "Blow",
        "machines": [{
            "machineId": "7",
            "entries": [{
                "category": "Tanks", "subCategory": "GR8", "size": "500L", "uom": "Kg",
                "okQty": "10", "okWeight": "50", "rejectedQty": "", "rejectedWeight": "",
            }],
        }],
    }],
}


@pytest.fixture
def example_payload():
    return copy.deepcopy(EXAMPLE_PAYLOAD)
