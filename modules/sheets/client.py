# modules/sheets/client.py
# -*- coding: utf-8 -*-
"""
Тонкий клієнт Google Sheets v4 у вигляді Flask-розширення.

Таблиця виконує роль бази даних: довідники читаються діапазонами
(``MachineMaster!A2:C`` тощо), звіти дописуються в кінець аркуша.
Сервіс API будується ліниво при першому зверненні, тому застосунок
стартує без ключів — вони потрібні лише для реальних запитів.
"""

from __future__ import annotations

import os
from typing import Callable, List, Optional, Sequence

from flask import current_app
from google.auth import default as google_auth_default
from google.oauth2 import service_account
from googleapiclient.discovery import build

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class SheetsError(Exception):
    """Помилка звернення до Google Sheets (мережа, авторизація, діапазон)."""


class _SheetsState:
    def __init__(self, spreadsheet_id, credentials_file, service=None):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_file = credentials_file
        self.service = service


class SheetsClient:
    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app, service=None):
        """
        Реєструє клієнт у ``app.extensions``.
        ``service`` — готовий об'єкт googleapiclient (або сумісний), якщо
        його треба підмінити; інакше буде побудований при першому запиті.
        """
        app.extensions["sheets"] = _SheetsState(
            spreadsheet_id=app.config.get("GOOGLE_SHEET_ID"),
            credentials_file=app.config.get("GOOGLE_APPLICATION_CREDENTIALS"),
            service=service,
        )

    # ───────────────────────────── internals ─────────────────────────────

    @staticmethod
    def _state() -> _SheetsState:
        return current_app.extensions["sheets"]

    @staticmethod
    def _build_creds(key_path: Optional[str]):
        if key_path and os.path.exists(key_path):
            return service_account.Credentials.from_service_account_file(key_path, scopes=SCOPES)
        creds, _ = google_auth_default(scopes=SCOPES)
        return creds

    def _values(self):
        state = self._state()
        if not state.spreadsheet_id:
            raise SheetsError("GOOGLE_SHEET_ID is not configured")
        if state.service is None:
            creds = self._build_creds(state.credentials_file)
            state.service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        return state.service.spreadsheets().values(), state.spreadsheet_id

    # ───────────────────────────── API ─────────────────────────────

    def fetch_rows(self, range_name: str, row_filter: Optional[Callable[[list], bool]] = None) -> List[list]:
        """Читає діапазон; повертає список рядків (порожні хвости відсутні, як у API)."""
        try:
            values, spreadsheet_id = self._values()
            result = values.get(spreadsheetId=spreadsheet_id, range=range_name).execute()
        except SheetsError:
            raise
        except Exception as e:
            current_app.logger.exception('Error fetching rows from range "%s"', range_name)
            raise SheetsError(f"Failed to fetch rows from Google Sheets: {e}") from e

        rows = result.get("values") or []
        current_app.logger.info("%s rows retrieved from %s.", len(rows), range_name)
        if row_filter is not None:
            return [row for row in rows if row_filter(row)]
        return rows

    def append_rows(self, range_name: str, rows: Sequence[Sequence[str]]) -> dict:
        """Дописує рядки в кінець діапазону (valueInputOption=RAW)."""
        try:
            values, spreadsheet_id = self._values()
            result = values.append(
                spreadsheetId=spreadsheet_id,
                range=range_name,
                valueInputOption="RAW",
                body={"values": [list(r) for r in rows]},
            ).execute()
        except SheetsError:
            raise
        except Exception as e:
            current_app.logger.exception('Error appending %s rows to range "%s"', len(rows), range_name)
            raise SheetsError(f"Failed to append rows to Google Sheets: {e}") from e

        current_app.logger.info("%s rows appended to %s.", len(rows), range_name)
        return result or {}
