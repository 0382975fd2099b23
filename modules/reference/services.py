# modules/reference/services.py
# -*- coding: utf-8 -*-
"""
Довідники з таблиці (MachineMaster, ItemMaster, Doers, Supervisors).

Колонки аркушів:
  MachineMaster: A → ID, B → NAME, C → TYPE (Blow, Roto, ...)
  ItemMaster:    A → ID, B → TYPE, C → CATEGORY, ..., F → SUBCATEGORY, G → SIZE
  Doers / Supervisors: A → ID, B → NAME, C → EMAIL, D → PHONE

API Sheets обрізає порожні хвости рядків, тому колонки читаємо через _col().
"""

from __future__ import annotations

from typing import List

from flask import current_app

from extensions import sheets
from modules.production.errors import FetchError
from modules.sheets.client import SheetsError


def _col(row: list, idx: int) -> str:
    return row[idx] if idx < len(row) and row[idx] is not None else ""


def _rows(config_key: str, label: str, row_filter=None) -> List[list]:
    try:
        return sheets.fetch_rows(current_app.config[config_key], row_filter)
    except SheetsError as e:
        current_app.logger.warning("Reference fetch failed (%s): %s", label, e)
        raise FetchError(f"Failed to fetch {label}") from e


def fetch_types() -> List[str]:
    """Унікальні типи машин у порядку першої появи."""
    seen = []
    for row in _rows("MACHINES_RANGE", "types"):
        value = _col(row, 2)
        if value and value not in seen:
            seen.append(value)
    return seen


def fetch_machines(type_name: str) -> List[dict]:
    rows = _rows("MACHINES_RANGE", "machines", lambda row: _col(row, 2) == type_name)
    return [{"id": _col(r, 0), "name": _col(r, 1), "type": _col(r, 2)} for r in rows]


def fetch_items(machine_type: str) -> List[dict]:
    rows = _rows("ITEMS_RANGE", "items", lambda row: _col(row, 1) == machine_type)
    return [
        {
            "id": _col(r, 0),
            "category": _col(r, 2),
            "subCategory": _col(r, 5),
            "size": _col(r, 6),
        }
        for r in rows
    ]


def _people(config_key: str, label: str) -> List[dict]:
    return [
        {"id": _col(r, 0), "name": _col(r, 1), "email": _col(r, 2), "phone": _col(r, 3)}
        for r in _rows(config_key, label)
    ]


def fetch_doers() -> List[dict]:
    return _people("DOERS_RANGE", "doers")


def fetch_supervisors() -> List[dict]:
    return _people("SUPERVISORS_RANGE", "supervisors")
