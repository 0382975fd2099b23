# modules/production/errors.py
"""Помилки форми змінного виробітку. Жодна з них не фатальна для процесу."""

from __future__ import annotations

from typing import Optional, Tuple


class ProductionError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_dict(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(ProductionError):
    """Користувач може виправити: блокує відправку, вказує місце помилки (1-based)."""

    status_code = 422

    def __init__(self, message: str, location: Optional[Tuple[int, ...]] = None):
        super().__init__(message)
        self.location = tuple(location or ())

    def as_dict(self) -> dict:
        data = super().as_dict()
        data["location"] = list(self.location)
        return data


class InvalidState(ProductionError):
    """Операція неможлива в поточному стані дерева (не обрано тип/машину, хибний індекс)."""

    status_code = 400


class FetchError(ProductionError):
    """Довідник недоступний — залежний список стає порожнім."""

    status_code = 500


class SubmitError(ProductionError):
    """Не вдалося записати в таблицю. Чернетка лишається незмінною."""

    status_code = 502
