# modules/production/flatten.py
"""Розгортання дерева в рядки звіту: один рядок на кожен запис."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from .catalog import OptionCatalog
from .tree import ENTRY_FIELDS, FormTree

PLACEHOLDER = "-"
SHEETS_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_for_sheets(value=None) -> str:
    """YYYY-MM-DD HH:MM:SS; дата без часу — опівночі, None — поточний момент."""
    if value is None:
        value = datetime.now()
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, datetime.min.time())
    return value.strftime(SHEETS_DATETIME_FORMAT)


def _cell(value) -> str:
    return str(value) if value not in (None, "") else PLACEHOLDER


def flatten(tree: FormTree, catalog: OptionCatalog, now: Optional[datetime] = None) -> List[list]:
    timestamp = format_for_sheets(now)
    production_date = format_for_sheets(tree.productionDate) if tree.productionDate else PLACEHOLDER

    rows = []
    for type_node in tree.types:
        for machine in type_node.machines:
            machine_name = catalog.machine_name(machine.machineId)
            for entry in machine.entries:
                rows.append(
                    [
                        timestamp,
                        production_date,
                        _cell(tree.shift),
                        _cell(tree.supervisor),
                        _cell(tree.doer),
                        _cell(machine_name),
                    ]
                    + [_cell(getattr(entry, name)) for name in ENTRY_FIELDS]
                )
    return rows


def target_range(shift: str, shift_range: str, daily_range: str) -> str:
    """Зміна "A+B" — добовий звіт, інакше — змінний."""
    return daily_range if shift == "A+B" else shift_range
