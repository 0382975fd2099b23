# modules/production/validation.py
"""
Перевірка дерева перед відправкою: обхід у глибину (типи → машини → записи),
повертаємо ПЕРШЕ порушене правило. Позиції в повідомленнях — з 1.
"""

from __future__ import annotations

from typing import Optional

from .errors import ValidationError
from .tree import SHIFTS, UOMS, FormTree, is_number

_ENTRY_REQUIRED = (
    ("category", "Category"),
    ("subCategory", "Sub-category"),
    ("size", "Size"),
    ("uom", "UOM"),
)

_ENTRY_NUMERIC = (
    ("okQty", "OK quantity"),
    ("okWeight", "OK weight"),
    ("rejectedQty", "Rejected quantity"),
    ("rejectedWeight", "Rejected weight"),
)


def validate(tree: FormTree) -> Optional[ValidationError]:
    if not tree.doer:
        return ValidationError("Doer is required.")
    if not tree.productionDate:
        return ValidationError("Production date is required.")
    if not tree.shift:
        return ValidationError("Shift is required.")
    if tree.shift not in SHIFTS:
        return ValidationError(f"Shift must be one of {', '.join(SHIFTS)}.")
    if not tree.supervisor:
        return ValidationError("Supervisor is required.")
    if not tree.types:
        return ValidationError("At least one Type Section is required.")

    for t, type_node in enumerate(tree.types, start=1):
        if not type_node.typeName:
            return ValidationError(f"Type selection is required for type section {t}.", (t,))
        if not type_node.machines:
            return ValidationError(
                f"At least one machine section is required for type section {t}.", (t,)
            )

        for m, machine in enumerate(type_node.machines, start=1):
            where = f"machine section {m} of type section {t}"
            if not machine.machineId:
                return ValidationError(f"Machine selection is required for {where}.", (t, m))
            if not machine.entries:
                return ValidationError(
                    f"At least one production entry is required for {where}.", (t, m)
                )

            for e, entry in enumerate(machine.entries, start=1):
                for name, label in _ENTRY_REQUIRED:
                    if not getattr(entry, name):
                        return ValidationError(
                            f"{label} is required for entry {e} in {where}.", (t, m, e)
                        )
                if entry.uom not in UOMS:
                    return ValidationError(
                        f"UOM must be one of {', '.join(UOMS)} for entry {e} in {where}.", (t, m, e)
                    )
                # кількості необов'язкові, але якщо вказані — мають бути числами
                for name, label in _ENTRY_NUMERIC:
                    value = getattr(entry, name)
                    if value and not is_number(value):
                        return ValidationError(
                            f"{label} must be a non-negative number for entry {e} in {where}.",
                            (t, m, e),
                        )
    return None


def ensure_valid(tree: FormTree) -> FormTree:
    error = validate(tree)
    if error is not None:
        raise error
    return tree
