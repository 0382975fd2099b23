# modules/production/tree.py
# -*- coding: utf-8 -*-
"""
Дерево форми змінного виробітку: Тип → Машина → Запис.

Дерево — єдине джерело правди. Усі зміни йдуть через методи кореня
(адресація індексами), кожна зміна вибору каскадно скидає нащадків:
  - новий тип        → машини очищуються;
  - нова машина      → записи очищуються;
  - нова категорія   → підкатегорія і розмір очищуються;
  - нова підкатегорія → розмір очищується.

``is_open`` — лише стан відображення (згорнуто/розгорнуто), у payload не потрапляє.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

from .errors import InvalidState, ValidationError

SHIFTS = ("A", "B", "A+B")
UOMS = ("Kg", "Nos")

SELECT_FIELDS = ("category", "subCategory", "size", "uom")
NUMERIC_FIELDS = ("okQty", "okWeight", "rejectedQty", "rejectedWeight")
ENTRY_FIELDS = SELECT_FIELDS + NUMERIC_FIELDS

# Каскад у межах запису: що очищується при зміні поля
_ENTRY_CASCADE = {
    "category": ("subCategory", "size"),
    "subCategory": ("size",),
}

DATE_FORMAT = "%Y-%m-%d"


def is_number(value) -> bool:
    """Невід'ємне число у вигляді рядка ("10", "2.5", "3,5")."""
    try:
        return float(str(value).strip().replace(",", ".")) >= 0
    except ValueError:
        return False


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def _optional_text(value) -> Optional[str]:
    value = _text(value)
    return value or None


def parse_date(value) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if len(text) > 10 and text[10] in "T ":
            # повний ISO datetime — беремо лише дату
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        raise InvalidState(f"Invalid production date: {value!r}. Expected YYYY-MM-DD.")


# ───────────────────────────── форма payload ─────────────────────────────

_LEVELS = ("type section", "machine section", "entry")


def _where(location: Tuple[int, ...]) -> str:
    return " of ".join(reversed([f"{name} {i}" for name, i in zip(_LEVELS, location)]))


def _node(value, location: Tuple[int, ...]) -> dict:
    if not isinstance(value, dict):
        raise ValidationError(f"{_where(location).capitalize()} must be an object.", location)
    return value


def _children(data: dict, key: str, location: Tuple[int, ...]) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        owner = f" of {_where(location)}" if location else ""
        raise ValidationError(f"{key.capitalize()}{owner} must be a list.", location)
    return value


# ───────────────────────────── вузли ─────────────────────────────

@dataclass
class EntryNode:
    category: str = ""
    subCategory: str = ""
    size: str = ""
    uom: str = ""
    okQty: str = ""
    okWeight: str = ""
    rejectedQty: str = ""
    rejectedWeight: str = ""
    is_open: bool = True

    def to_payload(self) -> dict:
        return {name: getattr(self, name) for name in ENTRY_FIELDS}

    @classmethod
    def from_payload(cls, data: dict, location: Tuple[int, ...] = ()) -> "EntryNode":
        data = _node(data, location) if location else (data or {})
        return cls(
            **{name: _text(data.get(name)) for name in ENTRY_FIELDS},
            is_open=bool(data.get("is_open", True)),
        )


@dataclass
class MachineNode:
    machineId: Optional[str] = None
    entries: List[EntryNode] = field(default_factory=list)
    is_open: bool = True

    def to_payload(self) -> dict:
        return {
            "machineId": self.machineId,
            "entries": [e.to_payload() for e in self.entries],
        }

    @classmethod
    def from_payload(cls, data: dict, location: Tuple[int, ...] = ()) -> "MachineNode":
        data = _node(data, location) if location else (data or {})
        return cls(
            machineId=_optional_text(data.get("machineId")),
            entries=[
                EntryNode.from_payload(entry, location + (e,))
                for e, entry in enumerate(_children(data, "entries", location), start=1)
            ],
            is_open=bool(data.get("is_open", True)),
        )


@dataclass
class TypeNode:
    typeName: Optional[str] = None
    machines: List[MachineNode] = field(default_factory=list)
    is_open: bool = True

    def to_payload(self) -> dict:
        return {
            "typeName": self.typeName,
            "machines": [m.to_payload() for m in self.machines],
        }

    @classmethod
    def from_payload(cls, data: dict, location: Tuple[int, ...] = ()) -> "TypeNode":
        data = _node(data, location) if location else (data or {})
        return cls(
            typeName=_optional_text(data.get("typeName")),
            machines=[
                MachineNode.from_payload(machine, location + (m,))
                for m, machine in enumerate(_children(data, "machines", location), start=1)
            ],
            is_open=bool(data.get("is_open", True)),
        )


# ───────────────────────────── корінь ─────────────────────────────

@dataclass
class FormTree:
    productionDate: Optional[date] = field(default_factory=date.today)
    shift: str = "A"
    supervisor: str = ""
    doer: str = ""
    types: List[TypeNode] = field(default_factory=list)

    # ---- адресація ----

    def type_at(self, t: int) -> TypeNode:
        return _at(self.types, t, "Type section")

    def machine_at(self, t: int, m: int) -> MachineNode:
        return _at(self.type_at(t).machines, m, "Machine section")

    def entry_at(self, t: int, m: int, e: int) -> EntryNode:
        return _at(self.machine_at(t, m).entries, e, "Entry")

    # ---- шапка ----

    def set_production_date(self, value) -> None:
        self.productionDate = parse_date(value)

    def set_shift(self, value) -> None:
        value = _text(value)
        if value not in SHIFTS:
            raise InvalidState(f"Shift must be one of {', '.join(SHIFTS)}.")
        self.shift = value

    def set_supervisor(self, value) -> None:
        self.supervisor = _text(value)

    def set_doer(self, value) -> None:
        self.doer = _text(value)

    # ---- типи ----

    def add_type(self) -> TypeNode:
        node = TypeNode()
        self.types.append(node)
        return node

    def set_type(self, t: int, name) -> TypeNode:
        node = self.type_at(t)
        node.typeName = _optional_text(name)
        node.machines = []
        return node

    def delete_type(self, t: int) -> TypeNode:
        self.type_at(t)
        return self.types.pop(t)

    # ---- машини ----

    def add_machine(self, t: int) -> MachineNode:
        type_node = self.type_at(t)
        if not type_node.typeName:
            raise InvalidState(f"Select a type for type section {t + 1} before adding machines.")
        node = MachineNode()
        type_node.machines.append(node)
        return node

    def set_machine(self, t: int, m: int, machine_id) -> MachineNode:
        node = self.machine_at(t, m)
        node.machineId = _optional_text(machine_id)
        node.entries = []
        return node

    def delete_machine(self, t: int, m: int) -> MachineNode:
        self.machine_at(t, m)
        return self.types[t].machines.pop(m)

    # ---- записи ----

    def add_entry(self, t: int, m: int) -> EntryNode:
        machine = self.machine_at(t, m)
        if not machine.machineId:
            raise InvalidState(
                f"Select a machine for machine section {m + 1} in type section {t + 1} before adding entries."
            )
        node = EntryNode()
        machine.entries.append(node)
        return node

    def set_entry_field(self, t: int, m: int, e: int, field_name: str, value) -> EntryNode:
        node = self.entry_at(t, m, e)
        if field_name not in ENTRY_FIELDS:
            raise InvalidState(f"Unknown entry field: {field_name!r}.")

        value = _text(value)
        if field_name == "uom" and value and value not in UOMS:
            raise InvalidState(f"UOM must be one of {', '.join(UOMS)}.")
        if field_name in NUMERIC_FIELDS and value and not is_number(value):
            raise InvalidState(f"{field_name} must be a non-negative number.")

        setattr(node, field_name, value)
        for dependent in _ENTRY_CASCADE.get(field_name, ()):
            setattr(node, dependent, "")
        return node

    def delete_entry(self, t: int, m: int, e: int) -> EntryNode:
        self.entry_at(t, m, e)
        return self.types[t].machines[m].entries.pop(e)

    # ---- відображення ----

    def toggle(self, t: int, m: Optional[int] = None, e: Optional[int] = None) -> bool:
        if m is None:
            node = self.type_at(t)
        elif e is None:
            node = self.machine_at(t, m)
        else:
            node = self.entry_at(t, m, e)
        node.is_open = not node.is_open
        return node.is_open

    # ---- серіалізація ----

    def to_payload(self) -> dict:
        """Контракт відправки: без прапорців відображення."""
        return {
            "productionDate": self.productionDate.strftime(DATE_FORMAT) if self.productionDate else None,
            "shift": self.shift,
            "supervisor": self.supervisor,
            "doer": self.doer,
            "types": [t.to_payload() for t in self.types],
        }

    @classmethod
    def from_payload(cls, data: dict) -> "FormTree":
        data = data or {}
        return cls(
            productionDate=parse_date(data.get("productionDate")),
            shift=_text(data.get("shift")),
            supervisor=_text(data.get("supervisor")),
            doer=_text(data.get("doer")),
            types=[
                TypeNode.from_payload(type_data, (t,))
                for t, type_data in enumerate(_children(data, "types", ()), start=1)
            ],
        )

    def to_state(self) -> dict:
        """Стан чернетки: payload + прапорці is_open на кожному рівні."""
        data = self.to_payload()
        for t_node, t_data in zip(self.types, data["types"]):
            t_data["is_open"] = t_node.is_open
            for m_node, m_data in zip(t_node.machines, t_data["machines"]):
                m_data["is_open"] = m_node.is_open
                for e_node, e_data in zip(m_node.entries, m_data["entries"]):
                    e_data["is_open"] = e_node.is_open
        return data

    from_state = from_payload

    def entry_count(self) -> int:
        return sum(len(m.entries) for t in self.types for m in t.machines)


def _at(items: list, index: int, label: str):
    if index < 0 or index >= len(items):
        raise InvalidState(f"{label} {index + 1} does not exist.")
    return items[index]
