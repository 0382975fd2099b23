# modules/production/catalog.py
# -*- coding: utf-8 -*-
"""
Каталог опцій для каскадних списків форми.

Тримає довідники, отримані з таблиці, лише для поточних виборів:
  типи → машини типу → позиції (items) типу машини.
Похідні списки (категорії/підкатегорії/розміри) — унікальні, відсортовані,
без порожніх рядків.

Кожне завантаження стартує з квитка (``begin``). Відповідь приймається лише
якщо квиток досі останній для свого слота — застарілі відповіді відкидаються.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence

from .errors import FetchError


@dataclass(frozen=True)
class Machine:
    id: str
    name: str
    type: str

    @classmethod
    def from_dict(cls, data: dict) -> "Machine":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            type=str(data.get("type") or ""),
        )


@dataclass(frozen=True)
class Item:
    category: str
    subCategory: str
    size: str

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        return cls(
            category=str(data.get("category") or ""),
            subCategory=str(data.get("subCategory") or ""),
            size=str(data.get("size") or ""),
        )


@dataclass(frozen=True)
class Ticket:
    slot: Hashable
    key: str
    serial: int


# ───────────────────────────── похідні списки ─────────────────────────────

def _sorted_unique(values: Iterable[str]) -> List[str]:
    return sorted({str(v) for v in values if v})


def categories_of(items: Sequence[Item]) -> List[str]:
    return _sorted_unique(i.category for i in items)


def sub_categories_of(items: Sequence[Item], category: str) -> List[str]:
    if not category:
        return []
    return _sorted_unique(i.subCategory for i in items if i.category == category)


def sizes_of(items: Sequence[Item], category: str, sub_category: str) -> List[str]:
    if not category or not sub_category:
        return []
    return _sorted_unique(
        i.size for i in items if i.category == category and i.subCategory == sub_category
    )


# ───────────────────────────── каталог ─────────────────────────────

class OptionCatalog:
    def __init__(self):
        self.types: List[str] = []
        self.machines_by_type: Dict[str, List[Machine]] = {}
        self.items_by_type: Dict[str, List[Item]] = {}
        self._latest: Dict[Hashable, int] = {}
        self._serial = 0

    # ---- читання ----

    def types_list(self) -> List[str]:
        return list(self.types)

    def machines_for_type(self, type_name: Optional[str]) -> List[Machine]:
        return list(self.machines_by_type.get(type_name or "", []))

    def items_for_machine_type(self, machine_type: Optional[str]) -> List[Item]:
        return list(self.items_by_type.get(machine_type or "", []))

    def machine(self, machine_id) -> Optional[Machine]:
        if machine_id in (None, ""):
            return None
        machine_id = str(machine_id)
        for machines in self.machines_by_type.values():
            for m in machines:
                if m.id == machine_id:
                    return m
        return None

    def machine_name(self, machine_id) -> Optional[str]:
        m = self.machine(machine_id)
        return m.name if m and m.name else None

    # ---- квитки (захист від застарілих відповідей) ----

    def begin(self, slot: Hashable, key: str = "") -> Ticket:
        self._serial += 1
        self._latest[slot] = self._serial
        return Ticket(slot=slot, key=key or "", serial=self._serial)

    def is_current(self, ticket: Ticket) -> bool:
        return self._latest.get(ticket.slot) == ticket.serial

    def accept(self, ticket: Ticket, values: Sequence) -> bool:
        if not self.is_current(ticket):
            return False
        self._store(ticket, list(values))
        del self._latest[ticket.slot]
        return True

    def fail(self, ticket: Ticket, keep_cached: bool = False) -> bool:
        """
        Помилка завантаження: залежний список стає порожнім.
        ``keep_cached`` — список за цим ключем ще потрібен іншим вузлам дерева, лишаємо його.
        """
        if not self.is_current(ticket):
            return False
        if not (keep_cached and self._cached(ticket)):
            self._store(ticket, [])
        del self._latest[ticket.slot]
        return True

    @staticmethod
    def _kind(ticket: Ticket):
        return ticket.slot[0] if isinstance(ticket.slot, tuple) else ticket.slot

    def _cached(self, ticket: Ticket) -> bool:
        kind = self._kind(ticket)
        if kind == "machines":
            return ticket.key in self.machines_by_type
        if kind == "items":
            return ticket.key in self.items_by_type
        return bool(self.types)

    def _store(self, ticket: Ticket, values: list) -> None:
        kind = self._kind(ticket)
        if kind == "types":
            self.types = [str(v) for v in values if v]
        elif kind == "machines":
            self.machines_by_type[ticket.key] = [
                v if isinstance(v, Machine) else Machine.from_dict(v) for v in values
            ]
        elif kind == "items":
            self.items_by_type[ticket.key] = [
                v if isinstance(v, Item) else Item.from_dict(v) for v in values
            ]
        else:
            raise ValueError(f"Unknown catalog slot: {ticket.slot!r}")

    # ---- завантаження через колаборатора ----

    def _load(self, slot: Hashable, key: str, fetch: Callable[[], Sequence], keep_cached: bool = False) -> bool:
        ticket = self.begin(slot, key)
        try:
            values = fetch()
        except FetchError:
            self.fail(ticket, keep_cached)
            raise
        return self.accept(ticket, values)

    def load_types(self, fetch: Callable[[], Sequence[str]]) -> bool:
        return self._load("types", "", fetch)

    def load_machines(
        self, slot: Hashable, type_name: str, fetch: Callable[[str], Sequence], keep_cached: bool = False
    ) -> bool:
        return self._load(("machines", slot), type_name, lambda: fetch(type_name), keep_cached)

    def load_items(
        self, slot: Hashable, machine_type: str, fetch: Callable[[str], Sequence], keep_cached: bool = False
    ) -> bool:
        return self._load(("items", slot), machine_type, lambda: fetch(machine_type), keep_cached)

    # ---- кеш лише для поточних виборів ----

    def prune(self, tree) -> None:
        """Прибирає списки, на які більше не посилається жоден вибір у дереві."""
        type_names = {t.typeName for t in tree.types if t.typeName}
        machine_types = set()
        for t in tree.types:
            for m in t.machines:
                machine = self.machine(m.machineId)
                if machine is not None:
                    machine_types.add(machine.type)
        self.machines_by_type = {k: v for k, v in self.machines_by_type.items() if k in type_names}
        self.items_by_type = {k: v for k, v in self.items_by_type.items() if k in machine_types}

    # ---- опції для вузлів дерева ----

    def entry_options(self, machine_id, entry) -> dict:
        machine = self.machine(machine_id)
        items = self.items_for_machine_type(machine.type) if machine else []
        return {
            "categories": categories_of(items),
            "subCategories": sub_categories_of(items, entry.category),
            "sizes": sizes_of(items, entry.category, entry.subCategory),
        }

    # ---- серіалізація у чернетку ----

    def to_state(self) -> dict:
        return {
            "types": list(self.types),
            "machines": {k: [asdict(m) for m in v] for k, v in self.machines_by_type.items()},
            "items": {k: [asdict(i) for i in v] for k, v in self.items_by_type.items()},
        }

    @classmethod
    def from_state(cls, data: Optional[dict]) -> "OptionCatalog":
        data = data or {}
        catalog = cls()
        catalog.types = [str(t) for t in (data.get("types") or []) if t]
        catalog.machines_by_type = {
            k: [Machine.from_dict(m) for m in v] for k, v in (data.get("machines") or {}).items()
        }
        catalog.items_by_type = {
            k: [Item.from_dict(i) for i in v] for k, v in (data.get("items") or {}).items()
        }
        return catalog
