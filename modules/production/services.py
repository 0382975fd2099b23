# modules/production/services.py
# -*- coding: utf-8 -*-
"""
Сервіси форми змінного виробітку.

Чернетка (ShiftDraft) зберігає дерево та каталог опцій між запитами.
Кожна зміна вибору каскадно скидає нащадків у дереві і перезавантажує
залежний довідник. Помилка довідника не фатальна: зміна лишається,
список стає порожнім, відповідь несе ``warning``.

Відправка: перевірка → розгортання в рядки → дописування в таблицю.
Якщо таблиця недоступна — SubmitError, чернетка лишається для повтору.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from flask import current_app

from extensions import db, sheets
from modules.reference import services as reference
from modules.sheets.client import SheetsError

from .catalog import OptionCatalog
from .errors import FetchError, InvalidState, SubmitError
from .flatten import flatten, target_range
from .models import ShiftDraft
from .tree import SHIFTS, UOMS, FormTree
from .validation import ensure_valid


class DraftSession:
    """Розгорнута чернетка: дерево + каталог. Після змін — save()."""

    def __init__(self, draft: ShiftDraft):
        self.draft = draft
        self.tree = FormTree.from_state(draft.tree)
        self.catalog = OptionCatalog.from_state(draft.catalog)
        self.warning: Optional[str] = None

    @property
    def id(self) -> str:
        return self.draft.id

    def save(self) -> "DraftSession":
        self.catalog.prune(self.tree)
        # присвоюємо нові dict-и, щоб SQLAlchemy побачив зміну JSON-колонок
        self.draft.tree = self.tree.to_state()
        self.draft.catalog = self.catalog.to_state()
        db.session.commit()
        return self

    def refresh(self, load) -> bool:
        """Виконує завантаження довідника; FetchError → warning, а не відмова."""
        try:
            return load()
        except FetchError as e:
            current_app.logger.warning("Draft %s: %s", self.id, e.message)
            self.warning = e.message
            return False


# ───────────────────────────── життєвий цикл ─────────────────────────────

def start_draft() -> DraftSession:
    draft = ShiftDraft(tree=FormTree().to_state(), catalog={})
    db.session.add(draft)
    db.session.flush()

    session = DraftSession(draft)
    session.refresh(lambda: session.catalog.load_types(reference.fetch_types))
    return session.save()


def open_draft(draft_id: str) -> DraftSession:
    return DraftSession(db.get_or_404(ShiftDraft, draft_id))


def discard_draft(session: DraftSession) -> None:
    db.session.delete(session.draft)
    db.session.commit()


def reload_types(session: DraftSession) -> DraftSession:
    session.refresh(lambda: session.catalog.load_types(reference.fetch_types))
    return session.save()


# ───────────────────────────── каскадні вибори ─────────────────────────────

def select_type(session: DraftSession, t: int, type_name: str) -> DraftSession:
    if type_name not in session.catalog.types_list():
        raise InvalidState(f"Type {type_name!r} is not available.")

    session.tree.set_type(t, type_name)
    # інша секція того ж типу — її список машин не чіпаємо при помилці
    shared = any(
        i != t and node.typeName == type_name for i, node in enumerate(session.tree.types)
    )
    session.refresh(
        lambda: session.catalog.load_machines(t, type_name, reference.fetch_machines, shared)
    )
    return session.save()


def select_machine(session: DraftSession, t: int, m: int, machine_id: str) -> DraftSession:
    type_name = session.tree.type_at(t).typeName
    machine = next(
        (x for x in session.catalog.machines_for_type(type_name) if x.id == str(machine_id)),
        None,
    )
    if machine is None:
        raise InvalidState(f"Machine {machine_id!r} is not available for type {type_name!r}.")

    session.tree.set_machine(t, m, machine.id)
    # позиції фільтруються за типом самої машини
    shared = _machine_type_in_use(session, machine.type, skip=(t, m))
    session.refresh(
        lambda: session.catalog.load_items((t, m), machine.type, reference.fetch_items, shared)
    )
    return session.save()


def _machine_type_in_use(session: DraftSession, machine_type: str, skip) -> bool:
    """Чи є в дереві інша машина того ж типу (їй потрібен той самий список позицій)."""
    for t, type_node in enumerate(session.tree.types):
        for m, node in enumerate(type_node.machines):
            if (t, m) == skip:
                continue
            other = session.catalog.machine(node.machineId)
            if other is not None and other.type == machine_type:
                return True
    return False


# ───────────────────────────── вигляд для клієнта ─────────────────────────────

def view(session: DraftSession) -> dict:
    tree, catalog = session.tree, session.catalog

    type_sections = []
    for type_node in tree.types:
        machine_sections = []
        for machine in type_node.machines:
            machine_sections.append(
                {"entries": [catalog.entry_options(machine.machineId, e) for e in machine.entries]}
            )
        type_sections.append(
            {
                "machines": [asdict(m) for m in catalog.machines_for_type(type_node.typeName)],
                "machineSections": machine_sections,
            }
        )

    data = {
        "id": session.id,
        "tree": tree.to_state(),
        "options": {
            "types": catalog.types_list(),
            "shifts": list(SHIFTS),
            "uoms": list(UOMS),
            "typeSections": type_sections,
        },
    }
    if session.warning:
        data["warning"] = session.warning
    return data


# ───────────────────────────── відправка ─────────────────────────────

def _append(tree: FormTree, rows: list) -> str:
    cfg = current_app.config
    range_name = target_range(tree.shift, cfg["SHIFT_REPORT_RANGE"], cfg["DAILY_REPORT_RANGE"])
    try:
        sheets.append_rows(range_name, rows)
    except SheetsError as e:
        current_app.logger.error("Entry save error (%s rows → %s): %s", len(rows), range_name, e)
        raise SubmitError("Failed to save entry") from e
    return range_name


def submit_draft(session: DraftSession) -> dict:
    tree = ensure_valid(session.tree)
    rows = flatten(tree, session.catalog)
    range_name = _append(tree, rows)

    # успіх — сесія форми завершена
    draft_id = session.id
    discard_draft(session)
    current_app.logger.info("Draft %s submitted: %s rows → %s", draft_id, len(rows), range_name)
    return {"success": True, "rows": len(rows), "range": range_name}


def submit_payload(payload: dict) -> dict:
    """Відправка готового payload без чернетки; назви машин підтягуємо з довідника."""
    tree = ensure_valid(FormTree.from_payload(payload))

    catalog = OptionCatalog()
    for type_name in dict.fromkeys(t.typeName for t in tree.types):
        catalog.load_machines(type_name, type_name, reference.fetch_machines)

    rows = flatten(tree, catalog)
    range_name = _append(tree, rows)
    current_app.logger.info("Entries saved: %s rows → %s", len(rows), range_name)
    return {"success": True, "rows": len(rows), "range": range_name}
