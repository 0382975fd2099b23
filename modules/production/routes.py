# modules/production/routes.py
# -*- coding: utf-8 -*-
"""
JSON API форми змінного виробітку.

Чернетка — одна сесія форми. Індекси в URL — з 0 (t — тип, m — машина, e — запис),
у повідомленнях про помилки — з 1.
"""

from __future__ import annotations

from flask import current_app, jsonify, request

from . import production_bp as bp
from . import services
from .forms import ConfirmDeleteForm, EntryFieldForm, HeaderForm, MachineSelectForm, TypeSelectForm

DRAFT = "/production/drafts/<draft_id>"
TYPE = DRAFT + "/types/<int:t>"
MACHINE = TYPE + "/machines/<int:m>"
ENTRY = MACHINE + "/entries/<int:e>"


# ───────────────────────────── Helpers ─────────────────────────────

def _form_error(form, draft_id=None):
    current_app.logger.warning(
        "%s rejected (draft=%s) errors=%s", type(form).__name__, draft_id, dict(form.errors or {})
    )
    return jsonify({"success": False, "message": form.first_error(), "errors": form.errors}), 400


def _confirmed():
    form = ConfirmDeleteForm() if request.is_json else ConfirmDeleteForm(formdata=request.args)
    return form.validate() and form.confirm.data, form


def _render(session, status=200):
    return jsonify(services.view(session)), status


# ───────────────────────────── Відправка payload напряму ─────────────────────────────

@bp.post("/entries")
def save_entries():
    """Приймає готовий payload (productionDate, shift, supervisor, doer, types[...])."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"success": False, "message": "JSON body is required."}), 400
    return jsonify(services.submit_payload(payload)), 201


# ───────────────────────────── Чернетки ─────────────────────────────

@bp.post("/production/drafts")
def create_draft():
    return _render(services.start_draft(), 201)


@bp.get(DRAFT)
def get_draft(draft_id):
    session = services.open_draft(draft_id)
    if not session.catalog.types_list():
        # типи не завантажились при старті — пробуємо ще раз
        services.reload_types(session)
    return _render(session)


@bp.delete(DRAFT)
def cancel_draft(draft_id):
    session = services.open_draft(draft_id)
    services.discard_draft(session)
    return jsonify({"success": True})


@bp.patch(DRAFT + "/header")
def update_header(draft_id):
    session = services.open_draft(draft_id)
    form = HeaderForm()
    if not form.validate_on_submit():
        return _form_error(form, draft_id)

    tree = session.tree
    setters = {
        "productionDate": tree.set_production_date,
        "shift": tree.set_shift,
        "supervisor": tree.set_supervisor,
        "doer": tree.set_doer,
    }
    for field in form.provided():
        setters[field.name](field.data)
    return _render(session.save())


@bp.post(DRAFT + "/submit")
def submit_draft(draft_id):
    session = services.open_draft(draft_id)
    return jsonify(services.submit_draft(session)), 201


# ---- типи ----

@bp.post(DRAFT + "/types")
def add_type(draft_id):
    session = services.open_draft(draft_id)
    session.tree.add_type()
    return _render(session.save(), 201)


@bp.put(TYPE)
def set_type(draft_id, t):
    session = services.open_draft(draft_id)
    form = TypeSelectForm()
    if not form.validate_on_submit():
        return _form_error(form, draft_id)
    return _render(services.select_type(session, t, form.typeName.data.strip()))


@bp.delete(TYPE)
def delete_type(draft_id, t):
    session = services.open_draft(draft_id)
    ok, form = _confirmed()
    if not ok:
        return _form_error(form, draft_id)
    session.tree.delete_type(t)
    return _render(session.save())


# ---- машини ----

@bp.post(TYPE + "/machines")
def add_machine(draft_id, t):
    session = services.open_draft(draft_id)
    session.tree.add_machine(t)
    return _render(session.save(), 201)


@bp.put(MACHINE)
def set_machine(draft_id, t, m):
    session = services.open_draft(draft_id)
    form = MachineSelectForm()
    if not form.validate_on_submit():
        return _form_error(form, draft_id)
    return _render(services.select_machine(session, t, m, str(form.machineId.data).strip()))


@bp.delete(MACHINE)
def delete_machine(draft_id, t, m):
    session = services.open_draft(draft_id)
    ok, form = _confirmed()
    if not ok:
        return _form_error(form, draft_id)
    session.tree.delete_machine(t, m)
    return _render(session.save())


# ---- записи ----

@bp.post(MACHINE + "/entries")
def add_entry(draft_id, t, m):
    session = services.open_draft(draft_id)
    session.tree.add_entry(t, m)
    return _render(session.save(), 201)


@bp.patch(ENTRY)
def set_entry_field(draft_id, t, m, e):
    session = services.open_draft(draft_id)
    form = EntryFieldForm()
    if not form.validate_on_submit():
        return _form_error(form, draft_id)
    session.tree.set_entry_field(t, m, e, form.field.data, form.value.data)
    return _render(session.save())


@bp.delete(ENTRY)
def delete_entry(draft_id, t, m, e):
    session = services.open_draft(draft_id)
    ok, form = _confirmed()
    if not ok:
        return _form_error(form, draft_id)
    session.tree.delete_entry(t, m, e)
    return _render(session.save())


# ---- згорнути / розгорнути ----

@bp.post(TYPE + "/toggle")
def toggle_type(draft_id, t):
    session = services.open_draft(draft_id)
    session.tree.toggle(t)
    return _render(session.save())


@bp.post(MACHINE + "/toggle")
def toggle_machine(draft_id, t, m):
    session = services.open_draft(draft_id)
    session.tree.toggle(t, m)
    return _render(session.save())


@bp.post(ENTRY + "/toggle")
def toggle_entry(draft_id, t, m, e):
    session = services.open_draft(draft_id)
    session.tree.toggle(t, m, e)
    return _render(session.save())
