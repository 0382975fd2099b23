from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import BooleanField, DateField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, Optional

from modules.production.tree import ENTRY_FIELDS, SHIFTS


def _form_value(value):
    # JSON null/число/bool → рядок, як у звичайній формі
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    return str(value)


class JsonForm(FlaskForm):
    class Meta:
        csrf = False  # ✅ JSON API — без CSRF-токена

        def wrap_formdata(self, form, formdata):
            if request.is_json and not isinstance(request.get_json(silent=True), dict):
                # тіло — не JSON-обʼєкт: усі поля порожні
                return ImmutableMultiDict()
            formdata = super().wrap_formdata(form, formdata)
            if formdata is None or not hasattr(formdata, "getlist"):
                return formdata
            return ImmutableMultiDict(
                [(key, _form_value(value)) for key, value in formdata.items(multi=True)]
            )

    def first_error(self):
        for field_name, errors in (self.errors or {}).items():
            if errors:
                return f"{field_name}: {errors[0]}"
        return "Invalid input."


class HeaderForm(JsonForm):
    """Часткове оновлення шапки: змінюються лише передані поля."""

    productionDate = DateField('Production Date', format='%Y-%m-%d', validators=[Optional()])
    shift = StringField('Shift', validators=[Optional(), AnyOf(SHIFTS)])
    supervisor = StringField('Supervisor', validators=[Optional(), Length(max=255)])
    doer = StringField('Doer', validators=[Optional(), Length(max=255)])

    def provided(self):
        """Поля, які реально прийшли в запиті."""
        return [f for f in (self.productionDate, self.shift, self.supervisor, self.doer) if f.raw_data]


class TypeSelectForm(JsonForm):
    typeName = StringField('Type', validators=[DataRequired(), Length(max=255)])


class MachineSelectForm(JsonForm):
    machineId = StringField('Machine', validators=[DataRequired(), Length(max=64)])


class EntryFieldForm(JsonForm):
    field = StringField('Field', validators=[DataRequired(), AnyOf(ENTRY_FIELDS)])
    value = StringField('Value', validators=[Optional()])


class ConfirmDeleteForm(JsonForm):
    confirm = BooleanField(
        'Confirm',
        false_values=(False, "false", "False", "", "0", "off", "no"),
        validators=[DataRequired(message="Deletion must be confirmed.")],
    )
