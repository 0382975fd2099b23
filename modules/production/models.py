# modules/production/models.py

from datetime import datetime
from uuid import uuid4

from extensions import db


class ShiftDraft(db.Model):
    """Одна сесія форми: дерево + каталог опцій між запитами. Видаляється після збереження або скасування."""

    __tablename__ = 'shift_drafts'

    id = db.Column(db.String(32), primary_key=True, default=lambda: uuid4().hex)
    tree = db.Column(db.JSON, nullable=False, default=dict)
    catalog = db.Column(db.JSON, nullable=False, default=dict)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ShiftDraft id={self.id}>"
