from flask import Blueprint

production_bp = Blueprint(
    "production",
    __name__,
    url_prefix="/api",
)

# ВАЖЛИВО: імпортуємо маршрути, щоб декоратори прикріпилися до blueprint
from . import routes  # noqa: E402,F401
