import sys, os
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from datetime import datetime, timezone

from flask import Flask, jsonify, request
from config import Config
from extensions import db, sheets
from register_blueprints import register_blueprints
from modules.production.errors import FetchError, ProductionError


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = "dev-change-me"

    os.makedirs(app.instance_path, exist_ok=True)

    db.init_app(app)
    sheets.init_app(app)
    register_blueprints(app)

    # Імпорт моделей, щоб create_all побачив таблиці
    from modules.production.models import ShiftDraft  # noqa: F401

    with app.app_context():
        db.create_all()

    @app.get('/health')
    def health():
        return jsonify({"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()})

    # ── помилки форми: ValidationError / InvalidState / SubmitError
    def _production_error_handler(e):
        db.session.rollback()
        app.logger.warning(f"{type(e).__name__} on {request.method} {request.path}: {e.message}")
        return jsonify(e.as_dict()), e.status_code

    # ── довідник недоступний (як у маршрутах /api/machines тощо)
    def _fetch_error_handler(e):
        db.session.rollback()
        app.logger.warning(f"FetchError on {request.path}: {e.message}")
        return jsonify({"error": e.message}), e.status_code

    def _not_found_handler(e):
        return jsonify({"error": "Route not found" if request.url_rule is None else "Not found"}), 404

    # ✅ ЯВНО реєструємо (працює для всіх blueprint’ів)
    app.register_error_handler(FetchError, _fetch_error_handler)
    app.register_error_handler(ProductionError, _production_error_handler)
    app.register_error_handler(404, _not_found_handler)

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 3001)), debug=True)
