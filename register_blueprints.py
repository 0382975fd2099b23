def register_blueprints(app):
    from modules.reference.routes import bp as reference_bp
    from modules.production import production_bp

    # Довідники з таблиці
    app.register_blueprint(reference_bp)

    # Форма змінного виробітку
    app.register_blueprint(production_bp)
