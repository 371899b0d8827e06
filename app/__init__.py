# app/__init__.py
import logging

from flask import Flask, jsonify

from config import DevelopmentConfig, ProductionConfig, TestingConfig, request_body_limit

CONFIGS = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def create_app(config_name: str = "development", overrides: dict | None = None):
    """
    Flask application factory.
    """
    app = Flask(__name__)
    # Config
    app.config.from_object(CONFIGS.get(config_name.lower(), DevelopmentConfig))
    if overrides:
        app.config.update(overrides)
        if "MAX_UPLOAD_MB" in overrides and "MAX_CONTENT_LENGTH" not in overrides:
            app.config["MAX_CONTENT_LENGTH"] = request_body_limit(app.config["MAX_UPLOAD_MB"])

    if app.debug:
        logging.basicConfig(level=logging.DEBUG)

    # Initialize services on app
    initialize_services(app)

    # Blueprints
    register_blueprints(app)

    @app.route("/health")
    def health():
        return jsonify(status="ok"), 200

    return app


# ---- Services init ---------------------------------------------------------

def initialize_services(app: Flask) -> None:
    """
    Build the ingestion pipeline and the persistence sink; attach to app.
    """
    from .services.extractors import set_tesseract_cmd
    from .services.resume_pipeline import ResumeIngestionPipeline
    from .services.storage import StorageService

    set_tesseract_cmd(app.config.get("TESSERACT_CMD"))

    app.resume_pipeline = ResumeIngestionPipeline.from_config(app.config)
    app.storage_service = StorageService(app)


def register_blueprints(app: Flask) -> None:
    """
    Register Flask blueprints.
    """
    from .routes.resume_routes import resume_bp

    app.register_blueprint(resume_bp, url_prefix="/resumes")
