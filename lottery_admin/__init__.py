"""Lottery administration API (Flask application package)."""

from __future__ import annotations

from dotenv import load_dotenv
from flask import Flask


def seed_reference_data(app: Flask) -> None:
    """Insert the fixed diaries and prize categories if they are missing."""

    from lottery_admin.services.diary_service import DiaryService
    from lottery_admin.services.winner_service import WinnerService

    session = app.extensions["session_factory"]()
    try:
        DiaryService().seed_diaries(session, int(app.config["TICKET_PRICE"]))
        WinnerService().seed_categories(session)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_app(config_object: object | None = None) -> Flask:
    """Application factory.

    Args:
        config_object: Optional config class/object overriding the
            ``APP_ENV`` based selection (used by the tests).

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from lottery_admin.config import get_config
    from lottery_admin.db import init_db
    from lottery_admin.error_handlers import register_error_handlers
    from lottery_admin.logging_config import configure_logging
    from lottery_admin.routes.dashboard import dashboard_bp
    from lottery_admin.routes.diaries import diaries_bp
    from lottery_admin.routes.health import health_bp
    from lottery_admin.routes.numbering import numbering_bp
    from lottery_admin.routes.tickets import tickets_bp
    from lottery_admin.routes.winners import winners_bp

    app = Flask(__name__)
    app.config.from_object(config_object or get_config())

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    if app.config.get("SEED_ON_STARTUP", True):
        seed_reference_data(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(numbering_bp, url_prefix="/api")
    app.register_blueprint(diaries_bp, url_prefix="/api")
    app.register_blueprint(tickets_bp, url_prefix="/api")
    app.register_blueprint(winners_bp, url_prefix="/api")
    app.register_blueprint(dashboard_bp, url_prefix="/api")

    return app
