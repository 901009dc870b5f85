# pwcb/__init__.py
import os
import logging
from flask import Flask
from flask_migrate import Migrate

from .models.base import db as SA_DB  # <- single SQLAlchemy() instance
migrate = Migrate()

from .errors import register_error_handlers
from .security import login_manager
from .auth import auth_bp, users_bp
from .api_items import bp as items_api_bp
from .api_inventory import bp as inventory_api_bp
from .api_transfers import bp as transfers_api_bp
from .api_admin import admin_api


def _default_config(base_dir: str) -> dict:
    db_path = os.path.join(base_dir, "pwcb.db")
    return dict(
        SECRET_KEY=os.environ.get("SECRET_KEY", "dev"),
        SQLALCHEMY_DATABASE_URI=os.environ.get("DATABASE_URL", f"sqlite:///{db_path}"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        AUTO_CREATE_TABLES=os.environ.get("AUTO_CREATE_TABLES", "1") == "1",
        TOKEN_TTL=int(os.environ.get("TOKEN_TTL", 60 * 60 * 24)),
        MIN_PASSWORD_LENGTH=6,
        DEFAULT_ADMIN_USERNAME=os.environ.get("DEFAULT_ADMIN_USERNAME", "admin"),
        DEFAULT_ADMIN_PASSWORD=os.environ.get("DEFAULT_ADMIN_PASSWORD", "admin123"),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO"),
    )


def create_app(test_config=None):
    app = Flask(__name__)

    BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    app.config.update(_default_config(BASE_DIR))
    if test_config:
        app.config.update(test_config)

    # Init core extensions with the un-shadowable alias
    SA_DB.init_app(app)
    migrate.init_app(app, SA_DB)
    login_manager.init_app(app)
    register_error_handlers(app)

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))
    app.logger.info("DB URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])
    app.logger.info("AUTO_CREATE_TABLES=%s", app.config["AUTO_CREATE_TABLES"])

    with app.app_context():
        # Ensure all models are imported so metadata is complete
        from . import models as _models  # noqa: F401

        if app.config["AUTO_CREATE_TABLES"]:
            from .services.accounts import seed_default_admin

            SA_DB.create_all()
            seed_default_admin()

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(items_api_bp)
    app.register_blueprint(inventory_api_bp)
    app.register_blueprint(transfers_api_bp)
    app.register_blueprint(admin_api)

    return app
