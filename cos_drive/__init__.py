import logging
from flask import Flask
from .config import Config
from .extensions import db, jwt, migrate
from .routes import register_blueprints
from .services.cos_store import CosStore


def create_app(config_class=Config, cos_client=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)

    # One COS client for the whole process, handed to the services per request
    app.extensions['cos_store'] = CosStore.from_config(app.config, client=cos_client)

    # The SDK logs every request at INFO
    for name in ('qcloud_cos', 'urllib3'):
        logging.getLogger(name).setLevel(logging.WARNING)

    # Register blueprints (routes)
    register_blueprints(app)

    return app
