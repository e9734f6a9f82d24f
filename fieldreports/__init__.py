from flask import Flask
from fieldreports.errors import register_error_handlers
from fieldreports.extensions import db, cors, migrate

def create_app(config_name='default'):
    from config import config
    app = Flask(__name__)
    app.config.from_object(config[config_name]())

    # module loggers under fieldreports.* propagate to app.logger
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Configure CORS
    cors_origins = app.config.get('CORS_ORIGINS', '*')
    if cors_origins == '*' or cors_origins.strip() == '':
        cors.init_app(app)
    else:
        cors.init_app(app, origins=[o.strip() for o in cors_origins.split(',')])

    from fieldreports.services.account_service import SqlAccountStore
    app.extensions['account_store'] = SqlAccountStore()

    register_error_handlers(app)

    # Register Blueprints
    from fieldreports.routes import register_routes
    register_routes(app)

    from fieldreports.cli import register_commands
    register_commands(app)

    return app
