# Main Flask app
import logging
import os

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import config
from errors import ApiError
from extensions import bcrypt, cors, jwt
from models import db
from routes import auth_bp, blogs_bp, users_bp, upload_bp, main_bp
from seed import seed_command


def configure_logging(app):
    """Send app and module logs to a single stream handler."""
    log_level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s %(name)-16s %(levelname)-8s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(log_level)

    app.logger.setLevel(log_level)

    if not app.debug:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            app.logger.error(f"{request.method} {request.path} failed: {error.message} ({error.details})")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle unexpected exceptions"""
        app.logger.error(f"Unhandled error on {request.method} {request.path}: {error}", exc_info=True)
        db.session.rollback()
        return jsonify({"message": "Server error", "error": str(error)}), 500


def create_app(config_name='default', test_config=None):
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    if test_config:
        app.config.update(test_config)

    missing = [key for key in app.config.get('REQUIRED_SETTINGS', ()) if not app.config.get(key)]
    if missing:
        raise RuntimeError(f"Missing required settings for '{config_name}': {', '.join(missing)}")

    upload_folder = app.config['UPLOAD_FOLDER']
    if not os.path.isabs(upload_folder):
        app.config['UPLOAD_FOLDER'] = os.path.join(app.root_path, upload_folder)

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    bcrypt.init_app(app)
    jwt.init_app(app)
    cors.init_app(
        app,
        origins=app.config['CORS_ORIGINS'],
        supports_credentials=True,
        allow_headers=['Content-Type', 'Authorization']
    )

    # Register blueprints
    app.register_blueprint(main_bp, url_prefix='/')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(blogs_bp, url_prefix='/api/blogs')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(upload_bp, url_prefix='/api/upload')

    register_error_handlers(app)
    app.cli.add_command(seed_command)

    with app.app_context():
        db.create_all()

    app.logger.info(f"BlogSy API started with '{config_name}' config")
    return app


if __name__ == '__main__':
    create_app(os.environ.get('FLASK_CONFIG', 'default')).run()
