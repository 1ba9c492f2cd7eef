"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .extensions import csrf


def _env_flag(name, default):
    """Read a boolean flag from the environment."""
    return (os.environ.get(name) or default).lower() in ["true", "1", "t"]


def _load_firebase_credentials(app):
    """Find Firebase credentials in the environment, a local file or the defaults.

    Returns a ``(credential, project_id)`` tuple; the credential is None when
    nothing usable was found.
    """
    # Production: credentials passed as JSON in the environment
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            return credentials.Certificate(cred_info), cred_info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # Local development: credentials file next to the package
    cred_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
    )
    if os.path.exists(cred_path):
        try:
            with open(cred_path) as f:
                cred_info = json.load(f)
            return credentials.Certificate(cred_path), cred_info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error loading credentials from file: {e}")

    try:
        return credentials.ApplicationDefault(), os.environ.get("FIREBASE_PROJECT_ID")
    except Exception as e:
        app.logger.error(
            f"Could not find any valid credentials (env, file, or default): {e}"
        )
    return None, None


def init_firebase(app):
    """Initialize the Firebase Admin SDK once per process."""
    cred, project_id = _load_firebase_credentials(app)
    if not cred or firebase_admin._apps:
        return

    options = {}
    if project_id:
        options["projectId"] = project_id
    try:
        firebase_admin.initialize_app(cred, options)
    except ValueError:
        # Already initialized by another app instance in this process.
        app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        # Write the suggested tournament status together with each payment
        STATUS_AUTOMATION_ENABLED=_env_flag("STATUS_AUTOMATION_ENABLED", "true"),
    )

    if test_config:
        app.config.update(test_config)

    if not app.config.get("TESTING"):
        init_firebase(app)

    csrf.init_app(app)

    from . import league as league_bp

    app.register_blueprint(league_bp.bp)

    from . import tournament as tournament_bp

    app.register_blueprint(tournament_bp.bp)

    from . import tracker as tracker_bp

    app.register_blueprint(tracker_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
