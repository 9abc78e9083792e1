# bontemp/__init__.py

# =====================================================================================
# 1. Environment variables (loaded before the config classes read them)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Imports
# =====================================================================================
import atexit
import logging
import os
import click
from flask import Flask, jsonify
from flask_cors import CORS
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials

# - config
from bontemp.core.config import config_by_name
from bontemp.core.errors import CallableError
from bontemp.core.events import EventDispatcher

# - blueprints
from bontemp.api.comments.routes import comments_bp
from bontemp.api.health.routes import health_bp

# - services
from bontemp.services.firestore_service import FirestoreService
from bontemp.services.safety_service import SafetyService
from bontemp.api.comments.services import CommentService
from bontemp.triggers.likes import LikeCountService
from bontemp.triggers.daily_winner import DailyWinnerService
from bontemp.triggers.watcher import LikesWatcher
from bontemp.triggers import scheduler as scheduler_module
from bontemp.cli import register_commands


def create_app(config_name: str = None, start_background: bool = None):
    """
    Flask application factory.

    start_background: start the scheduler and the likes watch when they are enabled in the config.
    Defaults to True, except when the app is loaded by the flask CLI to run a command.
    """
    # =====================================================================================
    # 3. Flask app and logging
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    logging.basicConfig(
        level=getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    )

    # =====================================================================================
    # 4. Firebase Admin SDK
    # =====================================================================================
    if not firebase_admin._apps:
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        if cred_path:
            if not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path))
        else:
            # Application default credentials (Cloud Run, GCE, gcloud auth)
            firebase_admin.initialize_app()

    # =====================================================================================
    # 5. Services, stored in 'app.services' (dependency injection)
    # =====================================================================================
    app.services = {}

    # 5-1. Shared infrastructure services
    try:
        store = FirestoreService()
        store.init_app()
        app.services['store'] = store
    except Exception as e:
        logging.error(f"Failed to initialize Firestore service: {e}")
        raise

    try:
        safety_instance = SafetyService()
        safety_instance.init_app(app)
        app.services['safety'] = safety_instance
    except Exception as e:
        logging.error(f"Failed to initialize safety service: {e}")
        raise

    # 5-2. Handlers
    app.services['likes'] = LikeCountService(store=store)
    app.services['daily_winner'] = DailyWinnerService(store=store)
    app.services['comments'] = CommentService(
        store=store,
        safety_service=app.services['safety'],
        max_length=app.config['COMMENT_MAX_LENGTH']
    )

    # 5-3. Document change subscriptions
    dispatcher = EventDispatcher()
    app.services['likes'].register(dispatcher)
    app.services['dispatcher'] = dispatcher

    # =====================================================================================
    # 6. Blueprints and CLI commands
    # =====================================================================================
    CORS(app, resources={r"/submitComment": {"origins": app.config['CORS_ORIGINS']}})
    app.register_blueprint(comments_bp)
    app.register_blueprint(health_bp)
    register_commands(app)

    # =====================================================================================
    # 7. Global error handlers
    # =====================================================================================
    @app.errorhandler(CallableError)
    def handle_callable_error(err):
        return jsonify(err.to_dict()), err.http_status

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error": {"status": "INVALID_ARGUMENT", "message": "Richiesta non valida.", "details": err.messages}}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"error": {"status": err.name.upper().replace(' ', '_'), "message": err.description}}), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # Anything not handled above
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error": {"status": "INTERNAL", "message": "Si è verificato un errore interno. Riprova più tardi."}}
        return jsonify(response), 500

    # =====================================================================================
    # 8. Background components (opt-in)
    # =====================================================================================
    if start_background is None:
        start_background = click.get_current_context(silent=True) is None

    if start_background and app.config['SCHEDULER_ENABLED']:
        scheduler_module.start_scheduler(
            app.services['daily_winner'],
            cron=app.config['DAILY_WINNER_CRON'],
            timezone=app.config['DAILY_WINNER_TIMEZONE']
        )
        atexit.register(scheduler_module.shutdown_scheduler)

    if start_background and app.config['LIKES_WATCH_ENABLED']:
        watcher = LikesWatcher(store.db, dispatcher)
        watcher.start()
        app.services['likes_watcher'] = watcher
        atexit.register(watcher.stop)

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
