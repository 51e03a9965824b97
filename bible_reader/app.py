# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
import logging
import sys
import time

from .config import Config
from .database import SupabaseClient, _get_supabase_instance
from .services.registry import init_services
from .routes.auth import auth_bp
from .routes.bible import bible_bp
from .routes.bookmarks_routes import bookmarks_bp
from .routes.highlight import highlight_bp
from .routes.reading_plans import reading_plans_bp

logger = logging.getLogger(__name__)


def configure_logging():
    # Log to stdout so gunicorn and the platform collect it
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def create_app(config_object=None, supabase_client=None, http_session=None):
    """Build the Flask app.

    ``config_object`` (a class or a dict) overrides :class:`Config`;
    ``supabase_client`` and ``http_session`` replace the real Supabase client
    and the ``requests`` session for the upstream APIs.
    """
    configure_logging()

    app = Flask(__name__)
    app.config.from_object(Config)
    if isinstance(config_object, dict):
        app.config.update(config_object)
    elif config_object is not None:
        app.config.from_object(config_object)

    # Behind a proxy in production
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.json.compact = True
    app.config['CORS_HEADERS'] = 'Content-Type'

    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "expose_headers": ["Content-Type", "Authorization"],
        }
    })

    # Ensure URLs with or without trailing slashes are handled the same way
    app.url_map.strict_slashes = False

    if supabase_client is not None:
        supabase = SupabaseClient(client=supabase_client)
    else:
        # Connects lazily on first use
        supabase = _get_supabase_instance()
    init_services(app, supabase, http_session)

    app.register_blueprint(bible_bp, url_prefix='/api/bible')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(bookmarks_bp)
    app.register_blueprint(highlight_bp)
    app.register_blueprint(reading_plans_bp)

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"{request.method} {request.path} -> {response.status_code} in {duration:.2f} seconds")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint that also verifies the Supabase connection"""
        try:
            with supabase.db_connection() as client:
                client.table('reading_plans').select('id').limit(1).execute()
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return jsonify({
                'status': 'unhealthy',
                'error': str(e),
                'timestamp': time.time()
            }), 500

        return jsonify({
            'status': 'healthy',
            'supabase': 'connected',
            'timestamp': time.time()
        })

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, port=app.config['PORT'])
