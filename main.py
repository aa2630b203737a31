"""
Main application entry point for the SkillForge API.
"""
from flask import Flask
import logging
from flask_injector import FlaskInjector

from config.injection import ServiceModule
from routes.errors import register_error_handlers
from routes.health import health_bp
from routes.category import category_bp
from routes.profile import profile_bp
from routes.activity import activity_bp
from routes.admin import admin_bp
from routes.goal import goal_bp
from routes.badge import badge_bp
from database.connection import init_database
import config.settings as settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
)
logger = logging.getLogger(__name__)


def create_app():
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Configure Flask settings
    app.config['DEBUG'] = settings.DEBUG
    app.json.sort_keys = False

    # Initialize database tables
    try:
        init_database()
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")

    # Register blueprints
    app.register_blueprint(health_bp)
    app.register_blueprint(category_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(activity_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(goal_bp)
    app.register_blueprint(badge_bp)

    register_error_handlers(app)

    # Configure dependency injection
    FlaskInjector(app=app, modules=[ServiceModule])

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(
        host=settings.HOST,
        port=settings.PORT,
        debug=settings.DEBUG
    )
