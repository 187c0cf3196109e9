from flask import Flask, render_template
import logging

from ..config.settings import Config
from ..utils.formatting import format_currency, format_date, format_price
from ..utils.logging_config import setup_logging
from .routes import pages_bp

# Module logger
logger = logging.getLogger(__name__)

def create_app(config_class=Config):
    """Create and configure the Flask application."""
    setup_logging()

    # Initialize Flask app
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Register blueprints
    app.register_blueprint(pages_bp)

    # Template helpers
    app.add_template_filter(format_currency, 'currency')
    app.add_template_filter(format_price, 'price')
    app.add_template_filter(format_date, 'date')

    @app.context_processor
    def inject_site():
        return {'organization_name': app.config['ORGANIZATION_NAME']}

    # Error handlers
    @app.errorhandler(404)
    def not_found_error(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Unhandled error: {error}")
        return render_template('errors/500.html'), 500

    return app
