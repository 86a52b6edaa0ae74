"""
Routes package for the Inventory Management Service
JSON API blueprints plus the application-wide error handlers
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException

from inventory_app import db
from inventory_app.buisness.core.errors import InventoryError
from inventory_app.logger import get_logger
from inventory_app.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("inventory.routes")


def register_error_handlers(app):
    """One JSON error shape for every route"""

    @app.errorhandler(InventoryError)
    def handle_inventory_error(error):
        logger.info(f"{type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.error(f"Unhandled error: {sanitize_exception_message(error)}", exc_info=error)
        return jsonify({'success': False, 'error': 'Internal server error'}), 500


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .api import catalog, products, transactions, reports

    app.register_blueprint(products.bp, url_prefix='/api/products')
    for blueprint in catalog.blueprints():
        app.register_blueprint(blueprint, url_prefix=f'/api/{blueprint.name}')
    app.register_blueprint(transactions.sales_bp, url_prefix='/api/sales')
    app.register_blueprint(transactions.purchases_bp, url_prefix='/api/purchases')
    app.register_blueprint(reports.bp, url_prefix='/api/reports')

    register_error_handlers(app)

    logger.info("All route blueprints registered successfully")
