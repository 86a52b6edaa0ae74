from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from inventory_app.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def _database_uri(instance_dir):
    """Resolve the database URL from DATABASE_URL, the DB_* parts, or a local SQLite file"""
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        return db_env

    db_host = os.environ.get('DB_HOST')
    if db_host:
        user = os.environ.get('DB_USER', 'root')
        password = os.environ.get('DB_PASSWORD', '')
        name = os.environ.get('DB_NAME', 'inventory_management')
        port = os.environ.get('DB_PORT', '3306')
        return f"mysql+mysqlconnector://{user}:{password}@{db_host}:{port}/{name}"

    default_db_path = instance_dir / 'inventory.db'
    return f"sqlite:///{str(default_db_path.resolve())}"


def create_app(test_config=None):
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("inventory")
    logger.info("Initializing Flask application")

    base_dir = Path(__file__).parent.parent
    instance_dir = base_dir / 'instance'

    app.config['APP_ENV'] = os.environ.get('APP_ENV', 'development').lower()
    is_production = app.config['APP_ENV'] == 'production'

    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    app.config['JWT_SECRET'] = os.environ.get('JWT_SECRET') or app.config['SECRET_KEY']

    # Auth cookie is only marked secure in production unless overridden
    app.config['AUTH_COOKIE_SECURE'] = _env_flag('AUTH_COOKIE_SECURE', 'True' if is_production else 'False')

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['DB_POOL_SIZE'] = int(os.environ.get('DB_POOL_SIZE', '10'))
    app.config['LOW_STOCK_THRESHOLD'] = int(os.environ.get('LOW_STOCK_THRESHOLD', '10'))
    app.config['LOGIN_RATE_LIMIT'] = os.environ.get('LOGIN_RATE_LIMIT', '10 per minute')

    if test_config is not None:
        app.config.update(test_config)

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        instance_dir.mkdir(parents=True, exist_ok=True)
        app.config['SQLALCHEMY_DATABASE_URI'] = _database_uri(instance_dir)

    # SECURITY: Require signing secrets outside of testing - no fallback
    if not app.config.get('SECRET_KEY') and not app.config.get('TESTING'):
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")
    if not app.config.get('JWT_SECRET'):
        app.config['JWT_SECRET'] = app.config.get('SECRET_KEY')

    # Bounded pool for server databases; SQLite keeps the driver default
    if not app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
        app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', {
            'pool_size': app.config['DB_POOL_SIZE'],
            'pool_pre_ping': True,
        })
        logger.debug(f"Database configured: server pool of {app.config['DB_POOL_SIZE']}")
    else:
        logger.debug("Database configured: SQLite")

    if not app.config['AUTH_COOKIE_SECURE']:
        logger.warning("Auth cookie sent without the secure flag - acceptable for development only")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from inventory_app.data.core.user_info.user import User
    from inventory_app.data.catalog.category import Category
    from inventory_app.data.catalog.supplier import Supplier
    from inventory_app.data.catalog.customer import Customer
    from inventory_app.data.catalog.product import Product
    from inventory_app.data.transactions.sale import Sale, SaleItem
    from inventory_app.data.transactions.purchase import Purchase, PurchaseItem

    logger.debug("Models imported and registered")

    # Register blueprints
    from inventory_app.auth import auth
    from inventory_app.presentation.routes import init_app as init_routes

    app.register_blueprint(auth, url_prefix='/api/auth')
    init_routes(app)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    logger.info("Flask application initialization complete")

    return app
