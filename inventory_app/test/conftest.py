"""
Pytest configuration and fixtures for the API tests
Each test gets a fresh application bound to an in-memory SQLite database

The app fixture does not keep an application context pushed: every client
request must get its own context, as it does when served, or Flask-Login's
per-request user would leak from one request into the next. Direct database
work opens a short context of its own through the helpers below.
"""
from decimal import Decimal

import pytest

from inventory_app import create_app
from inventory_app import db as _db
from inventory_app.data.catalog.category import Category
from inventory_app.data.catalog.customer import Customer
from inventory_app.data.catalog.product import Product
from inventory_app.data.catalog.supplier import Supplier
from inventory_app.data.core.user_info.user import User

ADMIN_PASSWORD = 'admin123456789'
STAFF_PASSWORD = 'staff123456789'


@pytest.fixture(scope='function')
def app():
    """Create Flask application for testing"""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'JWT_SECRET': 'test-jwt-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'RATELIMIT_ENABLED': False,
        'AUTH_COOKIE_SECURE': False,
        'LOW_STOCK_THRESHOLD': 10,
    })

    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def app_context(app):
    """Pushed application context for tests that never go through a client"""
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


def create_user(app, username, password, role='staff'):
    """Helper function to insert a user directly; returns its id"""
    with app.app_context():
        user = User(username=username, role=role)
        user.set_password(password)
        _db.session.add(user)
        _db.session.commit()
        return user.id


def login_user(client, username, password):
    """Helper function to login a user; the client keeps the auth cookie"""
    return client.post('/api/auth/login', json={'username': username, 'password': password})


def stock_of(app, product_id):
    """Current stock of a product, read in a fresh context"""
    with app.app_context():
        return _db.session.get(Product, product_id).quantity


def count_rows(app, model):
    with app.app_context():
        return model.query.count()


def exists(app, model, row_id):
    with app.app_context():
        return _db.session.get(model, row_id) is not None


@pytest.fixture(scope='function')
def admin_user(app):
    return create_user(app, 'admin', ADMIN_PASSWORD, role='admin')


@pytest.fixture(scope='function')
def staff_user(app):
    return create_user(app, 'staff', STAFF_PASSWORD, role='staff')


@pytest.fixture(scope='function')
def admin_client(client, admin_user):
    """Test client signed in as an admin"""
    response = login_user(client, 'admin', ADMIN_PASSWORD)
    assert response.status_code == 200
    return client


@pytest.fixture(scope='function')
def staff_client(client, staff_user):
    """Test client signed in as staff"""
    response = login_user(client, 'staff', STAFF_PASSWORD)
    assert response.status_code == 200
    return client


@pytest.fixture(scope='function')
def catalog(app):
    """A small catalog: one category, supplier and customer, two products"""
    with app.app_context():
        category = Category(name='Tools', description='Hand tools')
        supplier = Supplier(name='Acme Supply', contact_info='acme@example.com')
        customer = Customer(name='Jane Buyer', contact_info='555-0100')
        _db.session.add_all([category, supplier, customer])
        _db.session.flush()

        hammer = Product(name='Hammer', quantity=5, price=Decimal('19.99'),
                         category_id=category.id, supplier_id=supplier.id)
        wrench = Product(name='Wrench', quantity=2, price=Decimal('7.50'),
                         category_id=category.id, supplier_id=supplier.id)
        _db.session.add_all([hammer, wrench])
        _db.session.commit()

        return {
            'category_id': category.id,
            'supplier_id': supplier.id,
            'customer_id': customer.id,
            'hammer_id': hammer.id,
            'wrench_id': wrench.id,
        }
