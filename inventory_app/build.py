#!/usr/bin/env python3
"""
Database build for the Inventory Management Service
Creates the tables and makes sure the bootstrap admin exists
"""

import os

from inventory_app import db
from inventory_app.logger import get_logger

logger = get_logger("inventory.build")


def ensure_admin_user(username=None, password=None):
    """
    Create the bootstrap admin when no user with that name exists

    Args:
        username: Defaults to ADMIN_USERNAME, then 'admin'
        password: Defaults to ADMIN_USER_PASSWORD; without one nothing is seeded

    Returns:
        bool: True if a user was created
    """
    from inventory_app.data.core.user_info.user import User

    username = username or os.environ.get('ADMIN_USERNAME', 'admin')
    password = password or os.environ.get('ADMIN_USER_PASSWORD')

    if User.query.filter_by(username=username).first() is not None:
        logger.info(f"Admin user '{username}' already present, skipping")
        return False

    if not password:
        logger.warning("ADMIN_USER_PASSWORD not set - bootstrap admin not created. Run 'python generate_env.py'.")
        return False

    try:
        admin = User(username=username, role='admin')
        admin.set_password(password)
        db.session.add(admin)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Bootstrap admin creation failed: {e}")
        raise

    logger.info(f"Created bootstrap admin user '{username}'")
    return True


def build_database(app, seed_admin=True):
    """
    Create all tables for the registered models, then seed the admin

    Args:
        app: Application whose database is built
        seed_admin: Whether to create the bootstrap admin (default: True)
    """
    with app.app_context():
        logger.info("Starting database build")
        db.create_all()
        logger.info("All tables created")

        if seed_admin:
            ensure_admin_user()

        logger.info("Database build complete")
