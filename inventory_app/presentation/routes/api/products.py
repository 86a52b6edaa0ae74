"""
Product routes
Any signed-in user can list, read, create and edit products; only admins delete
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from inventory_app import db
from inventory_app.auth import admin_required
from inventory_app.logger import get_logger
from inventory_app.presentation.routes.api import json_body
from inventory_app.services.catalog_service import ProductService
from inventory_app.utils.logging_sanitizer import sanitize_dict

bp = Blueprint('products', __name__)
logger = get_logger("inventory.routes.products")


@bp.route('', methods=['GET'])
@login_required
def list_products():
    return jsonify(ProductService(db.session).list())


@bp.route('', methods=['POST'])
@login_required
def create_product():
    data = json_body()
    logger.debug(f"Create product by {current_user.username}: {sanitize_dict(data)}")
    product = ProductService(db.session).create(data)
    return jsonify({'success': True, **product})


@bp.route('/<int(max=2147483647):product_id>', methods=['GET'])
@login_required
def get_product(product_id):
    return jsonify(ProductService(db.session).get(product_id))


@bp.route('/<int(max=2147483647):product_id>', methods=['PUT'])
@login_required
def update_product(product_id):
    data = json_body()
    logger.debug(f"Update product {product_id} by {current_user.username}: {sanitize_dict(data)}")
    product = ProductService(db.session).update(product_id, data)
    return jsonify({'success': True, **product})


@bp.route('/<int(max=2147483647):product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    ProductService(db.session).delete(product_id)
    logger.info(f"Product {product_id} deleted by {current_user.username}")
    return jsonify({'success': True})
