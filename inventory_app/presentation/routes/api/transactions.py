"""
Sale and purchase routes
Posting goes through TransactionPoster; listings and details through ReportService
"""

from flask import Blueprint, current_app, jsonify
from flask_login import login_required, current_user

from inventory_app import db
from inventory_app.buisness.inventory.transaction_poster import TransactionPoster
from inventory_app.logger import get_logger
from inventory_app.presentation.routes.api import json_body
from inventory_app.services.report_service import ReportService

sales_bp = Blueprint('sales', __name__)
purchases_bp = Blueprint('purchases', __name__)
logger = get_logger("inventory.routes.transactions")


def _item_count(data):
    items = data.get('items')
    return len(items) if isinstance(items, list) else 0


def _reports():
    return ReportService(db.session, current_app.config['LOW_STOCK_THRESHOLD'])


@sales_bp.route('', methods=['GET'])
@login_required
def list_sales():
    return jsonify(_reports().list_sales())


@sales_bp.route('', methods=['POST'])
@login_required
def create_sale():
    data = json_body()
    logger.debug(f"Sale posted by {current_user.username} with {_item_count(data)} items")
    result = TransactionPoster(db.session).post_sale(
        data.get('customer_id'),
        data.get('sale_date'),
        data.get('items'),
        user_id=current_user.id,
    )
    return jsonify(result.to_dict())


@sales_bp.route('/<int(max=2147483647):sale_id>', methods=['GET'])
@login_required
def get_sale(sale_id):
    return jsonify(_reports().get_sale(sale_id))


@purchases_bp.route('', methods=['GET'])
@login_required
def list_purchases():
    return jsonify(_reports().list_purchases())


@purchases_bp.route('', methods=['POST'])
@login_required
def create_purchase():
    data = json_body()
    logger.debug(f"Purchase posted by {current_user.username} with {_item_count(data)} items")
    result = TransactionPoster(db.session).post_purchase(
        data.get('supplier_id'),
        data.get('purchase_date'),
        data.get('items'),
        user_id=current_user.id,
    )
    return jsonify(result.to_dict())


@purchases_bp.route('/<int(max=2147483647):purchase_id>', methods=['GET'])
@login_required
def get_purchase(purchase_id):
    return jsonify(_reports().get_purchase(purchase_id))
