"""
Report routes
Dashboard summary, analytics tables and the CSV export page
"""

from urllib.parse import quote

from flask import Blueprint, current_app, jsonify, render_template
from flask_login import login_required, current_user

from inventory_app import db
from inventory_app.logger import get_logger
from inventory_app.services.report_service import ReportService

bp = Blueprint('reports', __name__)
logger = get_logger("inventory.routes.reports")

EXPORT_SECTIONS = (
    ('products', 'Products', 'products'),
    ('sales', 'Sales', 'sales records'),
    ('purchases', 'Purchases', 'purchase records'),
)


def _reports():
    return ReportService(db.session, current_app.config['LOW_STOCK_THRESHOLD'])


@bp.route('/summary', methods=['GET'])
@login_required
def summary():
    return jsonify(_reports().dashboard_summary())


@bp.route('/analytics', methods=['GET'])
@login_required
def analytics():
    return jsonify(_reports().analytics())


@bp.route('/export', methods=['POST'])
@login_required
def export():
    """HTML page with one data-URL CSV download per table"""
    tables = _reports().export_tables()
    sections = [
        {
            'title': title,
            'count': len(tables[key]['rows']),
            'noun': noun,
            'filename': f'{key}.csv',
            'href': 'data:text/csv;charset=utf-8,' + quote(tables[key]['csv'], safe=''),
        }
        for key, title, noun in EXPORT_SECTIONS
    ]
    logger.info(f"Data export generated for {current_user.username}")
    return render_template('reports/export.html', sections=sections)
