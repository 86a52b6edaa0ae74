"""
Category, supplier and customer routes

The three resources share one shape: reads for any signed-in user,
writes for admins only. Each gets its own blueprint named after the resource.
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from inventory_app import db
from inventory_app.auth import admin_required
from inventory_app.logger import get_logger
from inventory_app.presentation.routes.api import json_body
from inventory_app.services.catalog_service import SERVICES
from inventory_app.utils.logging_sanitizer import sanitize_dict

logger = get_logger("inventory.routes.catalog")

ADMIN_MANAGED = ('categories', 'suppliers', 'customers')


def make_blueprint(resource):
    bp = Blueprint(resource, __name__)
    service_class = SERVICES[resource]

    @bp.route('', methods=['GET'])
    @login_required
    def list_entities():
        return jsonify(service_class(db.session).list())

    @bp.route('', methods=['POST'])
    @admin_required
    def create_entity():
        data = json_body()
        logger.debug(f"Create {resource} entry by {current_user.username}: {sanitize_dict(data)}")
        entity = service_class(db.session).create(data)
        return jsonify({'success': True, **entity})

    @bp.route('/<int(max=2147483647):entity_id>', methods=['GET'])
    @login_required
    def get_entity(entity_id):
        return jsonify(service_class(db.session).get(entity_id))

    @bp.route('/<int(max=2147483647):entity_id>', methods=['PUT'])
    @admin_required
    def update_entity(entity_id):
        data = json_body()
        logger.debug(f"Update {resource} {entity_id} by {current_user.username}: {sanitize_dict(data)}")
        entity = service_class(db.session).update(entity_id, data)
        return jsonify({'success': True, **entity})

    @bp.route('/<int(max=2147483647):entity_id>', methods=['DELETE'])
    @admin_required
    def delete_entity(entity_id):
        service_class(db.session).delete(entity_id)
        logger.info(f"{resource} {entity_id} deleted by {current_user.username}")
        return jsonify({'success': True})

    return bp


def blueprints():
    return [make_blueprint(resource) for resource in ADMIN_MANAGED]
