"""
Error taxonomy for inventory operations.

Each error carries the HTTP status the presentation layer answers with, so
routes and services raise instead of building responses.
"""


class InventoryError(Exception):
    """Base class for expected, client-facing failures"""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'error': self.message}


class ValidationError(InventoryError):
    """Missing or malformed request fields"""

    status_code = 400


class NotFoundError(InventoryError):
    """Referenced entity does not exist"""

    status_code = 404


class InsufficientStockError(InventoryError):
    """Sale line asks for more than is on hand"""

    status_code = 400

    def __init__(self, product_id, available, requested):
        super().__init__(
            f"Insufficient stock for product ID {product_id}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class EntityInUseError(InventoryError):
    """Delete refused because other rows still reference the entity"""

    status_code = 400
