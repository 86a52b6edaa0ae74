"""
Generic data insertion mixin for SQLAlchemy models
Provides from_dict and to_dict so routes can return rows as JSON
and services can build rows from validated request bodies.
"""

from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import inspect
from inventory_app.logger import get_logger

logger = get_logger("inventory.domain.core.data_insertion")


def serialize_value(value):
    """Convert a column value into something jsonify renders the way the API promises"""
    if isinstance(value, Decimal):
        # Money is returned as a fixed two-place decimal string
        return str(value.quantize(Decimal('0.01')))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class DataInsertionMixin:
    """
    Mixin that provides generic data insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_dict(): Create model instance from dictionary
    - to_dict(): Convert model instance to dictionary
    - update_from_dict(): Copy known columns from a dictionary onto the instance
    """

    # Columns that to_dict() leaves out, e.g. password hashes
    hidden_fields = ()

    @classmethod
    def column_keys(cls):
        return [c.key for c in inspect(cls).columns]

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Create a model instance from a dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            skip_fields (list, optional): Fields to skip during creation

        Returns:
            Model instance (not saved to database)
        """
        skip_fields = set(skip_fields or []) | {'id'}
        columns = set(cls.column_keys())
        filtered_data = {
            key: value for key, value in data_dict.items()
            if key in columns and key not in skip_fields
        }
        return cls(**filtered_data)

    def update_from_dict(self, data_dict, skip_fields=None):
        """Copy matching column values onto this instance, ignoring the primary key"""
        skip_fields = set(skip_fields or []) | {'id'}
        for key in self.column_keys():
            if key in data_dict and key not in skip_fields:
                setattr(self, key, data_dict[key])
        return self

    def to_dict(self):
        """
        Convert model instance to dictionary

        Returns:
            dict: Column values keyed by column name, with money and dates serialized
        """
        result = {}
        for key in self.column_keys():
            if key in self.hidden_fields:
                continue
            result[key] = serialize_value(getattr(self, key))
        return result
