"""Catalog models - CRUD only, no business logic"""

from inventory_app.data.catalog.category import Category
from inventory_app.data.catalog.supplier import Supplier
from inventory_app.data.catalog.customer import Customer
from inventory_app.data.catalog.product import Product

__all__ = [
    'Category',
    'Supplier',
    'Customer',
    'Product'
]
