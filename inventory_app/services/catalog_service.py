"""inventory_app.services.catalog_service

CRUD for the catalog tables (products, categories, suppliers, customers).

Goal:
- One place that turns a request body into validated column values
- One place for the "is it still referenced" checks that guard deletes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple, Type

from sqlalchemy import func, select

from inventory_app.buisness.core.data_insertion_mixin import serialize_value
from inventory_app.buisness.core.errors import EntityInUseError, NotFoundError, ValidationError
from inventory_app.buisness.core.field_parsing import (
    optional_text,
    parse_int,
    parse_money,
    parse_optional_id,
    require_text,
)
from inventory_app.data.catalog.category import Category
from inventory_app.data.catalog.customer import Customer
from inventory_app.data.catalog.product import Product
from inventory_app.data.catalog.supplier import Supplier
from inventory_app.data.transactions.purchase import Purchase, PurchaseItem
from inventory_app.data.transactions.sale import Sale, SaleItem
from inventory_app.logger import get_logger

logger = get_logger("inventory.services.catalog")


@dataclass(frozen=True)
class UsageCheck:
    """A column that references the entity; any matching row blocks deletion"""
    column: Any
    label: str


class CatalogService:
    """List / read / create / update / delete for one catalog model"""

    model: Type = None
    label: str = 'Entity'
    usage_checks: Tuple[UsageCheck, ...] = ()

    def __init__(self, session):
        self.session = session

    # Reads

    def list(self) -> List[Dict[str, Any]]:
        rows = self.session.execute(select(self.model).order_by(self.model.id)).scalars().all()
        return [row.to_dict() for row in rows]

    def get_entity(self, entity_id):
        entity = self.session.get(self.model, entity_id)
        if entity is None:
            raise NotFoundError(f"{self.label} not found")
        return entity

    def get(self, entity_id) -> Dict[str, Any]:
        return self.get_entity(entity_id).to_dict()

    # Writes

    def clean(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate a request body into column values; subclasses define the fields"""
        raise NotImplementedError

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        values = self.clean(data)
        entity = self.model.from_dict(values)
        try:
            self.session.add(entity)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info(f"Created {self.label.lower()} {entity.id}")
        return entity.to_dict()

    def update(self, entity_id, data: Dict[str, Any]) -> Dict[str, Any]:
        entity = self.get_entity(entity_id)
        values = self.clean(data)
        try:
            entity.update_from_dict(values)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info(f"Updated {self.label.lower()} {entity_id}")
        return entity.to_dict()

    def delete(self, entity_id) -> None:
        """
        Delete the row unless another row still references it

        The usage check and the delete share one transaction but are not
        atomic with respect to concurrent inserts.
        """
        entity = self.get_entity(entity_id)
        for check in self.usage_checks:
            count = self.session.execute(
                select(func.count()).where(check.column == entity_id)
            ).scalar()
            if count:
                logger.warning(f"Refused to delete {self.label.lower()} {entity_id}: used by {count} {check.label}")
                raise EntityInUseError(
                    f"Cannot delete {self.label.lower()} that is in use. "
                    f"Remove the {self.label.lower()} from all {check.label} first."
                )
        try:
            self.session.delete(entity)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info(f"Deleted {self.label.lower()} {entity_id}")

    # Shared helpers

    def _require_existing(self, model, entity_id, label):
        if entity_id is not None and self.session.get(model, entity_id) is None:
            raise ValidationError(f"{label} with ID {entity_id} does not exist")
        return entity_id


class CategoryService(CatalogService):
    model = Category
    label = 'Category'
    usage_checks = (UsageCheck(Product.category_id, 'products'),)

    def clean(self, data):
        return {
            'name': require_text(data, 'name', 'Category name'),
            'description': optional_text(data, 'description'),
        }

    def get(self, entity_id):
        category = self.get_entity(entity_id)
        result = category.to_dict()
        products = self.session.execute(
            select(Product).where(Product.category_id == entity_id).order_by(Product.name)
        ).scalars().all()
        result['products'] = [
            {'id': p.id, 'name': p.name, 'quantity': p.quantity, 'price': serialize_value(p.price)}
            for p in products
        ]
        return result


class SupplierService(CatalogService):
    model = Supplier
    label = 'Supplier'
    usage_checks = (
        UsageCheck(Product.supplier_id, 'products'),
        UsageCheck(Purchase.supplier_id, 'purchases'),
    )

    def clean(self, data):
        return {
            'name': require_text(data, 'name', 'Supplier name'),
            'contact_info': optional_text(data, 'contact_info'),
        }


class CustomerService(CatalogService):
    model = Customer
    label = 'Customer'
    usage_checks = (UsageCheck(Sale.customer_id, 'sales'),)

    def clean(self, data):
        return {
            'name': require_text(data, 'name', 'Customer name'),
            'contact_info': optional_text(data, 'contact_info'),
        }


class ProductService(CatalogService):
    model = Product
    label = 'Product'
    usage_checks = (
        UsageCheck(SaleItem.product_id, 'sales'),
        UsageCheck(PurchaseItem.product_id, 'purchases'),
    )

    def clean(self, data):
        if not data.get('name') or data.get('quantity') is None or data.get('price') is None:
            raise ValidationError("Name, quantity, and price are required")
        return {
            'name': require_text(data, 'name', 'Name'),
            'description': optional_text(data, 'description'),
            'quantity': parse_int(data.get('quantity'), 'quantity', minimum=0),
            'price': parse_money(data.get('price'), 'price'),
            'category_id': self._require_existing(
                Category, parse_optional_id(data.get('category_id'), 'category_id'), 'Category'),
            'supplier_id': self._require_existing(
                Supplier, parse_optional_id(data.get('supplier_id'), 'supplier_id'), 'Supplier'),
        }


SERVICES: Dict[str, Callable] = {
    'products': ProductService,
    'categories': CategoryService,
    'suppliers': SupplierService,
    'customers': CustomerService,
}
