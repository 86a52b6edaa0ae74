"""
TransactionPoster - Business logic for posting sales and purchases

Responsibilities:
- Validate the header (counterpart exists, date parses, items present)
- Write the header and one row per line item
- Adjust product stock: conditional decrement for sales, increment for purchases
- Commit everything as one transaction, or roll all of it back

A sale line is only written when the product can cover it. The decrement is
issued as ``quantity = quantity - n WHERE quantity >= n`` so two concurrent
sales cannot both take the last units.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import update

from inventory_app.buisness.core.errors import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from inventory_app.buisness.core.field_parsing import (
    MAX_INTEGER,
    is_blank,
    parse_date,
    parse_int,
    parse_money,
)
from inventory_app.buisness.core.data_insertion_mixin import serialize_value
from inventory_app.data.catalog.customer import Customer
from inventory_app.data.catalog.product import Product
from inventory_app.data.catalog.supplier import Supplier
from inventory_app.data.transactions.purchase import Purchase, PurchaseItem
from inventory_app.data.transactions.sale import Sale, SaleItem
from inventory_app.logger import get_logger

logger = get_logger("inventory.domain.inventory.transaction_poster")


@dataclass
class PostedLine:
    product_id: int
    quantity: int
    price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self):
        return {
            'product_id': self.product_id,
            'quantity': self.quantity,
            'price': serialize_value(self.price),
            'line_total': serialize_value(self.line_total),
        }


@dataclass
class PostingResult:
    """Outcome of a committed sale or purchase"""
    id: int
    counterpart_field: str
    counterpart_id: int
    date_field: str
    posted_on: date
    lines: List[PostedLine] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal('0'))

    def to_dict(self):
        return {
            'success': True,
            'id': self.id,
            self.counterpart_field: self.counterpart_id,
            self.date_field: self.posted_on.isoformat(),
            'items': [line.to_dict() for line in self.lines],
            'total_amount': serialize_value(self.total_amount),
        }


class TransactionPoster:
    """Posts sales and purchases through the session it is given"""

    def __init__(self, session):
        self.session = session

    def post_sale(self, customer_id, sale_date, items, user_id=None) -> PostingResult:
        """
        Record a sale and take its quantities out of stock

        Args:
            customer_id: Customer the sale is for
            sale_date: ISO date string or date
            items: List of {'product_id', 'quantity', 'price'?}; price defaults to the product price
            user_id: User posting the sale (optional)

        Returns:
            PostingResult for the committed sale

        Raises:
            ValidationError, NotFoundError, InsufficientStockError - nothing is written
        """
        customer_id = self._require_id(customer_id, 'Customer')
        posted_on = parse_date(sale_date, 'sale_date')
        raw_items = self._require_items(items)

        try:
            if self.session.get(Customer, customer_id) is None:
                raise NotFoundError(f"Customer with ID {customer_id} not found")

            sale = Sale(customer_id=customer_id, sale_date=posted_on, created_by_id=user_id)
            self.session.add(sale)
            self.session.flush()

            lines = []
            for raw in raw_items:
                product, line = self._parse_line(raw)

                if product.quantity < line.quantity:
                    raise InsufficientStockError(product.id, product.quantity, line.quantity)

                self.session.add(SaleItem(
                    sale_id=sale.id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.price,
                ))

                result = self.session.execute(
                    update(Product)
                    .where(Product.id == line.product_id, Product.quantity >= line.quantity)
                    .values(quantity=Product.quantity - line.quantity)
                    .execution_options(synchronize_session='fetch')
                )
                if result.rowcount == 0:
                    # Stock moved between the read and the update
                    self.session.refresh(product)
                    raise InsufficientStockError(product.id, product.quantity, line.quantity)

                lines.append(line)

            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Sale {sale.id} posted for customer {customer_id} with {len(lines)} items")
        return PostingResult(
            id=sale.id,
            counterpart_field='customer_id',
            counterpart_id=customer_id,
            date_field='sale_date',
            posted_on=posted_on,
            lines=lines,
        )

    def post_purchase(self, supplier_id, purchase_date, items, user_id=None) -> PostingResult:
        """
        Record a purchase and add its quantities to stock

        Same contract as post_sale, without the stock check.
        """
        supplier_id = self._require_id(supplier_id, 'Supplier')
        posted_on = parse_date(purchase_date, 'purchase_date')
        raw_items = self._require_items(items)

        try:
            if self.session.get(Supplier, supplier_id) is None:
                raise NotFoundError(f"Supplier with ID {supplier_id} not found")

            purchase = Purchase(supplier_id=supplier_id, purchase_date=posted_on, created_by_id=user_id)
            self.session.add(purchase)
            self.session.flush()

            lines = []
            for raw in raw_items:
                product, line = self._parse_line(raw)

                if product.quantity + line.quantity > MAX_INTEGER:
                    raise ValidationError(
                        f"Purchase would take product ID {product.id} above {MAX_INTEGER} units"
                    )

                self.session.add(PurchaseItem(
                    purchase_id=purchase.id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.price,
                ))

                self.session.execute(
                    update(Product)
                    .where(Product.id == line.product_id)
                    .values(quantity=Product.quantity + line.quantity)
                    .execution_options(synchronize_session='fetch')
                )
                lines.append(line)

            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Purchase {purchase.id} posted for supplier {supplier_id} with {len(lines)} items")
        return PostingResult(
            id=purchase.id,
            counterpart_field='supplier_id',
            counterpart_id=supplier_id,
            date_field='purchase_date',
            posted_on=posted_on,
            lines=lines,
        )

    # Helpers

    @staticmethod
    def _require_id(value, label):
        if is_blank(value):
            raise ValidationError(f"{label} is required")
        return parse_int(value, f"{label.lower()}_id", minimum=1)

    @staticmethod
    def _require_items(items):
        if not isinstance(items, list) or not items:
            raise ValidationError("At least one item is required")
        return items

    def _parse_line(self, raw) -> tuple:
        """Validate one line item and load its product"""
        if not isinstance(raw, dict):
            raise ValidationError("Each item must be an object")

        product_id = parse_int(raw.get('product_id'), 'product_id', minimum=1)
        quantity = parse_int(raw.get('quantity'), 'quantity', minimum=1)

        product: Optional[Product] = self.session.get(Product, product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")

        if is_blank(raw.get('price')):
            price = Decimal(product.price).quantize(Decimal('0.01'))
        else:
            price = parse_money(raw.get('price'), 'price')

        return product, PostedLine(product_id=product_id, quantity=quantity, price=price)
