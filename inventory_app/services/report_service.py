"""inventory_app.services.report_service

Read-only listings and reports built from the sales, purchases and product tables.

Month bucketing happens in Python so the same queries run on SQLite and MySQL.
"""

from __future__ import annotations

import csv
import io
from collections import OrderedDict, defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from inventory_app.buisness.core.data_insertion_mixin import serialize_value
from inventory_app.buisness.core.errors import NotFoundError
from inventory_app.data.catalog.category import Category
from inventory_app.data.catalog.customer import Customer
from inventory_app.data.catalog.product import Product
from inventory_app.data.catalog.supplier import Supplier
from inventory_app.data.transactions.purchase import Purchase, PurchaseItem
from inventory_app.data.transactions.sale import Sale, SaleItem
from inventory_app.logger import get_logger

logger = get_logger("inventory.services.reports")

PRODUCT_EXPORT_COLUMNS = [
    ('ID', 'id'),
    ('Name', 'name'),
    ('Description', 'description'),
    ('Category', 'category_name'),
    ('Supplier', 'supplier_name'),
    ('Quantity', 'quantity'),
    ('Price', 'price'),
]
SALE_EXPORT_COLUMNS = [
    ('ID', 'id'),
    ('Customer', 'customer_name'),
    ('Date', 'sale_date'),
    ('Items Count', 'items_count'),
    ('Total Amount', 'total_amount'),
]
PURCHASE_EXPORT_COLUMNS = [
    ('ID', 'id'),
    ('Supplier', 'supplier_name'),
    ('Date', 'purchase_date'),
    ('Items Count', 'items_count'),
    ('Total Amount', 'total_amount'),
]


def months_back(today: date, months: int) -> date:
    """First day of the month `months` months before today's month"""
    year, month = today.year, today.month - months
    while month <= 0:
        month += 12
        year -= 1
    return date(year, month, 1)


def to_csv(rows: List[Dict[str, Any]], columns) -> str:
    """Header row plus one fully quoted row per record; None becomes an empty cell"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow([header for header, _ in columns])
    for row in rows:
        writer.writerow(['' if row.get(key) is None else row.get(key) for _, key in columns])
    return buffer.getvalue().rstrip('\n')


def _money(value) -> Decimal:
    """Aggregates come back as Decimal or float depending on the driver"""
    return Decimal(str(value)) if value is not None else Decimal('0')


class ReportService:
    """Listings, dashboard and analytics queries over an injected session"""

    def __init__(self, session, low_stock_threshold: int = 10):
        self.session = session
        self.low_stock_threshold = low_stock_threshold

    # Sale / purchase listings

    def _transaction_summaries(self, header, item, item_fk, party, party_fk, date_col,
                               party_key, date_key, newest_first=False, limit=None):
        line_total = item.quantity * item.price
        stmt = (
            select(
                header.id,
                party.name.label(party_key),
                date_col.label(date_key),
                func.count(item.id).label('items_count'),
                func.sum(line_total).label('total_amount'),
            )
            .join(party, party_fk == party.id)
            .join(item, item_fk == header.id)
            .group_by(header.id, party.name, date_col)
        )
        if newest_first:
            stmt = stmt.order_by(date_col.desc(), header.id.desc())
        else:
            stmt = stmt.order_by(header.id)
        if limit:
            stmt = stmt.limit(limit)

        return [
            {
                'id': row.id,
                party_key: getattr(row, party_key),
                date_key: serialize_value(getattr(row, date_key)),
                'items_count': row.items_count,
                'total_amount': serialize_value(_money(row.total_amount)),
            }
            for row in self.session.execute(stmt)
        ]

    def list_sales(self, newest_first=False, limit=None) -> List[Dict[str, Any]]:
        return self._transaction_summaries(
            Sale, SaleItem, SaleItem.sale_id, Customer, Sale.customer_id, Sale.sale_date,
            'customer_name', 'sale_date', newest_first=newest_first, limit=limit,
        )

    def list_purchases(self, newest_first=False, limit=None) -> List[Dict[str, Any]]:
        return self._transaction_summaries(
            Purchase, PurchaseItem, PurchaseItem.purchase_id, Supplier, Purchase.supplier_id,
            Purchase.purchase_date, 'supplier_name', 'purchase_date',
            newest_first=newest_first, limit=limit,
        )

    def get_sale(self, sale_id) -> Dict[str, Any]:
        sale = self.session.get(Sale, sale_id)
        if sale is None:
            raise NotFoundError("Sale not found")
        return {
            'id': sale.id,
            'customer_id': sale.customer_id,
            'customer_name': sale.customer.name if sale.customer else None,
            'sale_date': serialize_value(sale.sale_date),
            'items': [item.to_dict() for item in sale.items],
            'total_amount': serialize_value(sale.total_amount),
        }

    def get_purchase(self, purchase_id) -> Dict[str, Any]:
        purchase = self.session.get(Purchase, purchase_id)
        if purchase is None:
            raise NotFoundError("Purchase not found")
        return {
            'id': purchase.id,
            'supplier_id': purchase.supplier_id,
            'supplier_name': purchase.supplier.name if purchase.supplier else None,
            'purchase_date': serialize_value(purchase.purchase_date),
            'items': [item.to_dict() for item in purchase.items],
            'total_amount': serialize_value(purchase.total_amount),
        }

    # Dashboard

    def dashboard_summary(self) -> Dict[str, Any]:
        count = lambda model: self.session.execute(select(func.count(model.id))).scalar()
        low_stock = self.session.execute(
            select(func.count(Product.id)).where(Product.quantity < self.low_stock_threshold)
        ).scalar()
        return {
            'total_products': count(Product),
            'total_suppliers': count(Supplier),
            'total_customers': count(Customer),
            'low_stock_count': low_stock,
            'low_stock_threshold': self.low_stock_threshold,
            'recent_sales': self.list_sales(newest_first=True, limit=5),
            'recent_purchases': self.list_purchases(newest_first=True, limit=5),
        }

    # Analytics

    def _amount_by_month(self, header, item, item_fk, date_col, since: date, today: date):
        rows = self.session.execute(
            select(date_col, item.quantity, item.price)
            .join(item, item_fk == header.id)
            .where(date_col >= since, date_col <= today)
        )
        totals = OrderedDict()
        cursor = since
        while cursor <= today:
            totals[cursor.strftime('%Y-%m')] = Decimal('0')
            cursor = (cursor.replace(day=28) + timedelta(days=4)).replace(day=1)

        for posted_on, quantity, price in rows:
            key = posted_on.strftime('%Y-%m')
            totals[key] = totals.get(key, Decimal('0')) + Decimal(quantity) * _money(price)

        return [{'month': month, 'total_amount': serialize_value(amount)} for month, amount in totals.items()]

    def _top_products(self, since: date, today: date, limit: int = 5):
        line_total = SaleItem.quantity * SaleItem.price
        stmt = (
            select(
                Product.name,
                func.sum(SaleItem.quantity).label('total_quantity'),
                func.sum(line_total).label('total_amount'),
            )
            .join(SaleItem, SaleItem.product_id == Product.id)
            .join(Sale, SaleItem.sale_id == Sale.id)
            .where(Sale.sale_date >= since, Sale.sale_date <= today)
            .group_by(Product.id, Product.name)
            .order_by(func.sum(SaleItem.quantity).desc())
            .limit(limit)
        )
        return [
            {
                'name': row.name,
                'total_quantity': int(row.total_quantity or 0),
                'total_amount': serialize_value(_money(row.total_amount)),
            }
            for row in self.session.execute(stmt)
        ]

    def _inventory_by_category(self):
        totals = defaultdict(lambda: {'total_quantity': 0, 'total_value': Decimal('0')})
        rows = self.session.execute(
            select(Category.name, Product.quantity, Product.price)
            .select_from(Product)
            .outerjoin(Category, Product.category_id == Category.id)
        )
        for category_name, quantity, price in rows:
            bucket = totals[category_name]
            bucket['total_quantity'] += quantity
            bucket['total_value'] += Decimal(quantity) * _money(price)

        ordered = sorted(totals.items(), key=lambda kv: kv[1]['total_value'], reverse=True)
        return [
            {
                'category': name,
                'total_quantity': bucket['total_quantity'],
                'total_value': serialize_value(bucket['total_value']),
            }
            for name, bucket in ordered
        ]

    def _top_suppliers(self, since: date, today: date, limit: int = 5):
        line_total = PurchaseItem.quantity * PurchaseItem.price
        stmt = (
            select(
                Supplier.name.label('supplier_name'),
                func.count(func.distinct(Purchase.id)).label('purchase_count'),
                func.sum(line_total).label('total_amount'),
            )
            .join(Purchase, Purchase.supplier_id == Supplier.id)
            .join(PurchaseItem, PurchaseItem.purchase_id == Purchase.id)
            .where(Purchase.purchase_date >= since, Purchase.purchase_date <= today)
            .group_by(Supplier.id, Supplier.name)
            .order_by(func.sum(line_total).desc())
            .limit(limit)
        )
        return [
            {
                'supplier_name': row.supplier_name,
                'purchase_count': row.purchase_count,
                'total_amount': serialize_value(_money(row.total_amount)),
            }
            for row in self.session.execute(stmt)
        ]

    def analytics(self, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Report tables: sales and purchases by month over the last six months,
        top products and suppliers over the last three, and stock value by category.
        """
        today = today or date.today()
        six_months = months_back(today, 5)
        three_months = months_back(today, 2)
        return {
            'sales_by_month': self._amount_by_month(
                Sale, SaleItem, SaleItem.sale_id, Sale.sale_date, six_months, today),
            'top_products': self._top_products(three_months, today),
            'inventory_by_category': self._inventory_by_category(),
            'purchases_by_month': self._amount_by_month(
                Purchase, PurchaseItem, PurchaseItem.purchase_id, Purchase.purchase_date, six_months, today),
            'top_suppliers': self._top_suppliers(three_months, today),
        }

    # Export

    def export_tables(self) -> Dict[str, Dict[str, Any]]:
        """Products, sales and purchases rows with their CSV renderings"""
        products = [
            product.to_dict()
            for product in self.session.execute(select(Product).order_by(Product.name)).scalars()
        ]
        sales = self.list_sales(newest_first=True)
        purchases = self.list_purchases(newest_first=True)
        logger.info(f"Exporting {len(products)} products, {len(sales)} sales, {len(purchases)} purchases")
        return {
            'products': {'rows': products, 'csv': to_csv(products, PRODUCT_EXPORT_COLUMNS)},
            'sales': {'rows': sales, 'csv': to_csv(sales, SALE_EXPORT_COLUMNS)},
            'purchases': {'rows': purchases, 'csv': to_csv(purchases, PURCHASE_EXPORT_COLUMNS)},
        }
