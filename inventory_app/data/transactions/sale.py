from datetime import datetime
from decimal import Decimal
from inventory_app import db
from inventory_app.buisness.core.data_insertion_mixin import DataInsertionMixin, serialize_value


class Sale(DataInsertionMixin, db.Model):
    """Sale header - one customer, one date, 1..N line items"""
    __tablename__ = 'sales'

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False)
    sale_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Relationships
    customer = db.relationship('Customer')
    items = db.relationship('SaleItem', back_populates='sale', order_by='SaleItem.id')

    def __repr__(self):
        return f'<Sale {self.id}: Customer {self.customer_id}>'

    @property
    def total_amount(self):
        return sum((item.line_total for item in self.items), Decimal('0'))


class SaleItem(DataInsertionMixin, db.Model):
    """Line item of a sale; written once, never mutated"""
    __tablename__ = 'sale_items'

    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey('sales.id'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)

    # Relationships
    sale = db.relationship('Sale', back_populates='items')
    product = db.relationship('Product')

    def __repr__(self):
        return f'<SaleItem {self.id}: Product {self.product_id}, Qty {self.quantity}>'

    @property
    def line_total(self):
        return Decimal(self.quantity) * Decimal(self.price)

    def to_dict(self):
        result = super().to_dict()
        result['product_name'] = self.product.name if self.product else None
        result['line_total'] = serialize_value(self.line_total)
        return result
