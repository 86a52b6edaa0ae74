from datetime import datetime
from decimal import Decimal
from inventory_app import db
from inventory_app.buisness.core.data_insertion_mixin import DataInsertionMixin, serialize_value


class Purchase(DataInsertionMixin, db.Model):
    """Purchase header - one supplier, one date, 1..N line items"""
    __tablename__ = 'purchases'

    id = db.Column(db.Integer, primary_key=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('suppliers.id'), nullable=False)
    purchase_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Relationships
    supplier = db.relationship('Supplier')
    items = db.relationship('PurchaseItem', back_populates='purchase', order_by='PurchaseItem.id')

    def __repr__(self):
        return f'<Purchase {self.id}: Supplier {self.supplier_id}>'

    @property
    def total_amount(self):
        return sum((item.line_total for item in self.items), Decimal('0'))


class PurchaseItem(DataInsertionMixin, db.Model):
    """Line item of a purchase; written once, never mutated"""
    __tablename__ = 'purchase_items'

    id = db.Column(db.Integer, primary_key=True)
    purchase_id = db.Column(db.Integer, db.ForeignKey('purchases.id'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)

    # Relationships
    purchase = db.relationship('Purchase', back_populates='items')
    product = db.relationship('Product')

    def __repr__(self):
        return f'<PurchaseItem {self.id}: Product {self.product_id}, Qty {self.quantity}>'

    @property
    def line_total(self):
        return Decimal(self.quantity) * Decimal(self.price)

    def to_dict(self):
        result = super().to_dict()
        result['product_name'] = self.product.name if self.product else None
        result['line_total'] = serialize_value(self.line_total)
        return result
