from inventory_app import db
from inventory_app.buisness.core.data_insertion_mixin import DataInsertionMixin


class Product(DataInsertionMixin, db.Model):
    """Stock-keeping item with a running on-hand quantity"""
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    # Foreign Keys
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('suppliers.id'), nullable=True)

    __table_args__ = (
        db.CheckConstraint('quantity >= 0', name='ck_products_quantity_non_negative'),
        db.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )

    # Relationships
    category = db.relationship('Category')
    supplier = db.relationship('Supplier')

    def __repr__(self):
        return f'<Product {self.name} Qty:{self.quantity}>'

    def to_dict(self):
        result = super().to_dict()
        result['category_name'] = self.category.name if self.category else None
        result['supplier_name'] = self.supplier.name if self.supplier else None
        return result
