from inventory_app import db
from inventory_app.buisness.core.data_insertion_mixin import DataInsertionMixin


class Supplier(DataInsertionMixin, db.Model):
    """Vendor that products come from and purchases are made with"""
    __tablename__ = 'suppliers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    contact_info = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<Supplier {self.name}>'
