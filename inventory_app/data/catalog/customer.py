from inventory_app import db
from inventory_app.buisness.core.data_insertion_mixin import DataInsertionMixin


class Customer(DataInsertionMixin, db.Model):
    """Buyer recorded on sales"""
    __tablename__ = 'customers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    contact_info = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<Customer {self.name}>'
