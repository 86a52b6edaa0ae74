from inventory_app import db
from inventory_app.buisness.core.data_insertion_mixin import DataInsertionMixin


class Category(DataInsertionMixin, db.Model):
    """Product grouping, referenced (not owned) by products"""
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<Category {self.name}>'
