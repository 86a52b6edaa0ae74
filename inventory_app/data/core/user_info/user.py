from inventory_app import db
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
from inventory_app.buisness.core.data_insertion_mixin import DataInsertionMixin

ROLES = ('admin', 'staff')


class User(DataInsertionMixin, db.Model):
    __tablename__ = 'users'

    hidden_fields = ('password_hash',)

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='staff')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == 'admin'

    def __repr__(self):
        return f'<User {self.username}>'
