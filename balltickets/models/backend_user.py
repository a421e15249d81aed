"""Staff accounts for the admin backend."""
from flask_login import UserMixin

from .base import db
from .. import bcrypt


class BackendGroup(db.Model):
    __tablename__ = 'backend_groups'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False, unique=True)

    users = db.relationship('BackendUser', back_populates='group')

    def __repr__(self):
        return f'<BackendGroup {self.name}>'


class BackendUser(UserMixin, db.Model):
    __tablename__ = 'backend_users'

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    sur_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    group_id = db.Column(db.Integer, db.ForeignKey('backend_groups.id'), nullable=True)

    group = db.relationship('BackendGroup', back_populates='users', lazy='joined')

    auth_provider = 'credentials'

    def get_id(self):
        return f'staff:{self.id}'

    @property
    def full_name(self):
        return f'{self.first_name} {self.sur_name}'.strip()

    @property
    def group_name(self):
        return self.group.name if self.group else None

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f'<BackendUser {self.email}>'
