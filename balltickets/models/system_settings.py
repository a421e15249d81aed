from datetime import datetime

from .base import db


class SystemSettings(db.Model):
    """Single global row (id=1). A missing row means sales are enabled."""
    __tablename__ = 'system_settings'

    id = db.Column(db.Integer, primary_key=True)
    sales_enabled = db.Column(db.Boolean, nullable=False, default=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by = db.Column(db.String(200), nullable=True)
