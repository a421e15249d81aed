from datetime import datetime
from flask import current_app

from .. import db
from ..models import SystemSettings, BackendUser
from ..errors import AdminValidationError
from ..utils import parse_iso_datetime

SETTINGS_ID = 1


class SettingsService:
    @staticmethod
    def get_sales_enabled():
        """Kill switch state. Defaults to enabled when the row does not exist yet."""
        setting = db.session.get(SystemSettings, SETTINGS_ID)
        return setting.sales_enabled if setting else True

    @staticmethod
    def set_sales_enabled(enabled, user):
        """Toggle public sales. Only backend users may do this."""
        if user is None or not isinstance(user, BackendUser):
            raise AdminValidationError("Nicht autorisiert: Backend-Zugang erforderlich")

        setting = db.session.get(SystemSettings, SETTINGS_ID)
        if setting is None:
            setting = SystemSettings(id=SETTINGS_ID)
            db.session.add(setting)

        setting.sales_enabled = bool(enabled)
        setting.updated_by = user.full_name or "Unbekannt"
        db.session.commit()

        current_app.logger.info(
            f"Ticket sales {'enabled' if enabled else 'disabled'} by {setting.updated_by}")
        return {'success': True, 'enabled': setting.sales_enabled}

    @staticmethod
    def get_sale_date():
        return parse_iso_datetime(current_app.config.get('TICKET_SALE_DATE'))

    @staticmethod
    def is_sale_open(now=None):
        """Sales are open when the kill switch is on and the sale date has passed."""
        if not SettingsService.get_sales_enabled():
            return False
        sale_date = SettingsService.get_sale_date()
        if sale_date is None:
            return True
        return (now or datetime.now()) >= sale_date
