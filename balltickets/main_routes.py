# balltickets/main_routes.py

from flask import Blueprint, render_template, current_app

from .services.settings_service import SettingsService

main_bp = Blueprint('main_bp', __name__)


@main_bp.route('/')
def index():
    """Landing page with the sale countdown and the kill switch state."""
    return render_template(
        'index.html',
        sale_date=SettingsService.get_sale_date(),
        sale_open=SettingsService.is_sale_open(),
    )


@main_bp.route('/anfahrt')
def directions():
    pickup_dates = [d for d in current_app.config.get('PICKUP_DATES', []) if d.get('date')]
    venue = {
        'name': current_app.config['VENUE_NAME'],
        'lat': current_app.config['VENUE_LATITUDE'],
        'lon': current_app.config['VENUE_LONGITUDE'],
    }
    return render_template('anfahrt.html', pickup_dates=pickup_dates, venue=venue)


@main_bp.route('/impressum')
def imprint():
    return render_template('impressum.html')


@main_bp.route('/dsgvo')
def privacy():
    return render_template('dsgvo.html')
