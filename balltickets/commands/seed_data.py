import click
from flask import current_app
from flask.cli import with_appcontext
from balltickets import db
from balltickets.models import (
    BuyerGroup, TicketType, DeliveryMethod, BackendGroup, SystemSettings
)
from balltickets.auth.permissions import Permissions

TICKET_TYPES = ['Vollpreis', 'Ermäßigt']
DELIVERY_METHODS = [('Versand', 5.0), ('Selbstabholung', 0.0)]


def _get_or_create(model, **kwargs):
    instance = model.query.filter_by(**kwargs).first()
    if instance:
        return instance, False
    instance = model(**kwargs)
    db.session.add(instance)
    return instance, True


def seed_reference_data():
    """Creates the groups, ticket types and delivery methods the app expects. Safe to re-run."""
    created = []

    types = []
    for name in TICKET_TYPES:
        ticket_type, was_created = _get_or_create(TicketType, name=name)
        types.append(ticket_type)
        if was_created:
            created.append(f"ticket type '{name}'")

    for name in (current_app.config['PUBLIC_GROUP_NAME'], current_app.config['ALUMNI_GROUP_NAME']):
        group, was_created = _get_or_create(BuyerGroup, name=name)
        if was_created:
            group.max_tickets = current_app.config['DEFAULT_MAX_TICKETS']
            group.ticket_types = list(types)
            created.append(f"buyer group '{name}'")

    for name, surcharge in DELIVERY_METHODS:
        method, was_created = _get_or_create(DeliveryMethod, name=name)
        if was_created:
            method.surcharge = surcharge
            created.append(f"delivery method '{name}'")

    for name in (Permissions.ADMIN, Permissions.IMPORT_GROUP):
        _, was_created = _get_or_create(BackendGroup, name=name)
        if was_created:
            created.append(f"backend group '{name}'")

    if db.session.get(SystemSettings, 1) is None:
        db.session.add(SystemSettings(id=1, sales_enabled=True))
        created.append("system settings")

    db.session.commit()
    return created


@click.command('seed-data')
@with_appcontext
def seed_data():
    """Seeds reference data for a fresh database."""
    try:
        created = seed_reference_data()
    except Exception as e:
        db.session.rollback()
        click.echo(f"Error seeding data: {e}")
        return

    if not created:
        click.echo("Nothing to do, reference data already present.")
        return
    for item in created:
        click.echo(f"Created {item}")
