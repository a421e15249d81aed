import click
from flask.cli import with_appcontext
from balltickets import db
from balltickets.models import BackendUser, BackendGroup
from balltickets.utils import normalize_email, is_valid_email


@click.command('create-backend-user')
@click.option('--email', required=True, help='Login email of the staff member')
@click.option('--first-name', required=True, help='First name')
@click.option('--sur-name', required=True, help='Surname')
@click.option('--group', 'group_name', default='Admin', show_default=True, help='Backend group (Admin or Import)')
@click.password_option('--password', help='Login password')
@with_appcontext
def create_backend_user(email, first_name, sur_name, group_name, password):
    """
    Creates a staff account for the admin backend.
    """
    email = normalize_email(email)
    if not is_valid_email(email):
        click.echo(f"Error: '{email}' is not a valid email address.")
        return

    if BackendUser.query.filter_by(email=email).first():
        click.echo(f"Error: A backend user with email '{email}' already exists.")
        return

    group = BackendGroup.query.filter_by(name=group_name).first()
    if group is None:
        group = BackendGroup(name=group_name)
        db.session.add(group)
        click.echo(f"Created backend group '{group_name}'.")

    try:
        user = BackendUser(email=email, first_name=first_name, sur_name=sur_name, group=group)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"Successfully created backend user: {user.full_name} <{email}> ({group_name})")
    except Exception as e:
        db.session.rollback()
        click.echo(f"Error creating backend user: {e}")
