from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData
from flask_migrate import Migrate
from flask_bcrypt import Bcrypt


# 1. Create extension instances WITHOUT an app
# They will be "connected" to the app inside the factory

# Define naming convention for SQLAlchemy
convention = {
    "ix": 'ix_%(column_0_label)s',
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}
metadata = MetaData(naming_convention=convention)

db = SQLAlchemy(metadata=metadata)
bcrypt = Bcrypt()
migrate = Migrate()
from flask_mail import Mail
mail = Mail()
from .assets import assets
from flask_caching import Cache
cache = Cache()


from flask_login import LoginManager
login_manager = LoginManager()
login_manager.login_view = 'auth_bp.signin'
login_manager.login_message = 'Bitte melden Sie sich an.'
login_manager.login_message_category = 'info'

from flask_principal import Principal, Identity, identity_loaded
principal = Principal()


def create_app(config_class='config.Config'):
    """
    Application Factory Function
    """

    app = Flask(__name__, instance_relative_config=True)

    # Load configuration from the config.py file
    app.config.from_object(config_class)

    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    principal.init_app(app)
    mail.init_app(app)
    assets.init_app(app)
    cache.init_app(app)

    # Set up identity loader for Flask-Principal
    from flask_login import user_loaded_from_request, user_loaded_from_cookie, user_logged_in
    from flask_principal import identity_changed, RoleNeed, UserNeed

    @user_logged_in.connect_via(app)
    @user_loaded_from_cookie.connect_via(app)
    @user_loaded_from_request.connect_via(app)
    def on_user_loaded(sender, user, **extra):
        """Load user identity when user logs in."""
        identity_changed.send(sender, identity=Identity(user.get_id()))

    @identity_loaded.connect_via(app)
    def on_identity_loaded(sender, identity):
        """Load backend permissions into identity."""
        from .models import load_user
        from .auth.permissions import get_group_permissions

        identity.user = load_user(identity.id) if identity.id else None

        if identity.user is not None:
            identity.provides.add(UserNeed(identity.id))

            group_name = getattr(identity.user, 'group_name', None)
            if group_name:
                identity.provides.add(RoleNeed(group_name))
                for permission_name in get_group_permissions(group_name):
                    identity.provides.add(('permission', permission_name))

    # Register context processors
    from .auth.permissions import has_permission, Permissions
    from .utils import format_timestamp, format_euro

    @app.context_processor
    def inject_global_vars():
        from .auth.utils import current_group_name, is_backend_session
        from .services.settings_service import SettingsService

        return dict(
            has_permission=has_permission,
            Permissions=Permissions,
            group_name=current_group_name(),
            is_backend_session=is_backend_session(),
            sales_enabled=SettingsService.get_sales_enabled(),
            format_timestamp=format_timestamp,
            format_euro=format_euro,
        )

    # Register Blueprints
    # Imports are *inside* the factory to avoid circular import issues
    with app.app_context():
        from .main_routes import main_bp
        from .auth.routes import auth_bp
        from .buyer_routes import buyer_bp
        from .backend_routes import backend_bp
        from .reserves_routes import reserves_bp
        from .delivery_methods_routes import delivery_methods_bp
        from .buyer_groups_routes import buyer_groups_bp
        from .buyers_routes import buyers_bp
        from .tickets_routes import tickets_bp

        # Import models so SQLAlchemy knows about them
        from . import models

        app.register_blueprint(main_bp)
        app.register_blueprint(auth_bp)
        app.register_blueprint(buyer_bp)
        app.register_blueprint(backend_bp)
        app.register_blueprint(reserves_bp)
        app.register_blueprint(delivery_methods_bp)
        app.register_blueprint(buyer_groups_bp)
        app.register_blueprint(buyers_bp)
        app.register_blueprint(tickets_bp)

    # Register CLI commands
    from balltickets.commands.create_backend_user import create_backend_user
    from balltickets.commands.seed_data import seed_data

    app.cli.add_command(create_backend_user)
    app.cli.add_command(seed_data)

    return app
