from flask_assets import Environment, Bundle

assets = Environment()

# Public pages and the buyer portal
css_site = Bundle(
    'css/base.css',
    'css/tables.css',
    filters='cssmin',
    output='css/site.packed.css'
)

# Admin backend layout on top of the site styles
css_backend = Bundle(
    'css/backend.css',
    filters='cssmin',
    output='css/backend.packed.css'
)

assets.register('css_site', css_site)
assets.register('css_backend', css_backend)
