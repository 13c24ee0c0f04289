"""
Settings and constants used by the dialog facets app.

Any 'UPPER_CASE' variables will be exported as a key-value pair
in the `SETTINGS` dictionary defined at the bottom of this file.
"""

from os import environ

from dotenv import load_dotenv

from .db import get_sqlalchemy_database_uri

load_dotenv()

### Configure application environment ###
ENV = environ.get("ENV")
assert ENV in (
    "dev",
    "staging",
    "prod",
), "ENV environment variable must be set to 'dev', 'staging', or 'prod'"
DEBUG = environ.get("DEBUG") == "True"
assert ENV == "dev" if DEBUG else True, "DEBUG mode is only allowed when ENV='dev'"
TESTING = environ.get("TESTING") == "True"
ALLOWED_CLIENT_URL = environ.get("ALLOWED_CLIENT_URL", "*")
IS_GUNICORN = "gunicorn" in environ.get("SERVER_SOFTWARE", "")

### Configure miscellaneous constants ###
PAGINATION_PAGE_SIZE = 25
MAX_PAGINATION_PAGE_SIZE = 200

### Configure Flask-SQLAlchemy ###
SQLALCHEMY_DATABASE_URI = get_sqlalchemy_database_uri(TESTING)
SQLALCHEMY_TRACK_MODIFICATIONS = False

### Configure admin auth ###
# Admin tokens are JWTs signed with this secret and carrying `"role": "admin"`
AUTH_JWT_SECRET = environ.get("AUTH_JWT_SECRET")
ALGORITHMS = ["HS256"]
ADMIN_ROLE = "admin"

### Configure facets ###
# Import string of a callable returning a `(storage, manager_factory)` pair
FACETS_BACKEND = environ.get(
    "FACETS_BACKEND", "dialog_facets.services.facet_manager:in_memory_backend"
)
LINK_BLOCK_PLUGIN_ID = "dialog_facets_link_block"
DERIVATIVE_SEPARATOR = ":"
FACET_CONFIG_PREFIX = "facets.facet"

### Configure dialogs ###
# Client-side library that opens `use-ajax` links in a dialog
DIALOG_LIBRARY = environ.get("DIALOG_LIBRARY", "core/drupal.dialog.ajax")
DIALOG_WIDTH = 350


# Accumulate all constants defined in this file in a single dictionary
SETTINGS = {k: v for k, v in globals().items() if k.isupper()}
