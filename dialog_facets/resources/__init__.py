from flask import Flask

from .facets import facets_bp
from .blocks import blocks_bp


def register_resources(app: Flask):
    """Wire up the dialog facets resource blueprints to `app`."""
    app.url_map.strict_slashes = False

    app.register_blueprint(facets_bp, url_prefix="/facet")
    app.register_blueprint(blocks_bp, url_prefix="/blocks")
