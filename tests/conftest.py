import os

import pytest
from flask import Flask

# The below imports depend on these environment variables,
# so set them before importing them.
os.environ["TESTING"] = "True"
os.environ["DEBUG"] = "False"
os.environ.setdefault("ENV", "dev")
os.environ["AUTH_JWT_SECRET"] = "test-jwt-secret"

from dialog_facets.app import app
from dialog_facets.models import BlockConfigurations
from dialog_facets.services.facet_manager import (
    InMemoryFacetManager,
    InMemoryFacetStorage,
    register_facet_backend,
)

from .utils import FacetBackend


@pytest.fixture
def empty_app():
    return Flask(__name__, static_folder=None)


@pytest.fixture
def dialog_facets_api():
    """An instance of the dialog facets app"""
    return app


@pytest.fixture
def facet_backend(dialog_facets_api) -> FacetBackend:
    """
    Connect the app to an empty in-memory facet backend. Tests add facets to
    `facet_backend.storage` and results to `facet_backend.results`.
    """
    backend = FacetBackend()
    register_facet_backend(
        dialog_facets_api,
        backend.storage,
        lambda storage: InMemoryFacetManager(storage, backend.get_results),
    )
    return backend


@pytest.fixture
def clean_db(dialog_facets_api):
    """Provide a clean test database session"""
    with dialog_facets_api.app_context():
        session = dialog_facets_api.extensions["sqlalchemy"].session
        session.query(BlockConfigurations).delete()
        session.commit()

    return session
