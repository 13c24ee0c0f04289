from os import environ

from flask import Flask
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
BaseModel = db.Model


def init_db(app: Flask):
    """Connect `app` to the database and create any missing tables"""
    db.init_app(app)
    with app.app_context():
        db.create_all()


def get_sqlalchemy_database_uri(testing: bool = False) -> str:
    """Get the database URI from environment variables"""
    if testing:
        # Connect to an in-memory test database unless one is provided
        db_uri = environ.get("TEST_DATABASE_URI", "sqlite://")
    else:
        db_uri = environ.get("DATABASE_URI")
        if not db_uri:
            raise Exception(
                "DATABASE_URI must be defined to store block configurations."
            )

    assert db_uri

    return db_uri
