import hashlib
from datetime import datetime
from functools import wraps
from typing import Callable, Dict, List, Optional, Union

from flask import current_app as app
from sqlalchemy import Column, DateTime, Integer, String, JSON, asc, desc, func
from sqlalchemy.orm.exc import NoResultFound
from sqlalchemy.orm.query import Query
from sqlalchemy.orm.session import Session

from ..config.db import BaseModel
from ..config.logging import get_logger
from ..config.settings import PAGINATION_PAGE_SIZE, MAX_PAGINATION_PAGE_SIZE
from .facets import facet_config_dependency_name

logger = get_logger(__name__)


def with_default_session(f):
    """
    For some `f` expecting a database session instance as a keyword argument,
    set the default value of the session keyword argument to the current app's
    database driver's session. We need to do this in a decorator rather than
    inline in the function definition because the current app is only available
    once the app is running and an application context has been pushed.
    """

    @wraps(f)
    def wrapped(*args, **kwargs):
        if "session" not in kwargs:
            kwargs["session"] = app.extensions["sqlalchemy"].session
        return f(*args, **kwargs)

    return wrapped


def make_etag(args: Union[dict, list]):
    """Make an etag by hashing the representation of the provided `args` dict"""
    argbytes = bytes(repr(args), "utf-8")
    return hashlib.md5(argbytes).hexdigest()


class CommonColumns(BaseModel):  # type: ignore
    """Metadata attributes shared by all resources"""

    __abstract__ = True  # Indicate that this isn't a Table schema

    _created = Column(DateTime, default=func.now())
    _updated = Column(DateTime, default=func.now())
    _etag = Column(String(40))
    id = Column(Integer, primary_key=True, autoincrement=True, nullable=False)

    def compute_etag(self) -> str:
        """Calculate the etag for this instance"""
        columns = self.__table__.columns.keys()
        etag_fields = [getattr(self, c) for c in columns if not c.startswith("_")]
        return make_etag(etag_fields)

    @with_default_session
    def insert(self, session: Session, commit: bool = True):
        """Add the current instance to the session."""
        # Compute an _etag if none was provided
        self._etag = self._etag or self.compute_etag()

        session.add(self)
        if commit:
            session.commit()

    @with_default_session
    def update(self, session: Session, changes: dict = None, commit: bool = True):
        """
        Update the current instance if it exists in the session.
        `changes` should be a dictionary mapping column names to updated values.
        """
        # Ensure the record exists in the database
        if not self.find_by_id(self.id):
            raise NoResultFound()

        # Update this record's fields if changes were provided
        if changes:
            for column in self.__table__.columns.keys():
                if column in changes:
                    setattr(self, column, changes[column])

        # Set the _updated field to now
        self._updated = datetime.now()

        # Update the instance etag
        self._etag = self.compute_etag()

        session.merge(self)
        if commit:
            session.commit()

    @with_default_session
    def delete(self, session: Session, commit: bool = True):
        """Delete the current instance from the session."""
        session.delete(self)
        if commit:
            session.commit()

    @classmethod
    @with_default_session
    def list(cls, session: Session, **pagination_args):
        """List records in this table, with pagination support."""
        query = session.query(cls)
        query = cls._add_pagination_filters(query, **pagination_args)
        return query.all()

    @classmethod
    def _add_pagination_filters(
        cls,
        query: Query,
        page_num: int = 0,
        page_size: int = PAGINATION_PAGE_SIZE,
        sort_field: Optional[str] = None,
        sort_direction: Optional[str] = None,
        filter_: Callable[[Query], Query] = lambda q: q,
    ) -> Query:
        # Enforce positive page numbers
        page_num = 0 if page_num < 0 else page_num

        # Enforce maximum page size
        page_size = min(page_size, MAX_PAGINATION_PAGE_SIZE)

        # Handle sorting
        if sort_field:
            sort_attribute = getattr(cls, sort_field)
            field_with_dir = (
                asc(sort_attribute) if sort_direction == "asc" else desc(sort_attribute)
            )
            query = query.order_by(field_with_dir)

        # Apply filter function
        query = filter_(query)

        # Handle pagination
        query = query.offset(page_num * page_size)
        query = query.limit(page_size)

        return query

    @classmethod
    @with_default_session
    def count(cls, session: Session, filter_: Callable[[Query], Query] = lambda q: q):
        """Return the total number of records in this table."""
        filtered_query = filter_(session.query(cls.id))
        return filtered_query.count()

    @classmethod
    @with_default_session
    def find_by_id(cls, id: int, session: Session):
        """Find the record with this id"""
        return session.get(cls, id)


DIALOG_TYPES = ["modal", "non_modal", "off_canvas"]
DEFAULT_DIALOG_TYPE = "modal"


class BlockConfigurations(CommonColumns):
    """A placed dialog facet link block and its settings."""

    __tablename__ = "block_configurations"

    plugin_id = Column(String, nullable=False, index=True)
    derivative_id = Column(String, nullable=False, index=True)
    link_title = Column(String, nullable=False, default="")
    dialog_type = Column(String, nullable=False, default=DEFAULT_DIALOG_TYPE)
    # Mirrors the block's calculated dependencies, e.g. {"config": ["facets.facet.color"]}
    dependencies = Column(JSON, nullable=False, default=dict)

    @classmethod
    @with_default_session
    def find_by_dependency(
        cls, config_name: str, session: Session
    ) -> List["BlockConfigurations"]:
        """Find all placed blocks that declare a config dependency on `config_name`."""
        # Dependencies are stored as JSON, so filter them here rather than in SQL
        return [
            block
            for block in session.query(cls).all()
            if config_name in (block.dependencies or {}).get("config", [])
        ]

    @classmethod
    @with_default_session
    def remove_for_facet(cls, facet_id: str, session: Session) -> int:
        """
        Delete every placed block that depends on the facet with id `facet_id`.
        Returns the number of blocks deleted.
        """
        dependents = cls.find_by_dependency(
            facet_config_dependency_name(facet_id), session=session
        )
        for block in dependents:
            session.delete(block)
        session.commit()

        if dependents:
            logger.info(
                f"removed {len(dependents)} block(s) depending on deleted facet {facet_id}"
            )

        return len(dependents)

    def get_configuration(self) -> Dict[str, str]:
        return {"link_title": self.link_title, "dialog_type": self.dialog_type}
