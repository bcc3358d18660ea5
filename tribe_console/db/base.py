"""Declarative base shared by all models."""

import uuid

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def new_id() -> str:
    """Opaque string identifier for new rows."""
    return str(uuid.uuid4())
