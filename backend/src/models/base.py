"""Declarative base and shared column helpers"""

from uuid import uuid4

from sqlalchemy.orm import declarative_base
from sqlalchemy import TypeDecorator, JSON
from sqlalchemy.dialects.postgresql import JSONB


Base = declarative_base()


def new_id() -> str:
    """Primary key generator. IDs are opaque strings on the wire."""
    return str(uuid4())


class PortableJSONB(TypeDecorator):
    """JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)."""
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        impl = JSONB() if dialect.name == "postgresql" else JSON()
        return dialect.type_descriptor(impl)
