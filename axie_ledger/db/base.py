"""SQLAlchemy Declarative Base — ledger table metadata.

Invariants:
    - All models inherit from Base
    - Constraint names come from LEDGER_NAMING_CONVENTION, so models declare only
      the short name ("non_negative") and the database sees the same names the
      Alembic revisions create (ck_balances_non_negative, pk_balances, ...)
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

LEDGER_NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}


class Base(DeclarativeBase):
    """Base class for the balance and axie models."""
    metadata = MetaData(naming_convention=LEDGER_NAMING_CONVENTION)
