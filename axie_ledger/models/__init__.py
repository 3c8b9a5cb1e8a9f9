"""ORM Models — SQLAlchemy declarative models for the ledger tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete for create_all and autogenerate
"""

from axie_ledger.models.balance import Balance  # noqa: F401
from axie_ledger.models.axie import Axie  # noqa: F401

LEDGER_TABLES = (Balance.__tablename__, Axie.__tablename__)
