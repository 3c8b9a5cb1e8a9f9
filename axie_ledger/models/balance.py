"""Balance ORM — token balance per user.

Invariants:
    - id is the opaque user identity (text primary key)
    - balance >= 0, enforced by CHECK constraint as a second line behind the executor
    - Rows are provisioned out of band; purchases only UPDATE them
"""

from sqlalchemy import BigInteger, CheckConstraint, Text
from sqlalchemy.orm import Mapped, mapped_column

from axie_ledger.db.base import Base


class Balance(Base):
    __tablename__ = "balances"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="non_negative"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    balance: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
