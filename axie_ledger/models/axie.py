"""Axie ORM — purchased axie holdings per user.

Invariants:
    - id is the opaque user identity (text primary key)
    - axie >= 0 and only ever grows (no sell path)
    - Row created on first purchase; missing row means 0 holdings
"""

from sqlalchemy import BigInteger, CheckConstraint, Text
from sqlalchemy.orm import Mapped, mapped_column

from axie_ledger.db.base import Base


class Axie(Base):
    __tablename__ = "axies"
    __table_args__ = (
        CheckConstraint("axie >= 0", name="non_negative"),
    )

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    axie: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
