"""
Profile model: the user identity and its wallet account.

Key design decisions:
- `wallet_balance` is stored in integer minor units and can never go
  negative (CHECK constraint is the final safety net)
- `version` is the optimistic-concurrency token for balance writes; every
  debit is conditioned on it and increments it
"""

import uuid

from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    wallet_balance = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)

    bookings = relationship("Booking", back_populates="user", lazy="raise")

    __table_args__ = (
        CheckConstraint("wallet_balance >= 0", name="check_wallet_balance_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email}, balance={self.wallet_balance})>"
