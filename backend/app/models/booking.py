"""
Booking model: one settled ticket purchase.

Key design decisions:
- `booking_id` is the public identity and is unique across the system;
  history views key rows by it
- `amount` is the fare charged at booking time, snapshotted from the bus
- Rows are immutable once inserted (no update or delete path)
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, utc_now

BOOKING_STATUS_SUCCESS = "Success"
BOOKING_STATUS_FAILED = "Failed"
BOOKING_STATUSES = (BOOKING_STATUS_SUCCESS, BOOKING_STATUS_FAILED)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(String(40), nullable=False, unique=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    bus_id = Column(String(36), ForeignKey("buses.id"), nullable=False)
    amount = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=BOOKING_STATUS_SUCCESS)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    user = relationship("Profile", back_populates="bookings")
    bus = relationship("Bus", lazy="joined")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_booking_amount_non_negative"),
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in BOOKING_STATUSES) + ")",
            name="check_booking_status",
        ),
        # History is always "my bookings, newest first"
        Index("ix_bookings_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(booking_id={self.booking_id}, user={self.user_id}, bus={self.bus_id}, status={self.status})>"
