"""Listen statistics model."""

from decimal import Decimal

from sqlalchemy import BigInteger, CheckConstraint, Column, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from .base import BaseModel

REVENUE_PER_STREAM = Decimal("0.003")


def revenue_for(listens_count: int) -> Decimal:
    """Revenue earned by a listen count."""
    return Decimal(listens_count) * REVENUE_PER_STREAM


class Stat(BaseModel):
    """Listen counter and derived revenue for one single."""

    __tablename__ = "stats"

    single_id = Column(
        Integer,
        ForeignKey("singles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="Owning single"
    )
    listens_count = Column(
        BigInteger,
        default=0,
        nullable=False,
        comment="Total listens (monotonic)"
    )
    revenue = Column(
        Numeric(14, 3),
        default=Decimal("0"),
        nullable=False,
        comment="listens_count * REVENUE_PER_STREAM"
    )

    single = relationship("Single", back_populates="stat")

    __table_args__ = (
        CheckConstraint("listens_count >= 0", name="non_negative_listens"),
    )

    def set_listens(self, listens_count: int) -> None:
        """Set the listen count and recompute revenue from it."""
        self.listens_count = listens_count
        self.revenue = revenue_for(listens_count)

    def __repr__(self) -> str:
        return f"<Stat(single_id={self.single_id}, listens_count={self.listens_count})>"
