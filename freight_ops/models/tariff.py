"""
Tariff model.

One per-kilogram rate per (origin, destination) route. The
volume coefficients are stored for future pricing rules but
are not used by the cost calculation.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean, DateTime, Numeric, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freight_ops.models.base import Base, utcnow


class Tariff(Base):
    __tablename__ = "tariffs"
    __table_args__ = (
        UniqueConstraint(
            "origin_city_id", "destination_city_id",
            name="uq_tariff_route",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    origin_city_id: Mapped[int] = mapped_column(
        ForeignKey("cities.id"), nullable=False, index=True
    )
    destination_city_id: Mapped[int] = mapped_column(
        ForeignKey("cities.id"), nullable=False, index=True
    )
    kg_rate: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False
    )
    volume_coeff_v1: Mapped[Decimal] = mapped_column(
        Numeric(8, 4), nullable=False, default=Decimal("0")
    )
    volume_coeff_v2: Mapped[Decimal] = mapped_column(
        Numeric(8, 4), nullable=False, default=Decimal("0")
    )
    volume_coeff_v3: Mapped[Decimal] = mapped_column(
        Numeric(8, 4), nullable=False, default=Decimal("0")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    effective_from: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=utcnow
    )
    effective_until: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    origin_city: Mapped["City"] = relationship(
        foreign_keys=[origin_city_id]
    )
    destination_city: Mapped["City"] = relationship(
        foreign_keys=[destination_city_id]
    )

    def is_effective_at(self, moment: datetime) -> bool:
        """Check the active flag and the effective window (open bounds allowed)."""
        if not self.is_active:
            return False
        if self.effective_from is not None and self.effective_from > moment:
            return False
        if self.effective_until is not None and self.effective_until < moment:
            return False
        return True

    def __repr__(self) -> str:
        return (
            f"<Tariff {self.origin_city_id}->{self.destination_city_id} "
            f"{self.kg_rate}/kg>"
        )
