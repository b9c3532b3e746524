"""
LTA (air waybill) model.

The LTA is the shipment record the back office revolves around.
Its cost is computed once at creation and stored. Its status
follows a forward-only state machine; DELIVERED and CANCELLED
are terminal.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, Integer, Text, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freight_ops.models.base import Base, utcnow
from freight_ops.models.enums import LTAStatus, PaymentMode


# Allowed status moves. Forward jumps are accepted (a DRAFT can be
# flagged IN_TRANSIT directly); going backwards is not.
VALID_TRANSITIONS: dict[LTAStatus, set[LTAStatus]] = {
    LTAStatus.DRAFT: {
        LTAStatus.CONFIRMED,
        LTAStatus.IN_TRANSIT,
        LTAStatus.DELIVERED,
        LTAStatus.CANCELLED,
    },
    LTAStatus.CONFIRMED: {
        LTAStatus.IN_TRANSIT,
        LTAStatus.DELIVERED,
        LTAStatus.CANCELLED,
    },
    LTAStatus.IN_TRANSIT: {LTAStatus.DELIVERED, LTAStatus.CANCELLED},
    LTAStatus.DELIVERED: set(),
    LTAStatus.CANCELLED: set(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in VALID_TRANSITIONS.items() if not targets
)

# Statuses on which the public QR tracking code is (re)generated
QR_STATUSES = frozenset({LTAStatus.CONFIRMED, LTAStatus.IN_TRANSIT})


class LTA(Base):
    __tablename__ = "ltas"

    id: Mapped[int] = mapped_column(primary_key=True)
    lta_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    tracking_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    qr_code: Mapped[str | None] = mapped_column(String(500), nullable=True)
    origin_city_id: Mapped[int] = mapped_column(
        ForeignKey("cities.id"), nullable=False, index=True
    )
    destination_city_id: Mapped[int] = mapped_column(
        ForeignKey("cities.id"), nullable=False, index=True
    )
    payment_mode: Mapped[PaymentMode] = mapped_column(
        SAEnum(
            PaymentMode,
            name="payment_mode_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    client_id: Mapped[int | None] = mapped_column(
        ForeignKey("clients.id"), nullable=True, index=True
    )
    total_weight: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False
    )
    package_nature: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    package_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    calculated_cost: Mapped[Decimal | None] = mapped_column(
        Numeric(15, 2), nullable=True
    )
    status: Mapped[LTAStatus] = mapped_column(
        SAEnum(
            LTAStatus,
            name="lta_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=LTAStatus.DRAFT,
    )
    shipper_name: Mapped[str | None] = mapped_column(
        String(150), nullable=True
    )
    shipper_address: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    consignee_name: Mapped[str | None] = mapped_column(
        String(150), nullable=True
    )
    consignee_address: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    special_instructions: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )
    declared_value: Mapped[Decimal | None] = mapped_column(
        Numeric(15, 2), nullable=True
    )
    pickup_date: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    delivery_date: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    origin_city: Mapped["City"] = relationship(
        foreign_keys=[origin_city_id]
    )
    destination_city: Mapped["City"] = relationship(
        foreign_keys=[destination_city_id]
    )
    client: Mapped["Client | None"] = relationship()
    status_history: Mapped[list["LTAStatusHistory"]] = relationship(
        back_populates="lta",
        order_by="LTAStatusHistory.changed_at",
        cascade="all",
    )
    payments: Mapped[list["LTAPayment"]] = relationship(
        back_populates="lta"
    )

    def can_transition_to(self, new_status: LTAStatus) -> bool:
        """
        Check if a status change is valid.

        Re-applying the current status is accepted on non-terminal
        LTAs so a confirmation can be replayed to refresh the QR code.
        """
        if new_status == self.status:
            return self.status not in TERMINAL_STATUSES
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def is_valid(self) -> bool:
        """An LTA billed TO_INVOICE must name a client."""
        return not (
            self.payment_mode == PaymentMode.TO_INVOICE
            and self.client_id is None
            and self.client is None
        )

    @property
    def party_name(self) -> str:
        """Name used in accounting labels: client, else shipper."""
        if self.client is not None and self.client.name:
            return self.client.name
        return self.shipper_name or "Unknown client"

    def __repr__(self) -> str:
        return f"<LTA {self.lta_number} ({self.status.value})>"
