"""
LTA status history model.

Every status write on an LTA leaves a row here. The history
backs the public tracking page and the audit trail, so rows
are append-only: never updated, never deleted.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freight_ops.models.base import Base, utcnow
from freight_ops.models.enums import LTAStatus


class LTAStatusHistory(Base):

    __tablename__ = "lta_status_history"

    id: Mapped[int] = mapped_column(primary_key=True)
    lta_id: Mapped[int] = mapped_column(
        ForeignKey("ltas.id"), nullable=False, index=True
    )
    previous_status: Mapped[LTAStatus | None] = mapped_column(
        SAEnum(LTAStatus, name="lta_status_enum"),
        nullable=True,
    )
    new_status: Mapped[LTAStatus] = mapped_column(
        SAEnum(LTAStatus, name="lta_status_enum"),
        nullable=False,
    )
    changed_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    change_reason: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    changed_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    lta: Mapped["LTA"] = relationship(back_populates="status_history")

    def __repr__(self) -> str:
        previous = self.previous_status.value if self.previous_status else "-"
        return f"<LTAStatusHistory {previous} -> {self.new_status.value}>"
