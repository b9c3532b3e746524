"""
Chart of accounts model.

Accounts are identified by their number (411 clients, 701 sales,
531 cash, ...). Entries are posted against them through journal
entries. The automatic postings only look accounts up; they never
create them.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from freight_ops.models.base import Base, utcnow
from freight_ops.models.enums import AccountType


class Account(Base):
    """
    A single account in the chart of accounts.

    Once it carries journal lines, an account is never deleted,
    only deactivated via is_active=False.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    number: Mapped[str] = mapped_column(
        String(10), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    parent: Mapped["Account | None"] = relationship(remote_side=[id])
    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="account"
    )

    def __repr__(self) -> str:
        return f"<Account {self.number} ({self.account_type.value})>"
