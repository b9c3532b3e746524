"""
Ledger service: chart of accounts and journal entries.

This service enforces the bookkeeping rules:
1. Every journal entry must balance (debits = credits)
2. Entries are immutable (append-only)
3. Accounts must exist and be active
4. Entries are dated inside an open fiscal year

No other service writes journal entries directly.
"""

import logging
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from freight_ops.exceptions import (
    NotFoundError,
    UnbalancedJournalError,
    ValidationError,
)
from freight_ops.models.account import Account
from freight_ops.models.enums import AccountType, SourceType
from freight_ops.models.fiscal_year import FiscalYear
from freight_ops.models.journal_entry import JournalEntry, JournalLine
from freight_ops.schemas.accounting import AccountCreate, JournalEntryCreate
from freight_ops.services.pricing import to_money

logger = logging.getLogger(__name__)


# Accounts the automatic postings rely on, plus the usual neighbours.
DEFAULT_CHART: list[tuple[str, str, AccountType]] = [
    ("101", "Share capital", AccountType.EQUITY),
    ("401", "Suppliers", AccountType.LIABILITY),
    ("411", "Clients", AccountType.ASSET),
    ("445", "VAT collected", AccountType.LIABILITY),
    ("512", "Bank", AccountType.ASSET),
    ("531", "Cash", AccountType.ASSET),
    ("601", "Purchases", AccountType.EXPENSE),
    ("701", "Sales of air freight services", AccountType.REVENUE),
]


class LedgerService:
    """
    All journal operations pass through this service.

    The service takes a database session as a constructor
    argument, so the caller controls the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Chart of accounts ---

    def create_account(self, request: AccountCreate) -> Account:
        """
        Add an account to the chart of accounts.

        Raises ValidationError if the number already exists.
        """
        existing = self.get_account_by_number(request.number)
        if existing:
            raise ValidationError(
                f"Account with number '{request.number}' already exists"
            )

        parent = None
        if request.parent_number:
            parent = self.get_account_by_number(request.parent_number)
            if not parent:
                raise NotFoundError(
                    f"Parent account '{request.parent_number}' not found"
                )

        account = Account(
            number=request.number,
            name=request.name,
            account_type=request.account_type,
            parent_id=parent.id if parent else None,
        )
        self.db.add(account)
        self.db.flush()
        return account

    def get_account_by_number(self, number: str) -> Account | None:
        """Look an account up by number. Returns None when absent."""
        return self.db.execute(
            select(Account).where(Account.number == number)
        ).scalar_one_or_none()

    def seed_default_chart(self) -> list[Account]:
        """Create the missing accounts of DEFAULT_CHART. Returns the new ones."""
        created = []
        for number, name, account_type in DEFAULT_CHART:
            if self.get_account_by_number(number) is None:
                created.append(self.create_account(AccountCreate(
                    number=number, name=name, account_type=account_type,
                )))
        if created:
            logger.info("Seeded %d chart-of-accounts entries", len(created))
        return created

    # --- Journal entries ---

    def post_journal_entry(self, request: JournalEntryCreate) -> JournalEntry:
        """
        Post a balanced journal entry.

        Everything is validated before the entry is added to the
        session, so a failed check writes nothing:
        - the fiscal year exists, is open and contains entry_date
        - every account exists and is active
        - total debits equal total credits

        The caller is responsible for committing.
        """
        fiscal_year = self.db.get(FiscalYear, request.fiscal_year_id)
        if not fiscal_year:
            raise NotFoundError(
                f"Fiscal year {request.fiscal_year_id} not found"
            )
        if fiscal_year.is_closed:
            raise ValidationError(
                f"Fiscal year {fiscal_year.year_number} is closed"
            )
        if not fiscal_year.contains_date(request.entry_date):
            raise ValidationError(
                f"Entry date {request.entry_date} is outside fiscal year "
                f"{fiscal_year.year_number}"
            )

        # --- Validate all accounts ---
        account_ids = {line.account_id for line in request.lines}
        accounts = self.db.execute(
            select(Account).where(Account.id.in_(account_ids))
        ).scalars().all()
        accounts_by_id = {a.id: a for a in accounts}

        missing = account_ids - set(accounts_by_id.keys())
        if missing:
            raise NotFoundError(f"Accounts not found: {missing}")

        for account in accounts_by_id.values():
            if not account.is_active:
                raise ValidationError(f"Account {account.number} is not active")

        # --- Enforce balance rule ---
        total_debit = to_money(sum(line.debit for line in request.lines))
        total_credit = to_money(sum(line.credit for line in request.lines))
        if total_debit != total_credit:
            raise UnbalancedJournalError(
                f"Journal entry does not balance: "
                f"debits={total_debit}, credits={total_credit}"
            )

        entry = JournalEntry(
            entry_number=self._next_entry_number(fiscal_year),
            entry_date=request.entry_date,
            description=request.description,
            reference=request.reference,
            fiscal_year_id=fiscal_year.id,
            source_type=request.source_type,
            source_id=request.source_id,
            total_debit=total_debit,
            total_credit=total_credit,
            created_by=request.created_by,
        )
        for order, line in enumerate(request.lines, start=1):
            entry.lines.append(JournalLine(
                account_id=line.account_id,
                line_order=order,
                debit=to_money(line.debit),
                credit=to_money(line.credit),
                description=line.description,
            ))

        self.db.add(entry)
        self.db.flush()
        return entry

    def _next_entry_number(self, fiscal_year: FiscalYear) -> str:
        """Sequential number per fiscal year: JE-YYYY-NNNNNN."""
        prefix = f"JE-{fiscal_year.year_number}-"
        last_number = self.db.execute(
            select(func.max(JournalEntry.entry_number)).where(
                JournalEntry.fiscal_year_id == fiscal_year.id,
                JournalEntry.entry_number.like(f"{prefix}%"),
            )
        ).scalar()

        sequence = 1
        if last_number:
            try:
                sequence = int(last_number[len(prefix):]) + 1
            except ValueError:
                logger.warning("Unparseable journal entry number: %s", last_number)
        return f"{prefix}{sequence:06d}"

    # --- Queries ---

    def get_journal_entry(self, entry_id: int) -> JournalEntry:
        entry = self.db.get(JournalEntry, entry_id)
        if not entry:
            raise NotFoundError(f"Journal entry {entry_id} not found")
        return entry

    def get_entries_by_source(
        self, source_type: SourceType, source_id: int
    ) -> list[JournalEntry]:
        """Return the entries generated by one LTA, payment, ..."""
        entries = self.db.execute(
            select(JournalEntry)
            .where(
                JournalEntry.source_type == source_type,
                JournalEntry.source_id == source_id,
            )
            .order_by(JournalEntry.id)
        ).scalars().all()
        return list(entries)

    def get_account_balance(self, account_id: int) -> Decimal:
        """
        Calculate an account's balance from its journal lines.

        Balance is never stored, it is always derived from lines.
        For ASSET and EXPENSE accounts: balance = debits - credits
        For LIABILITY, EQUITY and REVENUE: balance = credits - debits
        """
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError(f"Account {account_id} not found")

        total_debit, total_credit = self.db.execute(
            select(
                func.coalesce(func.sum(JournalLine.debit), 0),
                func.coalesce(func.sum(JournalLine.credit), 0),
            ).where(JournalLine.account_id == account_id)
        ).one()

        total_debit = to_money(total_debit)
        total_credit = to_money(total_credit)
        if account.account_type.increases_with_debit:
            return total_debit - total_credit
        return total_credit - total_debit

    def get_trial_balance(self, fiscal_year_id: int) -> list[dict]:
        """Debit and credit totals per account for one fiscal year."""
        rows = self.db.execute(
            select(
                Account.number,
                Account.name,
                func.coalesce(func.sum(JournalLine.debit), 0),
                func.coalesce(func.sum(JournalLine.credit), 0),
            )
            .join(JournalLine, JournalLine.account_id == Account.id)
            .join(JournalEntry, JournalEntry.id == JournalLine.journal_entry_id)
            .where(JournalEntry.fiscal_year_id == fiscal_year_id)
            .group_by(Account.number, Account.name)
            .order_by(Account.number)
        ).all()
        return [
            {
                "account_number": number,
                "account_name": name,
                "total_debit": to_money(debit),
                "total_credit": to_money(credit),
            }
            for number, name, debit, credit in rows
        ]
