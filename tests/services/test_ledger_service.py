"""
Comprehensive tests for the LedgerService.

Tests cover:
- Chart of accounts creation and uniqueness
- Balanced entry posting and numbering
- Unbalanced entry rejection
- Fiscal year and account checks
- Balance calculation for all account types
- Trial balance
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError

from freight_ops.exceptions import (
    NotFoundError,
    UnbalancedJournalError,
    ValidationError,
)
from freight_ops.models.base import utcnow
from freight_ops.models.enums import AccountType, SourceType
from freight_ops.models.journal_entry import JournalEntry
from freight_ops.schemas.accounting import (
    AccountCreate,
    JournalEntryCreate,
    JournalLineCreate,
)
from freight_ops.services.fiscal_year_service import FiscalYearService
from freight_ops.services.ledger_service import DEFAULT_CHART, LedgerService


def make_entry(fiscal_year, debits, credits, entry_date=None):
    """debits / credits: lists of (account, amount)."""
    lines = [
        JournalLineCreate(account_id=account.id, debit=Decimal(amount), description="D")
        for account, amount in debits
    ] + [
        JournalLineCreate(account_id=account.id, credit=Decimal(amount), description="C")
        for account, amount in credits
    ]
    return JournalEntryCreate(
        fiscal_year_id=fiscal_year.id,
        entry_date=entry_date or utcnow().date(),
        description="Manual entry",
        lines=lines,
    )


# --- Chart of accounts ---

class TestChartOfAccounts:

    def test_seed_creates_default_chart(self, db_session):
        service = LedgerService(db_session)
        created = service.seed_default_chart()

        assert len(created) == len(DEFAULT_CHART)
        assert service.get_account_by_number("411").account_type == AccountType.ASSET
        assert service.get_account_by_number("701").account_type == AccountType.REVENUE

    def test_seed_is_repeatable(self, db_session, chart):
        assert LedgerService(db_session).seed_default_chart() == []

    def test_duplicate_number_rejected(self, db_session, chart):
        with pytest.raises(ValidationError, match="already exists"):
            LedgerService(db_session).create_account(AccountCreate(
                number="411", name="Clients again", account_type=AccountType.ASSET,
            ))

    def test_sub_account_links_parent(self, db_session, chart):
        account = LedgerService(db_session).create_account(AccountCreate(
            number="4111", name="Clients - airlines",
            account_type=AccountType.ASSET, parent_number="411",
        ))
        assert account.parent.number == "411"

    def test_unknown_parent_rejected(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerService(db_session).create_account(AccountCreate(
                number="4111", name="Orphan",
                account_type=AccountType.ASSET, parent_number="999",
            ))

    def test_unknown_number_returns_none(self, db_session):
        assert LedgerService(db_session).get_account_by_number("999") is None


# --- Journal entries ---

class TestPostJournalEntry:

    def test_balanced_entry_posted(self, db_session, books):
        fiscal_year, chart = books
        service = LedgerService(db_session)

        entry = service.post_journal_entry(make_entry(
            fiscal_year, [(chart["512"], "100.00")], [(chart["101"], "100.00")]
        ))
        db_session.commit()

        assert entry.entry_number == f"JE-{fiscal_year.year_number}-000001"
        assert entry.total_debit == entry.total_credit == Decimal("100.00")
        assert entry.source_type == SourceType.MANUAL
        assert [line.line_order for line in entry.lines] == [1, 2]

    def test_entry_numbers_are_sequential(self, db_session, books):
        fiscal_year, chart = books
        service = LedgerService(db_session)
        for _ in range(2):
            last = service.post_journal_entry(make_entry(
                fiscal_year, [(chart["512"], "10")], [(chart["101"], "10")]
            ))
        assert last.entry_number.endswith("-000002")

    def test_multi_line_entry(self, db_session, books):
        fiscal_year, chart = books
        entry = LedgerService(db_session).post_journal_entry(make_entry(
            fiscal_year,
            [(chart["411"], "118.00")],
            [(chart["701"], "100.00"), (chart["445"], "18.00")],
        ))
        assert len(entry.lines) == 3
        assert entry.is_balanced

    def test_unbalanced_entry_rejected(self, db_session, books):
        fiscal_year, chart = books
        with pytest.raises(UnbalancedJournalError, match="does not balance"):
            LedgerService(db_session).post_journal_entry(make_entry(
                fiscal_year, [(chart["512"], "100.00")], [(chart["101"], "99.99")]
            ))
        assert db_session.query(JournalEntry).count() == 0

    def test_date_outside_fiscal_year_rejected(self, db_session, books):
        fiscal_year, chart = books
        with pytest.raises(ValidationError, match="outside fiscal year"):
            LedgerService(db_session).post_journal_entry(make_entry(
                fiscal_year, [(chart["512"], "10")], [(chart["101"], "10")],
                entry_date=date(fiscal_year.year_number - 1, 6, 1),
            ))

    def test_closed_fiscal_year_rejected(self, db_session, books):
        fiscal_year, chart = books
        FiscalYearService(db_session).close_fiscal_year(fiscal_year.id)
        with pytest.raises(ValidationError, match="closed"):
            LedgerService(db_session).post_journal_entry(make_entry(
                fiscal_year, [(chart["512"], "10")], [(chart["101"], "10")]
            ))

    def test_inactive_account_rejected(self, db_session, books):
        fiscal_year, chart = books
        chart["101"].is_active = False
        with pytest.raises(ValidationError, match="not active"):
            LedgerService(db_session).post_journal_entry(make_entry(
                fiscal_year, [(chart["512"], "10")], [(chart["101"], "10")]
            ))

    def test_unknown_account_rejected(self, db_session, books):
        fiscal_year, chart = books
        request = make_entry(fiscal_year, [(chart["512"], "10")], [(chart["101"], "10")])
        request.lines[1].account_id = 9999
        with pytest.raises(NotFoundError):
            LedgerService(db_session).post_journal_entry(request)

    def test_line_with_debit_and_credit_rejected(self, books):
        fiscal_year, chart = books
        with pytest.raises(SchemaValidationError):
            JournalEntryCreate(
                fiscal_year_id=fiscal_year.id,
                entry_date=utcnow().date(),
                description="Both sides",
                lines=[
                    JournalLineCreate(
                        account_id=chart["512"].id,
                        debit=Decimal("10"), credit=Decimal("10"), description="x",
                    ),
                    JournalLineCreate(
                        account_id=chart["101"].id,
                        credit=Decimal("10"), description="y",
                    ),
                ],
            )


# --- Balances ---

class TestBalances:

    def test_balance_sign_follows_account_type(self, db_session, books):
        fiscal_year, chart = books
        service = LedgerService(db_session)
        service.post_journal_entry(make_entry(
            fiscal_year, [(chart["512"], "500")], [(chart["101"], "500")]
        ))
        service.post_journal_entry(make_entry(
            fiscal_year, [(chart["601"], "120")], [(chart["512"], "120")]
        ))
        service.post_journal_entry(make_entry(
            fiscal_year, [(chart["411"], "80")], [(chart["701"], "80")]
        ))
        db_session.commit()

        assert service.get_account_balance(chart["512"].id) == Decimal("380.00")
        assert service.get_account_balance(chart["101"].id) == Decimal("500.00")
        assert service.get_account_balance(chart["601"].id) == Decimal("120.00")
        assert service.get_account_balance(chart["701"].id) == Decimal("80.00")
        assert service.get_account_balance(chart["401"].id) == Decimal("0.00")

    def test_unknown_account_balance_raises(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerService(db_session).get_account_balance(9999)

    def test_trial_balance_totals_match(self, db_session, books):
        fiscal_year, chart = books
        service = LedgerService(db_session)
        service.post_journal_entry(make_entry(
            fiscal_year, [(chart["512"], "500")], [(chart["101"], "500")]
        ))
        service.post_journal_entry(make_entry(
            fiscal_year, [(chart["411"], "80")], [(chart["701"], "80")]
        ))
        db_session.commit()

        rows = service.get_trial_balance(fiscal_year.id)
        assert [row["account_number"] for row in rows] == ["101", "411", "512", "701"]
        assert sum(row["total_debit"] for row in rows) == Decimal("580.00")
        assert sum(row["total_credit"] for row in rows) == Decimal("580.00")
