"""
Currency service: currencies, exchange rates and conversion.

Exchange rates are looked up often and change rarely, so the
service reads them through an ExchangeRateCache. The cache is an
explicit object: rate updates invalidate it, nothing else does.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from functools import lru_cache

from sqlalchemy import select
from sqlalchemy.orm import Session

from freight_ops.config import get_settings
from freight_ops.exceptions import NotFoundError, ValidationError
from freight_ops.models.currency import Currency, ExchangeRate
from freight_ops.services.pricing import to_money

logger = logging.getLogger(__name__)


RATE_PRECISION = Decimal("0.000001")


class ExchangeRateCache:
    """In-memory map of (from, to) currency pairs to rates."""

    def __init__(self):
        self._rates: dict[tuple[str, str], Decimal] = {}

    def get(self, from_currency: str, to_currency: str) -> Decimal | None:
        return self._rates.get((from_currency, to_currency))

    def put(self, from_currency: str, to_currency: str, rate: Decimal) -> None:
        self._rates[(from_currency, to_currency)] = rate

    def invalidate(
        self, from_currency: str | None = None, to_currency: str | None = None
    ) -> None:
        """
        Drop cached rates.

        With a pair, drops that pair in both directions (an inverse
        rate may have been derived from it). Without, drops everything.
        """
        if from_currency is None or to_currency is None:
            self._rates.clear()
            return
        self._rates.pop((from_currency, to_currency), None)
        self._rates.pop((to_currency, from_currency), None)

    def __len__(self) -> int:
        return len(self._rates)


@lru_cache()
def get_rate_cache() -> ExchangeRateCache:
    """Process-wide cache shared by the request-scoped services."""
    return ExchangeRateCache()


class CurrencyService:

    def __init__(self, db: Session, cache: ExchangeRateCache | None = None):
        self.db = db
        self.cache = cache if cache is not None else get_rate_cache()

    # --- Currencies ---

    def create_currency(
        self,
        code: str,
        name: str,
        symbol: str,
        decimal_places: int = 2,
        is_default: bool = False,
    ) -> Currency:
        code = code.upper()
        if self.db.get(Currency, code):
            raise ValidationError(f"Currency {code} already exists")

        if is_default:
            for current in self.db.execute(
                select(Currency).where(Currency.is_default.is_(True))
            ).scalars():
                current.is_default = False

        currency = Currency(
            code=code,
            name=name,
            symbol=symbol,
            decimal_places=decimal_places,
            is_default=is_default,
        )
        self.db.add(currency)
        self.db.flush()
        return currency

    def find_currency(self, code: str) -> Currency | None:
        currency = self.db.get(Currency, code.upper())
        if currency is None or not currency.is_active:
            return None
        return currency

    def get_currency(self, code: str) -> Currency:
        currency = self.find_currency(code)
        if not currency:
            raise NotFoundError(f"Currency {code} not found")
        return currency

    def list_currencies(self) -> list[Currency]:
        return list(self.db.execute(
            select(Currency)
            .where(Currency.is_active.is_(True))
            .order_by(Currency.code)
        ).scalars().all())

    def get_default_currency(self) -> Currency:
        """The flagged default currency, else the configured base currency."""
        currency = self.db.execute(
            select(Currency).where(
                Currency.is_default.is_(True),
                Currency.is_active.is_(True),
            )
        ).scalars().first()
        if currency:
            return currency
        return self.get_currency(get_settings().BASE_CURRENCY)

    # --- Exchange rates ---

    def _current_rate(
        self, from_currency: str, to_currency: str
    ) -> ExchangeRate | None:
        return self.db.execute(
            select(ExchangeRate)
            .where(
                ExchangeRate.from_currency == from_currency,
                ExchangeRate.to_currency == to_currency,
                ExchangeRate.is_active.is_(True),
            )
            .order_by(ExchangeRate.effective_date.desc(), ExchangeRate.id.desc())
        ).scalars().first()

    def get_exchange_rate(
        self, from_currency: str, to_currency: str
    ) -> Decimal | None:
        """
        Rate converting one unit of from_currency into to_currency.

        Uses the direct rate when there is one, otherwise the
        inverse of the opposite rate. Returns None if neither exists.
        """
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()
        if from_currency == to_currency:
            return Decimal("1")

        cached = self.cache.get(from_currency, to_currency)
        if cached is not None:
            return cached

        rate = None
        direct = self._current_rate(from_currency, to_currency)
        if direct:
            rate = direct.rate
        else:
            inverse = self._current_rate(to_currency, from_currency)
            if inverse:
                rate = (Decimal("1") / inverse.rate).quantize(
                    RATE_PRECISION, rounding=ROUND_HALF_UP
                )

        if rate is not None:
            self.cache.put(from_currency, to_currency, rate)
        return rate

    def convert(
        self, amount: Decimal, from_currency: str, to_currency: str
    ) -> Decimal:
        """
        Convert an amount, rounded to 2 decimals (HALF_UP).

        Raises ValidationError when no rate links the two currencies.
        """
        if from_currency.upper() == to_currency.upper():
            return amount

        rate = self.get_exchange_rate(from_currency, to_currency)
        if rate is None:
            raise ValidationError(
                f"No exchange rate available from {from_currency} "
                f"to {to_currency}"
            )
        return to_money(Decimal(str(amount)) * rate)

    def update_exchange_rate(
        self,
        from_currency: str,
        to_currency: str,
        new_rate: Decimal,
        updated_by: str | None = None,
    ) -> ExchangeRate:
        """
        Replace the active rate of a pair.

        The previous rate row is deactivated, not deleted.
        """
        source = self.get_currency(from_currency)
        target = self.get_currency(to_currency)
        if source.code == target.code:
            raise ValidationError("Cannot set a rate between a currency and itself")
        if new_rate is None or new_rate <= 0:
            raise ValidationError("Exchange rate must be positive")

        previous = self._current_rate(source.code, target.code)
        if previous:
            previous.is_active = False

        rate = ExchangeRate(
            from_currency=source.code,
            to_currency=target.code,
            rate=new_rate,
            created_by=updated_by or get_settings().SYSTEM_USER,
        )
        self.db.add(rate)
        self.db.flush()
        self.cache.invalidate(source.code, target.code)
        logger.info(
            "Exchange rate %s->%s set to %s by %s",
            source.code, target.code, new_rate, rate.created_by,
        )
        return rate

    def list_active_rates(self) -> list[ExchangeRate]:
        return list(self.db.execute(
            select(ExchangeRate)
            .where(ExchangeRate.is_active.is_(True))
            .order_by(ExchangeRate.effective_date.desc())
        ).scalars().all())

    # --- Formatting ---

    def format_amount(self, amount: Decimal, currency_code: str) -> str:
        """$1,234.50 for USD, 1,235 FC for CDF, symbol prefix otherwise."""
        currency = self.find_currency(currency_code)
        if currency is None:
            return str(amount)

        scale = currency.decimal_places
        scaled = Decimal(str(amount)).quantize(
            Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP
        )
        if currency.code == "USD":
            return f"${scaled:,.2f}"
        if currency.code == "CDF":
            return f"{scaled:,.0f} FC"
        return f"{currency.symbol}{scaled:,.{scale}f}"

    def initialize_default_data(self) -> None:
        """Seed USD, CDF and the USD/CDF rates when missing."""
        if self.db.get(Currency, "USD") is None:
            self.create_currency("USD", "US Dollar", "$", 2, is_default=True)
        if self.db.get(Currency, "CDF") is None:
            self.create_currency("CDF", "Congolese Franc", "FC", 0)

        if self._current_rate("USD", "CDF") is None:
            self.update_exchange_rate("USD", "CDF", Decimal("2700.00"))
        if self._current_rate("CDF", "USD") is None:
            self.update_exchange_rate("CDF", "USD", Decimal("0.000370"))
        self.cache.invalidate()
