"""
Exact token amounts and prices. Raw integer magnitudes in the token's smallest
unit, decimal precision carried on the currency.

Arithmetic only works between amounts of the same asset. Mixing assets is an
integration bug upstream and raises CurrencyMismatchError immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_UP, Context, Decimal, localcontext
from fractions import Fraction

# Enough digits for uint256 magnitudes with 18 decimals
_EXACT_PREC = 96


class CurrencyMismatchError(ValueError):
    """Raised when amounts or prices of different assets are combined."""
    pass


@dataclass(frozen=True)
class Currency:
    chain_id: int
    address: str
    decimals: int
    symbol: str
    is_native: bool = False

    def __post_init__(self) -> None:
        if self.decimals < 0 or self.decimals > 255:
            raise ValueError(f"decimals must be in [0, 255], got {self.decimals}")

    def is_same_asset(self, other: Currency) -> bool:
        if self.chain_id != other.chain_id:
            return False
        if self.is_native or other.is_native:
            return self.is_native and other.is_native
        return self.address.lower() == other.address.lower()


def _require_same(a: Currency, b: Currency) -> None:
    if not a.is_same_asset(b):
        raise CurrencyMismatchError(f"{a.symbol} ({a.address}) != {b.symbol} ({b.address})")


def _to_significant(value: Fraction, digits: int) -> str:
    """Half-up rounding to *digits* significant digits, trailing zeros stripped."""
    if digits <= 0:
        raise ValueError(f"digits must be positive, got {digits}")
    if value == 0:
        return "0"
    ctx = Context(prec=digits, rounding=ROUND_HALF_UP)
    rounded = ctx.divide(Decimal(value.numerator), Decimal(value.denominator))
    return format(rounded.normalize(ctx), "f")


def parse_raw_amount(raw: int | str) -> int:
    if isinstance(raw, bool):
        raise TypeError("raw amount must be an integer or integer string, got bool")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            value = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError:
            raise ValueError(f"raw amount is not an integer: {raw!r}") from None
    else:
        raise TypeError(f"raw amount must be an integer or integer string, got {type(raw).__name__}")
    if value < 0:
        raise ValueError(f"raw amount must be non-negative, got {value}")
    return value


@dataclass(frozen=True)
class CurrencyAmount:
    currency: Currency
    raw: int

    def __post_init__(self) -> None:
        if self.raw < 0:
            raise ValueError(f"raw amount must be non-negative, got {self.raw}")

    @classmethod
    def from_raw_amount(cls, currency: Currency, raw: int | str) -> CurrencyAmount:
        """Build from a raw integer (or decimal/hex integer string)."""
        return cls(currency, parse_raw_amount(raw))

    @classmethod
    def from_decimal(cls, currency: Currency, value: Decimal | str | int | float) -> CurrencyAmount:
        """
        Build from a human-unit value, e.g. "1.5" WETH. Digits beyond the
        currency's precision are truncated.
        """
        with localcontext() as ctx:
            ctx.prec = _EXACT_PREC
            scaled = Decimal(str(value)).scaleb(currency.decimals)
            raw = int(scaled.to_integral_value(rounding=ROUND_DOWN))
        return cls.from_raw_amount(currency, raw)

    @property
    def fraction(self) -> Fraction:
        """Amount in human units as an exact fraction."""
        return Fraction(self.raw, 10 ** self.currency.decimals)

    def to_exact(self) -> str:
        with localcontext() as ctx:
            ctx.prec = _EXACT_PREC
            value = Decimal(self.raw).scaleb(-self.currency.decimals)
            return format(value.normalize(), "f") if self.raw else "0"

    def to_significant(self, digits: int = 6) -> str:
        return _to_significant(self.fraction, digits)

    def add(self, other: CurrencyAmount) -> CurrencyAmount:
        _require_same(self.currency, other.currency)
        return CurrencyAmount(self.currency, self.raw + other.raw)

    def subtract(self, other: CurrencyAmount) -> CurrencyAmount:
        _require_same(self.currency, other.currency)
        return CurrencyAmount(self.currency, self.raw - other.raw)

    def less_than(self, other: CurrencyAmount) -> bool:
        _require_same(self.currency, other.currency)
        return self.raw < other.raw

    def __str__(self) -> str:
        return f"{self.to_exact()} {self.currency.symbol}"


@dataclass(frozen=True)
class Price:
    """
    Exchange rate: 1 unit of *base* = ratio units of *quote*.
    ``ratio`` is quote-raw per base-raw; ``adjusted`` is in human units.
    """
    base: Currency
    quote_currency: Currency
    ratio: Fraction

    def __post_init__(self) -> None:
        if self.ratio <= 0:
            raise ValueError(f"price ratio must be positive, got {self.ratio}")

    @classmethod
    def from_amounts(cls, base_amount: CurrencyAmount, quote_amount: CurrencyAmount) -> Price:
        if base_amount.raw == 0:
            raise ValueError("cannot derive a price from a zero base amount")
        return cls(base_amount.currency, quote_amount.currency, Fraction(quote_amount.raw, base_amount.raw))

    @classmethod
    def from_adjusted(cls, base: Currency, quote_currency: Currency, rate: Decimal | str | int | float) -> Price:
        """Build from a human-unit rate, e.g. 1 ETH = 1843.2 USDC."""
        human = Fraction(Decimal(str(rate)))
        return cls(base, quote_currency, human * Fraction(10 ** quote_currency.decimals, 10 ** base.decimals))

    @property
    def adjusted(self) -> Fraction:
        return self.ratio * Fraction(10 ** self.base.decimals, 10 ** self.quote_currency.decimals)

    def invert(self) -> Price:
        return Price(self.quote_currency, self.base, 1 / self.ratio)

    def quote(self, amount: CurrencyAmount) -> CurrencyAmount:
        """Convert *amount* of base into quote. Rounds down to a whole raw unit."""
        _require_same(amount.currency, self.base)
        value = amount.raw * self.ratio
        return CurrencyAmount(self.quote_currency, value.numerator // value.denominator)

    def to_significant(self, digits: int = 6) -> str:
        return _to_significant(self.adjusted, digits)
