"""
Data models for order economics. Pure data; constructors reject malformed values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from eth_utils import is_address

from economics.amounts import CurrencyAmount, Price, parse_raw_amount

# Distinguished outcome: no reachable price covers the gas cost of execution.
NEVER_EXECUTES = "never executes"

# Pool tick bounds (ticks are int24 on chain)
INT24_MIN = -(2 ** 23)
INT24_MAX = 2 ** 23 - 1


class RateOrientation(Enum):
    """
    Which asset the displayed rate is quoted in.

    INPUT_PER_OUTPUT ("mul") shows "1 <input> = X <output>".
    OUTPUT_PER_INPUT ("div") inverts it: "1 <output> = X <input>".
    """
    INPUT_PER_OUTPUT = "mul"
    OUTPUT_PER_INPUT = "div"


@dataclass(frozen=True)
class SimpleRoutingChain:
    """Fees and slippage are settled at execution time; nothing to simulate client-side."""
    chain_id: int


@dataclass(frozen=True)
class AdvancedRoutingChain:
    """Tick-threshold AMM routing with fixed fee/slippage constants."""
    chain_id: int


ChainContext = Union[SimpleRoutingChain, AdvancedRoutingChain]


@dataclass(frozen=True)
class GasSample:
    gas_price_wei: int
    sampled_at: float  # epoch seconds

    def __post_init__(self) -> None:
        if self.gas_price_wei < 0:
            raise ValueError(f"gas price must be non-negative, got {self.gas_price_wei}")


@dataclass(frozen=True)
class RangeOrderParams:
    """On-chain coordinates of a range order, used by the minimum-return query."""
    pool: str
    zero_for_one: bool
    tick_threshold: int
    receiver: str
    max_fee_amount: int = 0

    def __post_init__(self) -> None:
        for name in ("pool", "receiver"):
            if not is_address(getattr(self, name)):
                raise ValueError(f"{name} is not a valid address: {getattr(self, name)!r}")
        if not INT24_MIN <= self.tick_threshold <= INT24_MAX:
            raise ValueError(f"tick_threshold out of int24 range: {self.tick_threshold}")
        if self.max_fee_amount < 0:
            raise ValueError(f"max_fee_amount must be non-negative, got {self.max_fee_amount}")


@dataclass(frozen=True)
class OrderInputs:
    """What the order-state provider hands over for one calculation."""
    input_amount: CurrencyAmount | None = None
    output_amount: CurrencyAmount | None = None
    orientation: RateOrientation = RateOrientation.INPUT_PER_OUTPUT
    raw_output_amount: str = "0"
    range_order: RangeOrderParams | None = None

    def __post_init__(self) -> None:
        # Fail fast on a malformed raw string rather than at display time
        parse_raw_amount(self.raw_output_amount)


@dataclass(frozen=True)
class GasOverhead:
    real_execution_price: Price | None = None
    real_execution_price_display: str | None = None  # numeric string or NEVER_EXECUTES
    gas_price_display: str | None = None  # whole gwei, no unit

    @property
    def never_executes(self) -> bool:
        return self.real_execution_price_display == NEVER_EXECUTES


@dataclass(frozen=True)
class ReturnAndFees:
    minimum_return: CurrencyAmount | None = None
    slippage_percentage: float | None = None
    fee_percentage: float | None = None


@dataclass(frozen=True)
class OrderEconomics:
    real_execution_price: str | None = None
    minimum_return: CurrencyAmount | None = None
    slippage_percentage: float | None = None
    fee_percentage: float | None = None
    gas_price_display: str | None = None
    chain: ChainContext | None = None

    def to_dict(self) -> dict:
        return {
            "chain_id": self.chain.chain_id if self.chain else None,
            "simple_routing": isinstance(self.chain, SimpleRoutingChain) if self.chain else None,
            "real_execution_price": self.real_execution_price,
            "minimum_return": self.minimum_return.to_exact() if self.minimum_return else None,
            "minimum_return_symbol": self.minimum_return.currency.symbol if self.minimum_return else None,
            "slippage_percentage": self.slippage_percentage,
            "fee_percentage": self.fee_percentage,
            "gas_price_gwei": self.gas_price_display,
        }
