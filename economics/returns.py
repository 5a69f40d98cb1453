"""
Minimum return, slippage and protocol fee for an order, by chain family.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from economics.amounts import CurrencyAmount
from economics.models import AdvancedRoutingChain, ChainContext, ReturnAndFees, SimpleRoutingChain


@runtime_checkable
class RoutingConstants(Protocol):
    """Fixed fee/slippage constants of the range-order library, in basis points."""

    @property
    def slippage_bps(self) -> int:
        ...

    @property
    def fee_bps(self) -> int:
        ...


def bps_to_percentage(bps: int | float) -> float:
    return bps / 100


def calculate_return_and_fees(
    output_amount: CurrencyAmount | None,
    chain: ChainContext | None,
    routing: RoutingConstants | None,
    min_return_raw: int | str | None = None,
) -> ReturnAndFees:
    """
    Simple-routing chains: minimum return is the nominal output, fee and
    slippage are unknown (charged at execution time by the relayer).

    Advanced-routing chains: fee and slippage come from the routing constants.
    The minimum return comes from the on-chain query result *min_return_raw*;
    without it the minimum return is unknown, never zero.
    """
    if output_amount is None or chain is None or routing is None:
        return ReturnAndFees()

    if isinstance(chain, SimpleRoutingChain):
        return ReturnAndFees(minimum_return=output_amount)

    if not isinstance(chain, AdvancedRoutingChain):
        raise TypeError(f"unknown chain context: {chain!r}")

    minimum_return = None
    if min_return_raw is not None:
        minimum_return = CurrencyAmount.from_raw_amount(output_amount.currency, min_return_raw)

    return ReturnAndFees(
        minimum_return=minimum_return,
        slippage_percentage=bps_to_percentage(routing.slippage_bps),
        fee_percentage=bps_to_percentage(routing.fee_bps),
    )
