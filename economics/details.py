"""
Display rows for the order details panel. Which rows appear depends on the
chain family: advanced-routing chains show protocol fee and slippage,
simple-routing chains show gas price and the gas-adjusted execution price.
Minimum received is always shown. Unknown values render as "-".
"""

from __future__ import annotations

from dataclasses import dataclass

from economics.models import (
    AdvancedRoutingChain,
    OrderEconomics,
    OrderInputs,
)

UNKNOWN = "-"

REAL_PRICE_TOOLTIP = (
    "The actual execution price. Takes into account the gas necessary to execute your order "
    "and guarantees that your desired rate is fulfilled. It fluctuates according to gas prices."
)
MIN_RECEIVED_TOOLTIP = (
    "The minimum amount you can receive. It includes all fees and maximum slippage tolerance."
)


@dataclass(frozen=True)
class DetailRow:
    label: str
    value: str
    tooltip: str = ""


def _percentage(value: float | None) -> str:
    # Zero renders as unknown, same as a missing value
    return f"{value:g}%" if value else f"{UNKNOWN}%"


def _real_price_tooltip(rate: str | None) -> str:
    if not rate:
        return REAL_PRICE_TOOLTIP
    return f"{REAL_PRICE_TOOLTIP} Assuming current gas price it should execute when {rate}."


def build_detail_rows(economics: OrderEconomics, order: OrderInputs) -> list[DetailRow]:
    """Rows for *economics*; empty when no chain is connected."""
    chain = economics.chain
    if chain is None:
        return []

    rows: list[DetailRow] = []
    if isinstance(chain, AdvancedRoutingChain):
        rows.append(DetailRow("Fee", _percentage(economics.fee_percentage)))
        rows.append(DetailRow("Slippage", _percentage(economics.slippage_percentage)))
    else:
        gas = economics.gas_price_display
        rows.append(DetailRow("Gas Price", f"{gas} GWEI" if gas else UNKNOWN))
        rate = economics.real_execution_price
        rows.append(DetailRow("Real Execution Price", rate or UNKNOWN, _real_price_tooltip(rate)))

    minimum = economics.minimum_return
    if minimum is not None:
        symbol = order.output_amount.currency.symbol if order.output_amount else UNKNOWN
        received = f"{minimum.to_significant(4)} {symbol}"
    else:
        received = UNKNOWN
    rows.append(DetailRow("Minimum Received", received, MIN_RECEIVED_TOOLTIP))
    return rows
