"""
Gas-adjusted real execution price for a pending limit order.

The executor pays for gas out of the order's output, so the market has to
move further than the user's target before the order fills. The real
execution price is the nominal rate (output per input) inflated by the share
of output left after gas:

    real = (output / input) * output / (output - gas_in_output)

When the gas cost eats the whole output no price is high enough, and the
order "never executes".
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

from economics.amounts import Currency, CurrencyAmount, Price
from economics.chains import native_currency
from economics.models import NEVER_EXECUTES, GasOverhead, GasSample, RateOrientation

logger = logging.getLogger(__name__)

# Gas units consumed by one limit order execution
DEFAULT_EXECUTION_GAS_LIMIT = 400_000

GWEI_DECIMALS = 9


def format_gas_price(gas_price_wei: int) -> str:
    """Gas price in whole gwei, rounded half-up. 30_000_000_000 wei -> "30"."""
    gwei = Decimal(gas_price_wei).scaleb(-GWEI_DECIMALS)
    return str(gwei.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def gas_cost_in_output(
    gas_sample: GasSample,
    output_currency: Currency,
    native_price: Price,
    execution_gas_limit: int = DEFAULT_EXECUTION_GAS_LIMIT,
) -> CurrencyAmount:
    """
    Cost of one execution at the sampled gas price, converted to the output
    asset. *native_price* must quote the chain's native asset in the output
    asset (base = native, quote = output).
    """
    if execution_gas_limit <= 0:
        raise ValueError(f"execution_gas_limit must be positive, got {execution_gas_limit}")
    native = native_currency(output_currency.chain_id)
    cost_native = CurrencyAmount(native, gas_sample.gas_price_wei * execution_gas_limit)
    cost = native_price.quote(cost_native)
    if not cost.currency.is_same_asset(output_currency):
        # quote() checked the base; the quote side must be the order's output
        raise ValueError(
            f"native price quotes {cost.currency.symbol}, order outputs {output_currency.symbol}"
        )
    return cost


def estimate_gas_overhead(
    input_amount: CurrencyAmount | None,
    output_amount: CurrencyAmount | None,
    orientation: RateOrientation,
    gas_sample: GasSample | None,
    native_price: Price | None,
    execution_gas_limit: int = DEFAULT_EXECUTION_GAS_LIMIT,
) -> GasOverhead:
    """
    Real execution price and gas price display for an order.

    Missing amounts, gas sample or native price leave the price fields unknown
    (None). The price is computed once in output-per-input terms and inverted
    for OUTPUT_PER_INPUT orientation.
    """
    if input_amount is None or output_amount is None or gas_sample is None:
        return GasOverhead()

    gas_display = format_gas_price(gas_sample.gas_price_wei)

    if native_price is None or input_amount.raw == 0 or output_amount.raw == 0:
        return GasOverhead(gas_price_display=gas_display)

    gas = gas_cost_in_output(gas_sample, output_amount.currency, native_price, execution_gas_limit)
    if gas.raw >= output_amount.raw:
        logger.debug(
            "Gas cost %s consumes order output %s -- never executes", gas, output_amount,
        )
        return GasOverhead(
            real_execution_price_display=NEVER_EXECUTES,
            gas_price_display=gas_display,
        )

    out_raw = output_amount.raw
    ratio = Fraction(out_raw * out_raw, input_amount.raw * (out_raw - gas.raw))
    price = Price(input_amount.currency, output_amount.currency, ratio)
    if orientation is RateOrientation.OUTPUT_PER_INPUT:
        price = price.invert()

    return GasOverhead(
        real_execution_price=price,
        real_execution_price_display=price.to_significant(6),
        gas_price_display=gas_display,
    )


def format_execution_rate(
    overhead: GasOverhead,
    input_currency: Currency | None,
    output_currency: Currency | None,
    orientation: RateOrientation,
) -> str | None:
    """Rate with symbols, e.g. "1 WETH = 1850.2 DAI". NEVER_EXECUTES passes through."""
    if input_currency is None or output_currency is None:
        return None
    display = overhead.real_execution_price_display
    if not display:
        return None
    if display == NEVER_EXECUTES:
        return NEVER_EXECUTES
    if orientation is RateOrientation.OUTPUT_PER_INPUT:
        base, quote = output_currency, input_currency
    else:
        base, quote = input_currency, output_currency
    return f"1 {base.symbol} = {display} {quote.symbol}"
