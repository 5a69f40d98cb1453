#!/usr/bin/env python3
"""
Range order economics -- command-line calculator.

Shows what a pending limit/range order is worth: gas-adjusted real execution
price, minimum received, protocol fee and slippage for the chain.

Usage:
  uv run python run.py --chain-id 1 --input WETH:18:0xC02a... --output DAI:18:0x6B17... \
      --input-amount 1 --output-amount 2000 --gas-gwei 30 --native-price 1800
  uv run python run.py --chain-id 137 ... --rate div --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from client.gas import GasOracle
from client.prices import StaticPriceQuoter
from config import Config, load_config
from economics.amounts import Currency, CurrencyAmount, parse_raw_amount
from economics.calculator import OrderEconomicsCalculator, build_calculator
from economics.chains import NATIVE_ADDRESS
from economics.details import build_detail_rows
from economics.models import OrderInputs, RangeOrderParams, RateOrientation
from monitor.display import print_economics
from monitor.logger import setup_logging

logger = logging.getLogger(__name__)


def parse_currency(text: str, chain_id: int) -> Currency:
    """
    Parse SYMBOL:DECIMALS[:ADDRESS]. Without an address the currency is the
    chain's native asset.
    """
    parts = text.split(":")
    if len(parts) not in (2, 3) or not parts[0]:
        raise ValueError(f"expected SYMBOL:DECIMALS[:ADDRESS], got {text!r}")
    try:
        decimals = int(parts[1])
    except ValueError:
        raise ValueError(f"decimals must be an integer, got {parts[1]!r}") from None
    if len(parts) == 2:
        return Currency(chain_id, NATIVE_ADDRESS, decimals, parts[0], is_native=True)
    return Currency(chain_id, parts[2], decimals, parts[0])


def parse_range_order(text: str) -> RangeOrderParams:
    """Parse POOL:ZERO_FOR_ONE:TICK:RECEIVER[:MAX_FEE]."""
    parts = text.split(":")
    if len(parts) not in (4, 5):
        raise ValueError(f"expected POOL:ZERO_FOR_ONE:TICK:RECEIVER[:MAX_FEE], got {text!r}")
    return RangeOrderParams(
        pool=parts[0],
        zero_for_one=parts[1].lower() in ("1", "true", "yes"),
        tick_threshold=int(parts[2]),
        receiver=parts[3],
        max_fee_amount=int(parts[4]) if len(parts) == 5 else 0,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Range order economics calculator")
    parser.add_argument("--chain-id", type=int, default=None, help="Chain id (default: CHAIN_ID from config)")
    parser.add_argument("--input", type=str, default=None, help="Input token as SYMBOL:DECIMALS[:ADDRESS]")
    parser.add_argument("--output", type=str, default=None, help="Output token as SYMBOL:DECIMALS[:ADDRESS]")
    parser.add_argument("--input-amount", type=str, default=None, help="Input amount in token units")
    parser.add_argument("--output-amount", type=str, default=None, help="Desired output amount in token units")
    parser.add_argument("--rate", choices=["mul", "div"], default="mul", help="Rate orientation (div = inverted)")
    parser.add_argument("--gas-gwei", type=float, default=None, help="Use this gas price instead of the RPC oracle")
    parser.add_argument("--native-price", type=str, default=None,
                        help="Output token units per native coin (skips CoinGecko)")
    parser.add_argument("--range-order", type=str, default=None,
                        help="POOL:ZERO_FOR_ONE:TICK:RECEIVER[:MAX_FEE] for the on-chain min-return query")
    parser.add_argument("--min-return-raw", type=str, default=None,
                        help="Known raw minimum return (skips the on-chain query)")
    parser.add_argument("--json", action="store_true", help="Print economics as JSON instead of the details panel")
    parser.add_argument("--json-log", type=str, default=None, help="Path to JSON log file for machine-readable output")
    return parser.parse_args(argv)


def build_order(args: argparse.Namespace, chain_id: int) -> OrderInputs:
    input_currency = parse_currency(args.input, chain_id) if args.input else None
    output_currency = parse_currency(args.output, chain_id) if args.output else None

    input_amount = None
    if input_currency is not None and args.input_amount is not None:
        input_amount = CurrencyAmount.from_decimal(input_currency, args.input_amount)
    output_amount = None
    if output_currency is not None and args.output_amount is not None:
        output_amount = CurrencyAmount.from_decimal(output_currency, args.output_amount)

    return OrderInputs(
        input_amount=input_amount,
        output_amount=output_amount,
        orientation=RateOrientation(args.rate),
        raw_output_amount=str(output_amount.raw) if output_amount else "0",
        range_order=parse_range_order(args.range_order) if args.range_order else None,
    )


def make_calculator(args: argparse.Namespace, cfg: Config, order: OrderInputs) -> OrderEconomicsCalculator:
    """Live collaborators from config, with command-line overrides for gas and price."""
    gas_oracle = None
    if args.gas_gwei is not None:
        if args.gas_gwei < 0:
            raise ValueError(f"--gas-gwei must be non-negative, got {args.gas_gwei}")
        gas_oracle = GasOracle(default_gas_gwei=args.gas_gwei, allow_network=False)
    quoter = None
    if args.native_price is not None and order.output_amount is not None:
        quoter = StaticPriceQuoter({order.output_amount.currency.address: args.native_price})
    return build_calculator(cfg, gas_oracle=gas_oracle, price_quoter=quoter)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    cfg = load_config()
    setup_logging(cfg.log_level, json_log_file=args.json_log)

    chain_id = args.chain_id if args.chain_id is not None else cfg.chain_id
    try:
        order = build_order(args, chain_id)
        min_return_raw = parse_raw_amount(args.min_return_raw) if args.min_return_raw is not None else None
        calculator = make_calculator(args, cfg, order)
    except (ValueError, ArithmeticError) as e:
        logger.error("Invalid order: %s", e)
        return 2

    economics = calculator.calculate(order, chain_id, min_return_raw=min_return_raw)

    if args.json:
        print(json.dumps(economics.to_dict(), indent=2))
    else:
        print_economics(build_detail_rows(economics, order), order, economics.chain)
    return 0


if __name__ == "__main__":
    sys.exit(main())
