"""
Unit tests for economics/models.py -- data models.
"""

import pytest

from economics.amounts import Currency, CurrencyAmount
from economics.models import (
    NEVER_EXECUTES,
    AdvancedRoutingChain,
    GasOverhead,
    INT24_MAX,
    INT24_MIN,
    GasSample,
    OrderEconomics,
    OrderInputs,
    RangeOrderParams,
    RateOrientation,
    SimpleRoutingChain,
)

USDC = Currency(137, "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174", 6, "USDC")
POOL = "0x" + "ab" * 20
RECEIVER = "0x" + "cd" * 20


class TestRateOrientation:
    def test_values(self):
        assert RateOrientation("mul") is RateOrientation.INPUT_PER_OUTPUT
        assert RateOrientation("div") is RateOrientation.OUTPUT_PER_INPUT

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            RateOrientation("pow")


class TestGasSample:
    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            GasSample(gas_price_wei=-1, sampled_at=0.0)

    def test_zero_price_allowed(self):
        assert GasSample(gas_price_wei=0, sampled_at=0.0).gas_price_wei == 0


class TestRangeOrderParams:
    def test_valid(self):
        params = RangeOrderParams(POOL, True, -200, RECEIVER, max_fee_amount=10)
        assert params.tick_threshold == -200

    def test_tick_bounds_inclusive(self):
        assert RangeOrderParams(POOL, True, INT24_MIN, RECEIVER).tick_threshold == -(2 ** 23)
        assert RangeOrderParams(POOL, True, INT24_MAX, RECEIVER).tick_threshold == 2 ** 23 - 1

    def test_bad_pool(self):
        with pytest.raises(ValueError, match="pool"):
            RangeOrderParams("0xabc", True, 0, RECEIVER)

    def test_bad_receiver(self):
        with pytest.raises(ValueError, match="receiver"):
            RangeOrderParams(POOL, True, 0, "not-an-address")

    def test_tick_above_int24(self):
        with pytest.raises(ValueError, match="tick_threshold"):
            RangeOrderParams(POOL, True, INT24_MAX + 1, RECEIVER)

    def test_tick_below_int24(self):
        with pytest.raises(ValueError, match="tick_threshold"):
            RangeOrderParams(POOL, True, INT24_MIN - 1, RECEIVER)

    def test_negative_max_fee(self):
        with pytest.raises(ValueError, match="max_fee_amount"):
            RangeOrderParams(POOL, True, 0, RECEIVER, max_fee_amount=-1)


class TestOrderInputs:
    def test_defaults(self):
        order = OrderInputs()
        assert order.input_amount is None
        assert order.output_amount is None
        assert order.orientation is RateOrientation.INPUT_PER_OUTPUT
        assert order.raw_output_amount == "0"
        assert order.range_order is None

    def test_hex_raw_output_accepted(self):
        assert OrderInputs(raw_output_amount="0x64").raw_output_amount == "0x64"

    def test_malformed_raw_output_rejected(self):
        with pytest.raises(ValueError):
            OrderInputs(raw_output_amount="12abc")


class TestGasOverhead:
    def test_never_executes(self):
        assert GasOverhead(real_execution_price_display=NEVER_EXECUTES).never_executes
        assert not GasOverhead(real_execution_price_display="2021.84").never_executes
        assert not GasOverhead().never_executes


class TestOrderEconomics:
    def test_to_dict_advanced(self):
        econ = OrderEconomics(
            minimum_return=CurrencyAmount.from_raw_amount(USDC, 99_500_000),
            slippage_percentage=0.4,
            fee_percentage=0.02,
            chain=AdvancedRoutingChain(137),
        )
        assert econ.to_dict() == {
            "chain_id": 137,
            "simple_routing": False,
            "real_execution_price": None,
            "minimum_return": "99.5",
            "minimum_return_symbol": "USDC",
            "slippage_percentage": 0.4,
            "fee_percentage": 0.02,
            "gas_price_gwei": None,
        }

    def test_to_dict_simple(self):
        econ = OrderEconomics(real_execution_price="1 WETH = 2021.84 DAI", gas_price_display="30",
                              chain=SimpleRoutingChain(1))
        d = econ.to_dict()
        assert d["simple_routing"] is True
        assert d["gas_price_gwei"] == "30"
        assert d["minimum_return"] is None

    def test_to_dict_no_chain(self):
        d = OrderEconomics().to_dict()
        assert d["chain_id"] is None
        assert d["simple_routing"] is None
