"""
Unit tests for economics/calculator.py -- order economics end to end with fake collaborators.
"""

from unittest.mock import MagicMock

import pytest

from client.prices import StaticPriceQuoter
from client.range_orders import MinReturnQuery
from config import Config
from economics.amounts import Currency, CurrencyAmount
from economics.calculator import OrderEconomicsCalculator, build_calculator
from economics.models import (
    NEVER_EXECUTES,
    AdvancedRoutingChain,
    GasSample,
    OrderEconomics,
    OrderInputs,
    RangeOrderParams,
    RateOrientation,
    SimpleRoutingChain,
)

WETH = Currency(1, "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", 18, "WETH")
DAI = Currency(1, "0x6B175474E89094C44Da98b954EedeAC495271d0F", 18, "DAI")
WMATIC = Currency(137, "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270", 18, "WMATIC")
USDC = Currency(137, "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174", 6, "USDC")

POOL = "0x" + "ab" * 20
RECEIVER = "0x" + "cd" * 20


def _oracle(gwei: int | None = 30):
    oracle = MagicMock()
    oracle.latest.return_value = (
        GasSample(gas_price_wei=gwei * 10 ** 9, sampled_at=1_700_000_000.0) if gwei is not None else None
    )
    return oracle


def _routing(slippage_bps=50, fee_bps=20, min_return=None):
    routing = MagicMock()
    routing.slippage_bps = slippage_bps
    routing.fee_bps = fee_bps
    routing.get_min_return.return_value = min_return
    return routing


def _calculator(oracle=None, routing=None, **kwargs):
    return OrderEconomicsCalculator(
        gas_oracle=oracle if oracle is not None else _oracle(),
        price_quoter=StaticPriceQuoter({DAI.address: "1800", USDC.address: "0.9"}),
        routing=routing if routing is not None else _routing(),
        **kwargs,
    )


def _mainnet_order(inp="1", out="2000", orientation=RateOrientation.INPUT_PER_OUTPUT):
    return OrderInputs(
        input_amount=CurrencyAmount.from_decimal(WETH, inp),
        output_amount=CurrencyAmount.from_decimal(DAI, out),
        orientation=orientation,
    )


def _polygon_order(range_order=None):
    return OrderInputs(
        input_amount=CurrencyAmount.from_decimal(WMATIC, "100"),
        output_amount=CurrencyAmount.from_decimal(USDC, "100"),
        range_order=range_order,
    )


class TestAbsentInputs:
    def test_amounts_absent(self):
        oracle = _oracle()
        result = _calculator(oracle).calculate(OrderInputs(), 1)
        assert result.real_execution_price is None
        assert result.minimum_return is None
        assert result.slippage_percentage is None
        assert result.fee_percentage is None
        assert result.gas_price_display is None
        oracle.latest.assert_not_called()

    def test_chain_absent(self):
        result = _calculator().calculate(_mainnet_order(), None)
        assert result.chain is None
        assert result.minimum_return is None
        assert result.fee_percentage is None

    def test_no_gas_sample(self):
        result = _calculator(_oracle(None)).calculate(_mainnet_order(), 1)
        assert result.real_execution_price is None
        assert result.gas_price_display is None
        # Minimum return does not depend on gas
        assert result.minimum_return == CurrencyAmount.from_decimal(DAI, "2000")

    def test_no_oracle_or_quoter(self):
        calc = OrderEconomicsCalculator(gas_oracle=None, price_quoter=None, routing=_routing())
        result = calc.calculate(_mainnet_order(), 1)
        assert result.real_execution_price is None
        assert result.gas_price_display is None

    def test_no_routing(self):
        calc = OrderEconomicsCalculator(gas_oracle=_oracle(), price_quoter=None, routing=None)
        result = calc.calculate(_polygon_order(), 137)
        assert result.minimum_return is None
        assert result.slippage_percentage is None


class TestSimpleRoutingChain:
    def test_gas_price_and_real_rate(self):
        result = _calculator().calculate(_mainnet_order(), 1)
        assert isinstance(result.chain, SimpleRoutingChain)
        assert result.gas_price_display == "30"
        assert result.real_execution_price == "1 WETH = 2021.84 DAI"

    def test_inverted_rate(self):
        order = _mainnet_order(orientation=RateOrientation.OUTPUT_PER_INPUT)
        result = _calculator().calculate(order, 1)
        assert result.real_execution_price == "1 DAI = 0.0004946 WETH"

    def test_minimum_return_equals_output(self):
        order = _mainnet_order(out="100.0")
        result = _calculator().calculate(order, 1)
        assert result.minimum_return == order.output_amount
        assert result.slippage_percentage is None
        assert result.fee_percentage is None

    def test_never_executes(self):
        result = _calculator().calculate(_mainnet_order(inp="0.01", out="20"), 1)
        assert result.real_execution_price == NEVER_EXECUTES
        assert result.gas_price_display == "30"

    def test_no_min_return_query(self):
        routing = _routing()
        params = RangeOrderParams(POOL, True, 100, RECEIVER)
        order = OrderInputs(
            input_amount=CurrencyAmount.from_decimal(WETH, "1"),
            output_amount=CurrencyAmount.from_decimal(DAI, "2000"),
            range_order=params,
        )
        _calculator(routing=routing).calculate(order, 1)
        routing.get_min_return.assert_not_called()

    def test_custom_gas_limit(self):
        # 30 gwei * 100k = 0.003 ETH = 5.4 DAI -> 2000 * 2000 / 1994.6
        result = _calculator(execution_gas_limit=100_000).calculate(_mainnet_order(), 1)
        assert result.real_execution_price == "1 WETH = 2005.41 DAI"


class TestAdvancedRoutingChain:
    def test_fee_and_slippage(self):
        result = _calculator().calculate(_polygon_order(), 137)
        assert isinstance(result.chain, AdvancedRoutingChain)
        assert result.slippage_percentage == 0.5
        assert result.fee_percentage == 0.2

    def test_minimum_return_unknown_without_range_params(self):
        routing = _routing(min_return=123)
        result = _calculator(routing=routing).calculate(_polygon_order(), 137)
        assert result.minimum_return is None
        routing.get_min_return.assert_not_called()

    def test_minimum_return_from_query(self):
        routing = _routing(min_return=99_500_000)
        params = RangeOrderParams(POOL, False, -887220, RECEIVER, max_fee_amount=10 ** 15)
        result = _calculator(routing=routing).calculate(_polygon_order(params), 137)
        assert result.minimum_return == CurrencyAmount.from_raw_amount(USDC, 99_500_000)
        routing.get_min_return.assert_called_once_with(MinReturnQuery(
            pool=POOL,
            zero_for_one=False,
            tick_threshold=-887220,
            amount_in=100 * 10 ** 18,
            receiver=RECEIVER,
            max_fee_amount=10 ** 15,
        ))

    def test_failed_query_is_unknown(self):
        routing = _routing(min_return=None)
        params = RangeOrderParams(POOL, True, 10, RECEIVER)
        result = _calculator(routing=routing).calculate(_polygon_order(params), 137)
        assert result.minimum_return is None
        assert result.fee_percentage == 0.2

    def test_query_disabled(self):
        routing = _routing(min_return=1)
        params = RangeOrderParams(POOL, True, 10, RECEIVER)
        calc = _calculator(routing=routing, query_min_return=False)
        result = calc.calculate(_polygon_order(params), 137)
        assert result.minimum_return is None
        routing.get_min_return.assert_not_called()

    def test_routing_without_query_capability(self):
        class ConstantsOnly:
            slippage_bps = 40
            fee_bps = 2

        params = RangeOrderParams(POOL, True, 10, RECEIVER)
        calc = _calculator(routing=ConstantsOnly())
        result = calc.calculate(_polygon_order(params), 137)
        assert result.minimum_return is None
        assert result.fee_percentage == 0.02

    def test_explicit_min_return_skips_query(self):
        routing = _routing(min_return=1)
        params = RangeOrderParams(POOL, True, 10, RECEIVER)
        result = _calculator(routing=routing).calculate(_polygon_order(params), 137, min_return_raw=42)
        assert result.minimum_return.raw == 42
        routing.get_min_return.assert_not_called()

    def test_routing_without_query_support(self):
        class ConstantsOnly:
            slippage_bps = 40
            fee_bps = 2

        calc = OrderEconomicsCalculator(gas_oracle=_oracle(), price_quoter=None, routing=ConstantsOnly())
        params = RangeOrderParams(POOL, True, 10, RECEIVER)
        result = calc.calculate(_polygon_order(params), 137)
        assert result.minimum_return is None
        assert result.slippage_percentage == 0.4


class TestBranchSelection:
    def test_same_chain_same_branch(self):
        calc = _calculator()
        for chain_id in (1, 137):
            kinds = {type(calc.calculate(_polygon_order(), chain_id).chain) for _ in range(3)}
            assert len(kinds) == 1

    def test_idempotent(self):
        calc = _calculator()
        assert calc.calculate(_mainnet_order(), 1) == calc.calculate(_mainnet_order(), 1)

    def test_custom_simple_chain_ids(self):
        calc = _calculator(simple_chain_ids=[137])
        result = calc.calculate(_polygon_order(), 137)
        assert isinstance(result.chain, SimpleRoutingChain)
        assert result.fee_percentage is None

    def test_invalid_gas_limit(self):
        with pytest.raises(ValueError):
            _calculator(execution_gas_limit=0)


class TestToDict:
    def test_mainnet(self):
        data = _calculator().calculate(_mainnet_order(), 1).to_dict()
        assert data["chain_id"] == 1
        assert data["simple_routing"] is True
        assert data["real_execution_price"] == "1 WETH = 2021.84 DAI"
        assert data["minimum_return"] == "2000"
        assert data["minimum_return_symbol"] == "DAI"
        assert data["gas_price_gwei"] == "30"
        assert data["fee_percentage"] is None

    def test_empty(self):
        data = OrderEconomics().to_dict()
        assert all(v is None for v in data.values())


class TestBuildCalculator:
    def test_offline_config(self):
        cfg = Config(_env_file=None, allow_network=False, default_gas_gwei=25.0, fee_bps=5)
        calc = build_calculator(cfg)
        result = calc.calculate(_polygon_order(), 137)
        assert result.fee_percentage == 0.05
        assert result.slippage_percentage == 0.4
        # No network -> no native price quote for USDC
        assert result.real_execution_price is None

    def test_overrides(self):
        cfg = Config(_env_file=None, allow_network=False)
        quoter = StaticPriceQuoter({DAI.address: "1800"})
        calc = build_calculator(cfg, gas_oracle=_oracle(30), price_quoter=quoter)
        result = calc.calculate(_mainnet_order(), 1)
        assert result.real_execution_price == "1 WETH = 2021.84 DAI"
