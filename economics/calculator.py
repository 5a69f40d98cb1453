"""
Order economics: wires the gas oracle, native price quoter and range-order
library into the two pure calculators.

Every call recomputes from scratch. Collaborators may return None (no gas
sample yet, no price quote, query failed) and the matching output fields are
then unknown; nothing here retries or raises for missing data.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Protocol, runtime_checkable

from client.gas import GasOracle
from client.prices import CoinGeckoPriceQuoter, NativePriceQuoter
from client.range_orders import MinReturnQuery, RangeOrderLibrary
from economics.chains import DEFAULT_SIMPLE_ROUTING_CHAIN_IDS, resolve_chain
from economics.gas_overhead import (
    DEFAULT_EXECUTION_GAS_LIMIT,
    estimate_gas_overhead,
    format_execution_rate,
)
from economics.models import (
    AdvancedRoutingChain,
    ChainContext,
    GasSample,
    OrderEconomics,
    OrderInputs,
)
from economics.returns import RoutingConstants, calculate_return_and_fees

if TYPE_CHECKING:
    from config import Config

logger = logging.getLogger(__name__)


class GasSampleSource(Protocol):
    def latest(self) -> GasSample | None:
        ...


@runtime_checkable
class MinReturnSource(Protocol):
    """Routing handle that can also answer the on-chain minimum-return query."""

    def get_min_return(self, query: MinReturnQuery) -> int | None:
        ...


class OrderEconomicsCalculator:
    def __init__(
        self,
        gas_oracle: GasSampleSource | None,
        price_quoter: NativePriceQuoter | None,
        routing: RoutingConstants | None,
        simple_chain_ids: Iterable[int] = DEFAULT_SIMPLE_ROUTING_CHAIN_IDS,
        execution_gas_limit: int = DEFAULT_EXECUTION_GAS_LIMIT,
        query_min_return: bool = True,
    ):
        if execution_gas_limit <= 0:
            raise ValueError(f"execution_gas_limit must be positive, got {execution_gas_limit}")
        self._gas_oracle = gas_oracle
        self._price_quoter = price_quoter
        self._routing = routing
        self._simple_chain_ids = frozenset(simple_chain_ids)
        self._execution_gas_limit = execution_gas_limit
        self._query_min_return = query_min_return

    def resolve_chain(self, chain_id: int | None) -> ChainContext | None:
        return resolve_chain(chain_id, self._simple_chain_ids)

    def calculate(
        self,
        order: OrderInputs,
        chain_id: int | None,
        min_return_raw: int | str | None = None,
    ) -> OrderEconomics:
        """
        Compute display-ready economics for *order* on *chain_id*.

        *min_return_raw* overrides the on-chain minimum-return query, e.g. when
        the caller already holds a fresh result.
        """
        chain = self.resolve_chain(chain_id)
        input_amount = order.input_amount
        output_amount = order.output_amount

        if input_amount is None or output_amount is None:
            gas_sample = None
            native_price = None
        else:
            gas_sample = self._gas_oracle.latest() if self._gas_oracle else None
            native_price = None
            if gas_sample is not None and self._price_quoter is not None:
                native_price = self._price_quoter.native_price(output_amount.currency)

        overhead = estimate_gas_overhead(
            input_amount,
            output_amount,
            order.orientation,
            gas_sample,
            native_price,
            self._execution_gas_limit,
        )
        rate = format_execution_rate(
            overhead,
            input_amount.currency if input_amount else None,
            output_amount.currency if output_amount else None,
            order.orientation,
        )

        if min_return_raw is None and isinstance(chain, AdvancedRoutingChain):
            min_return_raw = self._fetch_min_return(order)

        returns = calculate_return_and_fees(output_amount, chain, self._routing, min_return_raw)

        return OrderEconomics(
            real_execution_price=rate,
            minimum_return=returns.minimum_return,
            slippage_percentage=returns.slippage_percentage,
            fee_percentage=returns.fee_percentage,
            gas_price_display=overhead.gas_price_display,
            chain=chain,
        )

    def _fetch_min_return(self, order: OrderInputs) -> int | None:
        if not self._query_min_return or order.range_order is None or order.input_amount is None:
            return None
        if not isinstance(self._routing, MinReturnSource):
            return None
        params = order.range_order
        return self._routing.get_min_return(MinReturnQuery(
            pool=params.pool,
            zero_for_one=params.zero_for_one,
            tick_threshold=params.tick_threshold,
            amount_in=order.input_amount.raw,
            receiver=params.receiver,
            max_fee_amount=params.max_fee_amount,
        ))


def build_calculator(
    cfg: Config,
    gas_oracle: GasSampleSource | None = None,
    price_quoter: NativePriceQuoter | None = None,
) -> OrderEconomicsCalculator:
    """
    Calculator backed by live collaborators configured from *cfg*.
    *gas_oracle* and *price_quoter* replace the configured ones when given.
    """
    gas_oracle = gas_oracle or GasOracle(
        rpc_url=cfg.rpc_url,
        cache_sec=cfg.gas_cache_sec,
        max_stale_sec=cfg.gas_max_stale_sec,
        default_gas_gwei=cfg.default_gas_gwei,
        allow_network=cfg.allow_network,
    )
    quoter = price_quoter or CoinGeckoPriceQuoter(
        host=cfg.coingecko_host,
        cache_sec=cfg.price_cache_sec,
        allow_network=cfg.allow_network,
    )
    routing = RangeOrderLibrary(
        rpc_url=cfg.rpc_url,
        contract_address=cfg.range_order_address,
        slippage_bps=cfg.slippage_bps,
        fee_bps=cfg.fee_bps,
        timeout=cfg.min_return_timeout_sec,
        allow_network=cfg.allow_network,
    )
    logger.debug(
        "Calculator: rpc=%s network=%s simple_chains=%s",
        cfg.rpc_url, cfg.allow_network, sorted(cfg.simple_routing_chain_ids),
    )
    return OrderEconomicsCalculator(
        gas_oracle=gas_oracle,
        price_quoter=quoter,
        routing=routing,
        simple_chain_ids=cfg.simple_routing_chain_ids,
        execution_gas_limit=cfg.execution_gas_limit,
        query_min_return=cfg.query_min_return,
    )
