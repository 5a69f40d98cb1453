"""
Chain-family classification and per-chain native assets.

Ethereum mainnet and its testnets settle limit orders through a relayer that
charges fee and slippage at execution time ("simple routing"). Every other
supported chain routes range orders through tick-threshold pools ("advanced
routing") with fixed fee/slippage constants.
"""

from __future__ import annotations

from typing import Iterable

from economics.amounts import Currency
from economics.models import AdvancedRoutingChain, ChainContext, SimpleRoutingChain

# mainnet, ropsten, rinkeby, goerli, kovan
DEFAULT_SIMPLE_ROUTING_CHAIN_IDS: frozenset[int] = frozenset({1, 3, 4, 5, 42})

NATIVE_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

_NATIVE_SYMBOLS = {
    1: "ETH",
    3: "ETH",
    4: "ETH",
    5: "ETH",
    42: "ETH",
    56: "BNB",
    137: "MATIC",
    250: "FTM",
    43114: "AVAX",
}

WRAPPED_NATIVE = {
    1: "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    3: "0xc778417E063141139Fce010982780140Aa0cD5Ab",
    4: "0xc778417E063141139Fce010982780140Aa0cD5Ab",
    5: "0xB4FBF271143F4FBf7B91A5ded31805e42b2208d6",
    42: "0xd0A1E359811322d97991E03f863a0C30C2cF029C",
    56: "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
    137: "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
    250: "0x21be370D5312f44cB42ce377BC9b8a0cEF1A4C83",
    43114: "0xB31f66AA3C1e785363F0875A1B74E27b85FD66c7",
}


def is_simple_routing_chain(
    chain_id: int,
    simple_chain_ids: Iterable[int] = DEFAULT_SIMPLE_ROUTING_CHAIN_IDS,
) -> bool:
    return chain_id in frozenset(simple_chain_ids)


def resolve_chain(
    chain_id: int | None,
    simple_chain_ids: Iterable[int] = DEFAULT_SIMPLE_ROUTING_CHAIN_IDS,
) -> ChainContext | None:
    """Classify a chain once; callers pass the result around instead of re-testing."""
    if chain_id is None:
        return None
    if is_simple_routing_chain(chain_id, simple_chain_ids):
        return SimpleRoutingChain(chain_id)
    return AdvancedRoutingChain(chain_id)


def native_currency(chain_id: int) -> Currency:
    """Gas-paying asset of *chain_id*. Unknown chains fall back to an 18-decimal ETH."""
    return Currency(
        chain_id=chain_id,
        address=NATIVE_ADDRESS,
        decimals=18,
        symbol=_NATIVE_SYMBOLS.get(chain_id, "ETH"),
        is_native=True,
    )


def is_native_or_wrapped(currency: Currency) -> bool:
    if currency.is_native:
        return True
    wrapped = WRAPPED_NATIVE.get(currency.chain_id)
    return wrapped is not None and wrapped.lower() == currency.address.lower()
