"""
Native-asset price quotes, used to express gas cost in an order's output
token. CoinGecko USD prices, cached; or a fixed table for offline use.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Mapping, Protocol, runtime_checkable

import httpx

from economics.amounts import Currency, Price
from economics.chains import is_native_or_wrapped, native_currency

logger = logging.getLogger(__name__)

_TIMEOUT = 5.0

# chain id -> (CoinGecko asset platform, CoinGecko id of the native coin)
COINGECKO_CHAINS: dict[int, tuple[str, str]] = {
    1: ("ethereum", "ethereum"),
    56: ("binance-smart-chain", "binancecoin"),
    137: ("polygon-pos", "polygon-ecosystem-token"),
    250: ("fantom", "fantom"),
    43114: ("avalanche", "avalanche-2"),
}


@runtime_checkable
class NativePriceQuoter(Protocol):
    def native_price(self, currency: Currency) -> Price | None:
        """Price of the chain's native asset in *currency* (base = native), or None."""
        ...


def identity_price(currency: Currency) -> Price:
    """1 native = 1 *currency*, for the native asset and its wrapped token."""
    native = native_currency(currency.chain_id)
    return Price.from_adjusted(native, currency, 1)


class StaticPriceQuoter:
    """Fixed rates keyed by token address: units of the token per native coin."""

    def __init__(self, rates: Mapping[str, Decimal | float | str]):
        self._rates = {addr.lower(): Decimal(str(rate)) for addr, rate in rates.items()}

    def native_price(self, currency: Currency) -> Price | None:
        if is_native_or_wrapped(currency):
            return identity_price(currency)
        rate = self._rates.get(currency.address.lower())
        if rate is None or rate <= 0:
            return None
        return Price.from_adjusted(native_currency(currency.chain_id), currency, rate)


class CoinGeckoPriceQuoter:
    """
    Native/token cross rate from CoinGecko USD prices.
    Each USD price is cached for *cache_sec*; failures return None.
    """

    def __init__(
        self,
        host: str = "https://api.coingecko.com/api/v3",
        cache_sec: float = 30.0,
        allow_network: bool = False,
        timeout: float = _TIMEOUT,
    ):
        self._host = host.rstrip("/")
        self._cache_sec = cache_sec
        self._allow_network = allow_network
        self._timeout = timeout
        self._cache: dict[str, tuple[Decimal, float]] = {}

    def native_price(self, currency: Currency) -> Price | None:
        if is_native_or_wrapped(currency):
            return identity_price(currency)
        ids = COINGECKO_CHAINS.get(currency.chain_id)
        if ids is None:
            logger.debug("No CoinGecko mapping for chain %d", currency.chain_id)
            return None
        platform, native_id = ids

        native_usd = self._native_usd(native_id)
        if native_usd is None or native_usd <= 0:
            return None
        token_usd = self._token_usd(platform, currency.address)
        if token_usd is None or token_usd <= 0:
            return None
        return Price.from_adjusted(native_currency(currency.chain_id), currency, native_usd / token_usd)

    def _cached(self, key: str) -> Decimal | None:
        hit = self._cache.get(key)
        if hit is not None and (time.time() - hit[1]) < self._cache_sec:
            return hit[0]
        return None

    def _native_usd(self, native_id: str) -> Decimal | None:
        key = f"native:{native_id}"
        cached = self._cached(key)
        if cached is not None:
            return cached
        if not self._allow_network:
            return None
        try:
            resp = httpx.get(
                f"{self._host}/simple/price",
                params={"ids": native_id, "vs_currencies": "usd"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            price = Decimal(str(resp.json()[native_id]["usd"]))
        except (httpx.HTTPError, KeyError, TypeError, ValueError, ArithmeticError) as e:
            logger.warning("%s/USD fetch failed: %s", native_id, e)
            return None
        self._cache[key] = (price, time.time())
        logger.debug("%s/USD: $%s", native_id, price)
        return price

    def _token_usd(self, platform: str, address: str) -> Decimal | None:
        addr = address.lower()
        key = f"token:{platform}:{addr}"
        cached = self._cached(key)
        if cached is not None:
            return cached
        if not self._allow_network:
            return None
        try:
            resp = httpx.get(
                f"{self._host}/simple/token_price/{platform}",
                params={"contract_addresses": addr, "vs_currencies": "usd"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            price = Decimal(str(resp.json()[addr]["usd"]))
        except (httpx.HTTPError, KeyError, TypeError, ValueError, ArithmeticError) as e:
            logger.warning("Token %s USD fetch failed: %s", addr, e)
            return None
        self._cache[key] = (price, time.time())
        logger.debug("Token %s/USD: $%s", addr, price)
        return price
