"""
Gas price oracle. Queries the chain RPC for eth_gasPrice and caches the
sample to avoid hammering the endpoint.

No sample is a normal state (offline, RPC down, first read still pending):
callers get None and show the price as unknown.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal

import httpx

from economics.models import GasSample

logger = logging.getLogger(__name__)

_TIMEOUT = 5.0


class GasOracle:
    """
    Cached gas price oracle.
    Queries a JSON-RPC endpoint with configurable cache TTL.
    """

    def __init__(
        self,
        rpc_url: str = "https://cloudflare-eth.com",
        cache_sec: float = 10.0,
        max_stale_sec: float = 60.0,
        default_gas_gwei: float | None = None,
        allow_network: bool = False,
        timeout: float = _TIMEOUT,
    ):
        self._rpc_url = rpc_url
        self._cache_sec = cache_sec
        self._max_stale_sec = max_stale_sec
        self._default_gas_gwei = default_gas_gwei
        self._allow_network = allow_network
        self._timeout = timeout

        self._cached: GasSample | None = None

    def latest(self) -> GasSample | None:
        """Return the current gas sample, or None when no price is known."""
        now = time.time()
        if self._cached is not None and (now - self._cached.sampled_at) < self._cache_sec:
            return self._cached
        if not self._allow_network:
            return self._default_sample(now)

        try:
            resp = httpx.post(
                self._rpc_url,
                json={"jsonrpc": "2.0", "method": "eth_gasPrice", "params": [], "id": 1},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            wei = int(resp.json()["result"], 16)
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning("Gas price fetch failed: %s", e)
            return self._fallback(now)

        sample = GasSample(gas_price_wei=wei, sampled_at=now)
        self._cached = sample
        logger.debug("Gas price: %.1f gwei", wei / 1e9)
        return sample

    def get_gas_price_gwei(self) -> float | None:
        sample = self.latest()
        return sample.gas_price_wei / 1e9 if sample else None

    def _fallback(self, now: float) -> GasSample | None:
        if self._cached is not None and (now - self._cached.sampled_at) < self._max_stale_sec:
            logger.debug("Using stale gas sample from %.0fs ago", now - self._cached.sampled_at)
            return self._cached
        return self._default_sample(now)

    def _default_sample(self, now: float) -> GasSample | None:
        if self._default_gas_gwei is None:
            return None
        wei = int(Decimal(str(self._default_gas_gwei)).scaleb(9))
        return GasSample(gas_price_wei=wei, sampled_at=now)
