"""
Range-order library client: fixed fee/slippage constants plus the on-chain
minimum-return query (eth_call against the range-order contract).

The query is read-only and best-effort. Any transport or decoding failure is
logged and reported as None so the caller shows the minimum return as
unknown instead of stalling or showing zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, is_address, to_checksum_address

logger = logging.getLogger(__name__)

_TIMEOUT = 5.0

# Protocol constants, basis points
SLIPPAGE_BPS = 40
FEE_BPS = 2

_MIN_RETURN_ARGS = "(address,bool,int24,uint256,address,uint256)"
MIN_RETURN_SIGNATURE = f"getMinReturn({_MIN_RETURN_ARGS})"


@dataclass(frozen=True)
class MinReturnQuery:
    pool: str
    zero_for_one: bool
    tick_threshold: int
    amount_in: int
    receiver: str
    max_fee_amount: int = 0


def encode_min_return_call(query: MinReturnQuery) -> str:
    """ABI-encoded calldata (0x-prefixed hex) for getMinReturn."""
    selector = function_signature_to_4byte_selector(MIN_RETURN_SIGNATURE)
    args = encode(
        [_MIN_RETURN_ARGS],
        [(
            to_checksum_address(query.pool),
            query.zero_for_one,
            query.tick_threshold,
            query.amount_in,
            to_checksum_address(query.receiver),
            query.max_fee_amount,
        )],
    )
    return "0x" + (selector + args).hex()


class RangeOrderLibrary:
    """Satisfies economics.returns.RoutingConstants."""

    def __init__(
        self,
        rpc_url: str = "https://polygon-rpc.com",
        contract_address: str = "",
        slippage_bps: int = SLIPPAGE_BPS,
        fee_bps: int = FEE_BPS,
        timeout: float = _TIMEOUT,
        allow_network: bool = False,
    ):
        if contract_address and not is_address(contract_address):
            raise ValueError(f"range-order contract is not a valid address: {contract_address!r}")
        self._rpc_url = rpc_url
        self._contract_address = contract_address
        self._slippage_bps = slippage_bps
        self._fee_bps = fee_bps
        self._timeout = timeout
        self._allow_network = allow_network

    @property
    def slippage_bps(self) -> int:
        return self._slippage_bps

    @property
    def fee_bps(self) -> int:
        return self._fee_bps

    def get_min_return(self, query: MinReturnQuery) -> int | None:
        """Raw minimum return in the output token, or None when the query could not run."""
        if not self._contract_address or not self._allow_network:
            return None

        calldata = encode_min_return_call(query)
        payload = {
            "jsonrpc": "2.0",
            "method": "eth_call",
            "params": [{"to": to_checksum_address(self._contract_address), "data": calldata}, "latest"],
            "id": 1,
        }
        try:
            resp = httpx.post(self._rpc_url, json=payload, timeout=self._timeout)
            resp.raise_for_status()
            body = resp.json()
            if "error" in body:
                logger.warning("getMinReturn reverted: %s", body["error"])
                return None
            result = body["result"]
            if not isinstance(result, str):
                logger.warning("getMinReturn returned a non-hex result: %r", result)
                return None
            (min_return,) = decode(["uint256"], bytes.fromhex(result.removeprefix("0x")))
        except (httpx.HTTPError, DecodingError, KeyError, TypeError, ValueError) as e:
            logger.warning("getMinReturn query failed: %s", e)
            return None

        logger.debug("getMinReturn(pool=%s, amount_in=%d) = %d", query.pool, query.amount_in, min_return)
        return int(min_return)
