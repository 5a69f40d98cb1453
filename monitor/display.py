"""
Clean, scannable console output for order economics.

Pure formatting functions that emit structured log lines using box-drawing
characters. No side effects beyond logging. All data arrives via arguments.
"""

from __future__ import annotations

import logging

from economics.details import DetailRow
from economics.models import ChainContext, OrderInputs, SimpleRoutingChain

logger = logging.getLogger(__name__)

# Box-drawing characters
_TOP = "\u250c"  # ┌
_MID = "\u2502"  # │
_BOT = "\u2514"  # └
_DASH = "\u2500"  # ─

_MAX_VALUE_LEN = 48


def _truncate(text: str, length: int = _MAX_VALUE_LEN) -> str:
    """Truncate text to *length* chars, appending ellipsis if trimmed."""
    if len(text) <= length:
        return text
    return text[: length - 1] + "\u2026"


def _chain_label(chain: ChainContext | None) -> str:
    if chain is None:
        return "no chain"
    family = "simple" if isinstance(chain, SimpleRoutingChain) else "advanced"
    return f"chain {chain.chain_id} ({family} routing)"


def _order_label(order: OrderInputs) -> str:
    """Return e.g. '1.5 WETH -> 2800 USDC'."""
    left = str(order.input_amount) if order.input_amount else "-"
    right = str(order.output_amount) if order.output_amount else "-"
    return f"{left} -> {right}"


def print_economics(rows: list[DetailRow], order: OrderInputs, chain: ChainContext | None) -> None:
    """Emit the boxed details panel for one order."""
    logger.info("  %s %s  [%s]", _TOP, _order_label(order), _chain_label(chain))
    if not rows:
        logger.info("  %s No details (wallet not connected to a chain)", _BOT)
        return

    width = max(len(r.label) for r in rows)
    logger.info("  %s", _MID)
    for row in rows:
        logger.info("  %s  %-*s  %s", _MID, width, row.label, _truncate(row.value))
    logger.info("  %s%s", _BOT, _DASH * (width + 4))
