"""
Integer helpers for raw on-chain token amounts.

Raw amounts stay Python ints end to end. They only become strings at the
JSON and log boundaries.
"""
import logging
from decimal import Decimal, localcontext
from typing import Any

logger = logging.getLogger(__name__)

# Sentinel stored in place of a balance whose fetch failed
BALANCE_ERROR = "Error"

DEFAULT_DECIMALS = 18


def safe_int_conversion(value: Any, default: int = 0) -> int:
    """
    Convert a raw amount to int without ever raising.

    Args:
        value: Decimal or 0x-prefixed hex string, int, None or the
            BALANCE_ERROR sentinel
        default: Value returned when the input is missing or unparseable

    Returns:
        The parsed integer, or `default`
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        logger.warning(
            f"Cannot convert {type(value).__name__} value {value!r} to int, "
            f"using {default}"
        )
        return default

    text = value.strip()
    if not text or text == BALANCE_ERROR:
        return default

    try:
        # int() accepts "1_000", raw amounts never carry separators
        if "_" in text:
            raise ValueError("digit separators are not allowed")
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text, 10)
    except ValueError as e:
        logger.warning(f"Cannot convert {value!r} to int ({e}), using {default}")
        return default


def format_token_balance(raw_balance: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render a raw base-unit amount as a human-readable token amount."""
    with localcontext() as ctx:
        ctx.prec = 100
        amount = Decimal(raw_balance).scaleb(-decimals).normalize()
        return format(amount, "f")
