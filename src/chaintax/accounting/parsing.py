"""Safe parsing for provider fields. Malformed input yields a default, never an exception."""

import logging
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, Overflow

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 18
# ERC-20 decimals is a uint8
MAX_DECIMALS = 255

# Below this a numeric timestamp is unix seconds, at or above it unix milliseconds
MILLISECONDS_THRESHOLD = 10_000_000_000

_NUMERIC_RE = re.compile(r"^\d+(\.\d+)?$")


def parse_int(value: str | int | None, default: int) -> int:
    if value is None:
        return default
    raw = str(value).strip()
    try:
        return int(raw, 16) if raw.lower().startswith("0x") else int(raw)
    except ValueError:
        return default


def parse_decimals(value: str | int | None) -> int:
    decimals = parse_int(value, DEFAULT_DECIMALS)
    if 0 <= decimals <= MAX_DECIMALS:
        return decimals
    logger.warning("Invalid token decimals %r, using %d", value, DEFAULT_DECIMALS)
    return DEFAULT_DECIMALS


def parse_base_units(value: str | None) -> Decimal:
    """Integer token amount in base units (decimal or 0x-hex string). Malformed or negative → 0."""
    if value is None or not str(value).strip():
        return Decimal(0)
    raw = str(value).strip()
    try:
        units = Decimal(int(raw, 16)) if raw.lower().startswith("0x") else Decimal(raw)
    except (ValueError, InvalidOperation):
        logger.warning("Unparseable token value %r, using 0", value)
        return Decimal(0)
    if not units.is_finite() or units < 0:
        logger.warning("Invalid token value %r, using 0", value)
        return Decimal(0)
    return units


def parse_usd(value: str | None) -> Decimal:
    if value is None or not str(value).strip():
        return Decimal(0)
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal(0)
    return parsed if parsed.is_finite() else Decimal(0)


def token_amount(value: str | None, decimals: int) -> Decimal:
    units = parse_base_units(value)
    try:
        return units / (Decimal(10) ** decimals)
    except (Overflow, InvalidOperation):
        logger.warning("Cannot scale %r by %r decimals, using 0", value, decimals)
        return Decimal(0)


def parse_timestamp(value: str | None, now: datetime | None = None) -> tuple[datetime, bool]:
    """Normalize a block timestamp to an aware UTC datetime.

    Accepts unix seconds, unix milliseconds (numeric strings) or ISO-8601.
    Missing or malformed input falls back to ``now`` (wall clock by default);
    the second element of the result is True when that fallback was used.
    """
    fallback = now or datetime.now(timezone.utc)
    if value is None or not str(value).strip():
        return fallback, True

    raw = str(value).strip()
    try:
        if _NUMERIC_RE.match(raw):
            number = float(raw)
            seconds = number if number < MILLISECONDS_THRESHOLD else number / 1000
            return datetime.fromtimestamp(seconds, tz=timezone.utc), False

        parsed = datetime.fromisoformat(raw)
    except (ValueError, OverflowError, OSError):
        return fallback, True

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc), False
