"""Load executed trades from CSV exports.

Expected columns: id, side, price, qty, fee, timestamp and an optional
currency. Timestamps are ISO 8601 strings or epoch milliseconds; all of
them are converted to aware UTC.
"""

import csv
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path

from gridpnl import Price, SideType, Trade, Volume

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "side", "price", "qty", "fee", "timestamp")
DEFAULT_CURRENCY = "BASE"

_SIDES = {"buy": SideType.BUY, "sell": SideType.SELL}


def to_utc(dt: datetime) -> datetime:
    """Convert any datetime to aware UTC.

    Naive values are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 string or epoch milliseconds."""
    value = value.strip()
    if value.isdigit():
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(value))


def _parse_row(row: dict[str, str], default_currency: str) -> Trade:
    blank = [c for c in REQUIRED_COLUMNS if c != "fee" and not (row.get(c) or "").strip()]
    if blank:
        raise ValueError(f"empty values for {blank}")

    side = _SIDES.get(row["side"].strip().lower())
    if side is None:
        raise ValueError(f"side must be Buy or Sell, got {row['side']!r}")

    timestamp = parse_timestamp(row["timestamp"])
    try:
        price = Decimal(row["price"])
        qty = Decimal(row["qty"])
        fee = Decimal(row["fee"] or "0")
    except InvalidOperation as e:
        raise ValueError(f"invalid number: {e}") from e

    return Trade(
        trade_id=row["id"].strip(),
        side=side,
        price=Price(value=price, timestamp=timestamp),
        volume=Volume(amount=qty, currency=(row.get("currency") or default_currency).strip()),
        fee=fee,
        timestamp=timestamp,
    )


def load_trades(path: str | Path, default_currency: str = DEFAULT_CURRENCY) -> list[Trade]:
    """Read trades from a CSV file, sorted by timestamp.

    Args:
        path: CSV file path
        default_currency: Volume currency when the row has none

    Returns:
        Trades sorted by timestamp (stable for equal timestamps)

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a column is missing or a row is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Trades file not found: {path}")

    trades = []
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path}: missing columns {missing}")

        # line 1 is the header
        for line_no, row in enumerate(reader, start=2):
            try:
                trades.append(_parse_row(row, default_currency))
            except ValueError as e:
                raise ValueError(f"{path}:{line_no}: {e}") from e

    trades.sort(key=lambda t: t.timestamp)
    logger.info("Loaded %d trades from %s", len(trades), path)
    return trades
