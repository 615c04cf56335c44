"""Trade filters applied before analytics.

Recognized options:
- symbol: restrict to one instrument (case-insensitive)
- date_range: restrict to trades whose exit time falls in [start, end]
- direction: restrict to long or short

An unset option means no restriction.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from trade_analytics.domain.errors import InvalidTradeData
from trade_analytics.domain.models import ClosedTrade, Direction, ensure_utc


def _lower_key(bound: date) -> datetime:
    if isinstance(bound, datetime):
        return ensure_utc(bound)
    return datetime.combine(bound, time.min, tzinfo=timezone.utc)


def _upper_key(bound: date) -> datetime:
    if isinstance(bound, datetime):
        return ensure_utc(bound)
    return datetime.combine(bound, time.max, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive exit-time window.

    Bounds may be dates (matched against the UTC exit date) or datetimes
    (naive values are taken as UTC). Either bound may be None.
    """

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None:
            if _lower_key(self.start) > _upper_key(self.end):
                raise ValueError(f"date range start {self.start} is after end {self.end}")

    def contains(self, moment: datetime) -> bool:
        """Check whether a timestamp falls inside the window."""
        moment = ensure_utc(moment)
        if self.start is not None and moment < _lower_key(self.start):
            return False
        if self.end is not None and moment > _upper_key(self.end):
            return False
        return True

    def __str__(self) -> str:
        start = self.start.isoformat() if self.start is not None else "..."
        end = self.end.isoformat() if self.end is not None else "..."
        return f"{start} to {end}"


@dataclass(frozen=True, slots=True)
class TradeFilters:
    """Restrictions applied to closed trades before aggregation.

    Example:
        >>> filters = TradeFilters(symbol="AAPL", direction="long")
        >>> filters.matches(trade)
        True
    """

    symbol: str | None = None
    date_range: DateRange | None = None
    direction: Direction | None = None

    def __post_init__(self) -> None:
        if self.symbol is not None:
            symbol = self.symbol.strip()
            object.__setattr__(self, "symbol", symbol or None)
        if self.direction is not None and not isinstance(self.direction, Direction):
            try:
                object.__setattr__(self, "direction", Direction.parse(self.direction))
            except InvalidTradeData as e:
                raise ValueError(str(e)) from None

    @property
    def is_empty(self) -> bool:
        """True when no restriction is set."""
        return self.symbol is None and self.date_range is None and self.direction is None

    def matches(self, trade: ClosedTrade) -> bool:
        """Check whether a closed trade passes every set restriction."""
        if self.symbol is not None and trade.symbol.upper() != self.symbol.upper():
            return False
        if self.direction is not None and trade.direction is not self.direction:
            return False
        if self.date_range is not None and not self.date_range.contains(trade.exit_time):
            return False
        return True

    def describe(self) -> str:
        """Human-readable summary for logs and CLI output."""
        if self.is_empty:
            return "all trades"
        parts = []
        if self.symbol is not None:
            parts.append(f"symbol={self.symbol}")
        if self.direction is not None:
            parts.append(f"direction={self.direction.value}")
        if self.date_range is not None:
            parts.append(f"exit={self.date_range}")
        return ", ".join(parts)


NO_FILTERS = TradeFilters()
