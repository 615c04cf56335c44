"""Ledger: The ordered, append-only collection of recorded trades.

The ledger is the system of record the analytics engine reads from.
It is an explicitly owned value, passed into the engine rather than
held as shared state.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from trade_analytics.domain.errors import DuplicateTradeId, InvalidTradeData
from trade_analytics.domain.models import TRADE_TYPES, ClosedTrade, OpenTrade, Trade


class Ledger:
    """Ordered collection of trades keyed by unique id.

    Insertion order is preserved and is treated as chronological entry
    order, but it is never assumed to be sorted by time.

    Example:
        >>> ledger = Ledger([trade_a, trade_b])
        >>> ledger.closed_trades()
        (trade_a,)
        >>> ledger = ledger.append(trade_c)
    """

    __slots__ = ("_trades", "_index")

    def __init__(self, trades: Iterable[Trade] = ()):
        """Build a ledger.

        Args:
            trades: Trades in insertion order

        Raises:
            DuplicateTradeId: If two trades share an id
            InvalidTradeData: If an element is not a trade
        """
        ordered: list[Trade] = []
        index: dict[str, Trade] = {}
        for trade in trades:
            if not isinstance(trade, TRADE_TYPES):
                raise InvalidTradeData(
                    f"ledger entries must be OpenTrade or ClosedTrade, got: "
                    f"{type(trade).__name__}"
                )
            if trade.id in index:
                raise DuplicateTradeId(trade.id)
            index[trade.id] = trade
            ordered.append(trade)

        self._trades: tuple[Trade, ...] = tuple(ordered)
        self._index = index

    def all_trades(self) -> tuple[Trade, ...]:
        """All trades in insertion order."""
        return self._trades

    def closed_trades(self) -> tuple[ClosedTrade, ...]:
        """Closed trades only, in insertion order."""
        return tuple(t for t in self._trades if isinstance(t, ClosedTrade))

    def open_trades(self) -> tuple[OpenTrade, ...]:
        """Open trades only, in insertion order."""
        return tuple(t for t in self._trades if isinstance(t, OpenTrade))

    def get(self, trade_id: str) -> Trade | None:
        """Look up a trade by id."""
        return self._index.get(trade_id)

    def symbols(self) -> list[str]:
        """Sorted unique symbols across all trades."""
        return sorted({t.symbol for t in self._trades})

    def append(self, trade: Trade) -> Ledger:
        """Return a new ledger with ``trade`` added at the end.

        Raises:
            DuplicateTradeId: If the id is already recorded
        """
        return Ledger((*self._trades, trade))

    def __len__(self) -> int:
        return len(self._trades)

    def __iter__(self) -> Iterator[Trade]:
        return iter(self._trades)

    def __contains__(self, trade_id: object) -> bool:
        return trade_id in self._index

    def __repr__(self) -> str:
        closed = sum(1 for t in self._trades if isinstance(t, ClosedTrade))
        return f"Ledger(trades={len(self._trades)}, closed={closed})"
