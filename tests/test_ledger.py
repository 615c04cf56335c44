"""Unit tests for the Ledger and trade filters."""

from datetime import date, datetime, timezone

import pytest

from trade_analytics.domain import (
    ClosedTrade,
    DateRange,
    Direction,
    DuplicateTradeId,
    InvalidTradeData,
    Ledger,
    OpenTrade,
    TradeFilters,
)


def _closed(trade_id: str, symbol: str = "AAPL", exit_day: int = 16, **overrides) -> ClosedTrade:
    fields = dict(
        id=trade_id, symbol=symbol, direction=Direction.LONG,
        entry_price=100.0, exit_price=110.0, quantity=1,
        entry_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        exit_time=datetime(2024, 1, exit_day, 15, 0, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return ClosedTrade(**fields)


def _open(trade_id: str, symbol: str = "TSLA") -> OpenTrade:
    return OpenTrade(
        id=trade_id, symbol=symbol, direction=Direction.SHORT,
        entry_price=50.0, quantity=2,
        entry_time=datetime(2024, 1, 2, tzinfo=timezone.utc),
    )


class TestLedger:
    """Tests for Ledger."""

    def test_insertion_order(self):
        """Trades keep insertion order, not time order."""
        ledger = Ledger([_closed("b", exit_day=20), _closed("a", exit_day=10)])
        assert [t.id for t in ledger.all_trades()] == ["b", "a"]

    def test_open_and_closed(self):
        """Open and closed views keep ledger order."""
        ledger = Ledger([_closed("c1"), _open("o1"), _closed("c2")])
        assert [t.id for t in ledger.closed_trades()] == ["c1", "c2"]
        assert [t.id for t in ledger.open_trades()] == ["o1"]
        assert len(ledger) == 3

    def test_duplicate_id(self):
        """A repeated id raises DuplicateTradeId."""
        with pytest.raises(DuplicateTradeId, match="'c1'"):
            Ledger([_closed("c1"), _open("c1")])

    def test_rejects_non_trade(self):
        """Non-trade entries are rejected."""
        with pytest.raises(InvalidTradeData, match="ledger entries"):
            Ledger([{"id": "c1"}])

    def test_append_returns_new_ledger(self):
        """append() leaves the original ledger unchanged."""
        ledger = Ledger([_closed("c1")])
        extended = ledger.append(_open("o1"))

        assert len(ledger) == 1
        assert len(extended) == 2
        assert "o1" in extended
        assert "o1" not in ledger

    def test_append_duplicate(self):
        """Appending an existing id raises DuplicateTradeId."""
        ledger = Ledger([_closed("c1")])
        with pytest.raises(DuplicateTradeId):
            ledger.append(_closed("c1"))

    def test_get(self):
        """get() finds a trade by id or returns None."""
        ledger = Ledger([_closed("c1"), _open("o1")])
        assert ledger.get("o1").symbol == "TSLA"
        assert ledger.get("missing") is None

    def test_symbols(self):
        """symbols() is sorted and unique."""
        ledger = Ledger([_closed("c1", "MSFT"), _open("o1", "AAPL"), _closed("c2", "MSFT")])
        assert ledger.symbols() == ["AAPL", "MSFT"]

    def test_empty(self):
        """An empty ledger has no closed trades."""
        ledger = Ledger()
        assert len(ledger) == 0
        assert ledger.closed_trades() == ()

    def test_repr(self):
        """repr shows total and closed counts."""
        assert repr(Ledger([_closed("c1"), _open("o1")])) == "Ledger(trades=2, closed=1)"


class TestDateRange:
    """Tests for DateRange."""

    def test_date_bounds_inclusive(self):
        """Date bounds cover the whole first and last day."""
        window = DateRange(start=date(2024, 1, 10), end=date(2024, 1, 16))
        assert window.contains(datetime(2024, 1, 10, 0, 0, tzinfo=timezone.utc))
        assert window.contains(datetime(2024, 1, 16, 23, 59, tzinfo=timezone.utc))
        assert not window.contains(datetime(2024, 1, 17, 0, 0, tzinfo=timezone.utc))
        assert not window.contains(datetime(2024, 1, 9, 23, 59, tzinfo=timezone.utc))

    def test_datetime_bounds(self):
        """Datetime bounds are exact instants."""
        window = DateRange(start=datetime(2024, 1, 16, 12, 0))
        assert window.contains(datetime(2024, 1, 16, 12, 0, tzinfo=timezone.utc))
        assert not window.contains(datetime(2024, 1, 16, 11, 59, tzinfo=timezone.utc))

    def test_open_ended(self):
        """A missing start bound is open-ended."""
        window = DateRange(end=date(2024, 1, 1))
        assert window.contains(datetime(1999, 1, 1, tzinfo=timezone.utc))

    def test_start_after_end(self):
        """A start after the end is rejected."""
        with pytest.raises(ValueError, match="after end"):
            DateRange(start=date(2024, 2, 1), end=date(2024, 1, 1))

    def test_str(self):
        """An open end renders as an ellipsis."""
        assert str(DateRange(start=date(2024, 1, 1))) == "2024-01-01 to ..."


class TestTradeFilters:
    """Tests for TradeFilters."""

    def test_empty_matches_everything(self):
        """An empty filter matches every trade."""
        filters = TradeFilters()
        assert filters.is_empty
        assert filters.matches(_closed("c1"))
        assert filters.describe() == "all trades"

    def test_symbol_case_insensitive(self):
        """Symbol matching ignores case."""
        filters = TradeFilters(symbol="aapl")
        assert filters.matches(_closed("c1", "AAPL"))
        assert not filters.matches(_closed("c2", "MSFT"))

    def test_blank_symbol_is_unset(self):
        """A blank symbol counts as no symbol filter."""
        assert TradeFilters(symbol="  ").is_empty

    def test_symbol_with_whitespace_matches(self):
        """A trade symbol with surrounding spaces still matches the filter."""
        assert TradeFilters(symbol="AAPL").matches(_closed("c1", " aapl "))

    def test_direction_string(self):
        """Direction may be given as a string."""
        filters = TradeFilters(direction="short")
        assert filters.direction is Direction.SHORT
        assert not filters.matches(_closed("c1"))
        assert filters.matches(_closed("c2", direction=Direction.SHORT))

    def test_invalid_direction(self):
        """An unknown direction raises ValueError."""
        with pytest.raises(ValueError, match="direction must be"):
            TradeFilters(direction="up")

    def test_date_range_uses_exit_time(self):
        """Date ranges test the exit time."""
        filters = TradeFilters(date_range=DateRange(start=date(2024, 1, 15), end=date(2024, 1, 16)))
        assert filters.matches(_closed("c1", exit_day=16))
        assert not filters.matches(_closed("c2", exit_day=17))

    def test_describe(self):
        """describe() lists every active criterion."""
        filters = TradeFilters(
            symbol="AAPL",
            direction=Direction.LONG,
            date_range=DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31)),
        )
        assert filters.describe() == "symbol=AAPL, direction=long, exit=2024-01-01 to 2024-01-31"
