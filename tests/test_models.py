"""Unit tests for domain models."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from trade_analytics.domain import (
    ClosedTrade,
    Direction,
    InvalidTradeData,
    OpenTrade,
    PlanAdherence,
    TradeStatus,
    trade_from_record,
    trade_to_record,
)

ENTRY = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)
EXIT = datetime(2024, 1, 16, 15, 0, tzinfo=timezone.utc)


def _closed(**overrides) -> ClosedTrade:
    fields = dict(
        id="t1", symbol="AAPL", direction=Direction.LONG,
        entry_price=100.0, exit_price=110.0, quantity=10,
        entry_time=ENTRY, exit_time=EXIT, fees=5.0,
    )
    fields.update(overrides)
    return ClosedTrade(**fields)


class TestDirection:
    """Tests for Direction parsing."""

    def test_parse_case_insensitive(self):
        """Direction strings are matched case-insensitively."""
        assert Direction.parse("LONG") is Direction.LONG
        assert Direction.parse(" short ") is Direction.SHORT

    def test_parse_member(self):
        """An existing member is returned unchanged."""
        assert Direction.parse(Direction.SHORT) is Direction.SHORT

    def test_parse_invalid(self):
        """Unknown direction raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="direction must be"):
            Direction.parse("sideways", "t9")


class TestClosedTrade:
    """Tests for ClosedTrade dataclass."""

    def test_long_net_profit(self):
        """Long: (exit - entry) * quantity - fees."""
        trade = _closed()
        assert trade.gross_profit == 100.0
        assert trade.net_profit == 95.0
        assert trade.is_win
        assert not trade.is_loss

    def test_short_net_profit(self):
        """Short: (entry - exit) * quantity - fees."""
        trade = _closed(direction=Direction.SHORT, exit_price=90.0)
        assert trade.net_profit == 95.0

    def test_short_loss(self):
        """A short trade loses when price rises."""
        trade = _closed(direction=Direction.SHORT)
        assert trade.net_profit == -105.0
        assert trade.is_loss

    def test_breakeven(self):
        """Exit at entry with no fees is neither win nor loss."""
        trade = _closed(exit_price=100.0, fees=0.0)
        assert trade.net_profit == 0.0
        assert not trade.is_win
        assert not trade.is_loss

    def test_return_pct(self):
        """Return is the price move as a percent of entry."""
        assert _closed().return_pct == pytest.approx(10.0)

    def test_holding_duration(self):
        """Holding duration is exit minus entry."""
        assert _closed().holding_duration == timedelta(hours=24, minutes=30)

    def test_r_multiple(self):
        """R = net profit / (|entry - stop| * quantity)."""
        trade = _closed(planned_stop_loss=95.0)
        assert trade.initial_risk == 50.0
        assert trade.r_multiple == pytest.approx(1.9)

    def test_r_multiple_without_stop(self):
        """Without a planned stop there is no R-multiple."""
        assert _closed().r_multiple is None

    def test_status(self):
        """Closed trades report the closed status."""
        trade = _closed()
        assert trade.status is TradeStatus.CLOSED
        assert trade.is_closed

    def test_naive_times_taken_as_utc(self):
        """Naive timestamps are taken as UTC."""
        trade = _closed(entry_time=datetime(2024, 1, 15), exit_time=datetime(2024, 1, 16))
        assert trade.entry_time.tzinfo == timezone.utc
        assert trade.exit_time == datetime(2024, 1, 16, tzinfo=timezone.utc)

    def test_direction_string_coerced(self):
        """Direction strings are coerced to the enum."""
        assert _closed(direction="short").direction is Direction.SHORT

    def test_exit_before_entry(self):
        """exit_time < entry_time raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="precedes"):
            _closed(exit_time=ENTRY - timedelta(minutes=1))

    def test_exit_equal_entry_allowed(self):
        """Exiting at the entry time is allowed."""
        assert _closed(exit_time=ENTRY).holding_duration == timedelta(0)

    def test_invalid_quantity_zero(self):
        """Test that zero quantity raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="quantity must be positive"):
            _closed(quantity=0)

    def test_invalid_price_negative(self):
        """Test that a negative exit price raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="exit_price must be positive"):
            _closed(exit_price=-1.0)

    def test_invalid_fees_negative(self):
        """Test that negative fees raise InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="fees must be non-negative"):
            _closed(fees=-0.5)

    def test_invalid_price_nan(self):
        """Test that a NaN price raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="must be finite"):
            _closed(entry_price=float("nan"))

    def test_invalid_symbol_empty(self):
        """Test that a blank symbol raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="symbol cannot be empty"):
            _closed(symbol="  ")

    def test_invalid_id_empty(self):
        """Test that an empty id raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="id cannot be empty"):
            _closed(id="")

    def test_error_carries_trade_id(self):
        """Errors carry the offending trade id."""
        with pytest.raises(InvalidTradeData) as exc:
            _closed(id="abc", quantity=-1)
        assert exc.value.trade_id == "abc"
        assert "trade 'abc'" in str(exc.value)

    def test_immutable(self):
        """Test that trades are immutable."""
        trade = _closed()
        with pytest.raises(FrozenInstanceError):
            trade.exit_price = 120.0

    def test_symbol_stripped(self):
        """Surrounding whitespace is removed from the symbol."""
        trade = _closed(symbol=" aapl ")
        assert trade.symbol == "aapl"

    def test_discipline_and_plan(self):
        """Discipline rating and plan adherence are carried on the trade."""
        trade = _closed(discipline_rating=4, followed_plan="Partially")
        assert trade.discipline_rating == 4
        assert trade.followed_plan is PlanAdherence.PARTIALLY

    def test_invalid_discipline_rating(self):
        """Test that a rating outside 1 to 5 raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="discipline_rating must be"):
            _closed(discipline_rating=6)
        with pytest.raises(InvalidTradeData, match="discipline_rating must be"):
            _closed(discipline_rating=True)

    def test_invalid_followed_plan(self):
        """Test that an unknown plan adherence raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="followed_plan must be"):
            _closed(followed_plan="mostly")


class TestOpenTrade:
    """Tests for OpenTrade dataclass."""

    def test_valid_open_trade(self):
        """Test creating a valid open trade."""
        trade = OpenTrade(
            id="o1", symbol="TSLA", direction=Direction.LONG,
            entry_price=200.0, quantity=3, entry_time=ENTRY,
        )
        assert trade.status is TradeStatus.OPEN
        assert not trade.is_closed
        assert not hasattr(trade, "exit_price")

    def test_close(self):
        """close() returns a new ClosedTrade and adds exit fees."""
        trade = OpenTrade(
            id="o1", symbol="TSLA", direction=Direction.SHORT,
            entry_price=200.0, quantity=3, entry_time=ENTRY, fees=1.0,
            planned_stop_loss=210.0, setup="fade",
        )
        closed = trade.close(exit_price=190.0, exit_time=EXIT, exit_fees=1.0)

        assert isinstance(closed, ClosedTrade)
        assert closed.id == "o1"
        assert closed.fees == 2.0
        assert closed.net_profit == 28.0
        assert closed.setup == "fade"
        assert closed.r_multiple == pytest.approx(28.0 / 30.0)

    def test_close_records_discipline(self):
        """Discipline given on close is stored on the closed trade."""
        trade = OpenTrade(
            id="o1", symbol="TSLA", direction=Direction.LONG,
            entry_price=200.0, quantity=3, entry_time=ENTRY, discipline_rating=2,
        )
        closed = trade.close(
            exit_price=210.0, exit_time=EXIT, discipline_rating=5, followed_plan="yes",
        )
        assert closed.discipline_rating == 5
        assert closed.followed_plan is PlanAdherence.YES
        assert trade.close(exit_price=210.0, exit_time=EXIT).discipline_rating == 2

    def test_close_before_entry(self):
        """Closing before entry raises InvalidTradeData."""
        trade = OpenTrade(
            id="o1", symbol="TSLA", direction=Direction.LONG,
            entry_price=200.0, quantity=3, entry_time=ENTRY,
        )
        with pytest.raises(InvalidTradeData):
            trade.close(exit_price=190.0, exit_time=ENTRY - timedelta(days=1))


class TestTradeFromRecord:
    """Tests for record coercion."""

    def test_closed_record(self):
        """String numbers and Z timestamps are coerced."""
        trade = trade_from_record({
            "id": "t1", "symbol": "AAPL", "direction": "Long",
            "entry_price": "100", "exit_price": "110", "quantity": "10",
            "entry_time": "2024-01-15T14:30:00Z", "exit_time": "2024-01-16T15:00:00Z",
            "fees": "5",
        })
        assert isinstance(trade, ClosedTrade)
        assert trade.net_profit == 95.0
        assert trade.exit_time == EXIT

    def test_open_record(self):
        """Records without exits become open trades."""
        trade = trade_from_record({
            "id": "o1", "symbol": "TSLA", "direction": "short", "status": "open",
            "entry_price": 200, "quantity": 3, "entry_time": "2024-01-15",
        })
        assert isinstance(trade, OpenTrade)
        assert trade.fees == 0.0
        assert trade.entry_time == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_journal_aliases(self):
        """position_size, datetime and entry_reason map onto trade fields."""
        trade = trade_from_record({
            "id": 7, "symbol": "NVDA", "direction": "long",
            "entry_price": 50, "position_size": 100,
            "datetime": "2024-03-01T10:00:00+02:00",
            "entry_reason": "pullback",
        })
        assert trade.id == "7"
        assert trade.quantity == 100.0
        assert trade.setup == "pullback"
        assert trade.entry_time == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_journal_exit_alias(self):
        """exit_datetime maps onto exit_time for closed journal records."""
        trade = trade_from_record({
            "id": "x", "symbol": "AAPL", "direction": "long",
            "entry_price": 100, "position_size": 10,
            "datetime": "2024-01-01T10:00:00Z",
            "exit_price": 110, "exit_datetime": "2024-01-02T10:00:00Z",
        })
        assert isinstance(trade, ClosedTrade)
        assert trade.exit_time == datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)
        assert trade.net_profit == 100.0

    def test_discipline_fields(self):
        """Ratings and plan adherence are coerced from journal records."""
        trade = trade_from_record({
            "id": "x", "symbol": "AAPL", "direction": "long",
            "entry_price": 100, "quantity": 1, "entry_time": "2024-01-01",
            "exit_price": 101, "exit_time": "2024-01-02",
            "discipline_rating": "3", "followed_plan": "No",
        })
        assert trade.discipline_rating == 3
        assert trade.followed_plan is PlanAdherence.NO
        assert trade_to_record(trade)["followed_plan"] == "no"

    def test_fractional_rating(self):
        """Test that a fractional rating raises InvalidTradeData."""
        with pytest.raises(InvalidTradeData, match="discipline_rating must be"):
            trade_from_record({
                "id": "x", "symbol": "AAPL", "direction": "long",
                "entry_price": 1, "quantity": 1, "entry_time": "2024-01-01",
                "discipline_rating": 2.5,
            })

    def test_missing_required_field(self):
        """Missing required fields are reported by name."""
        with pytest.raises(InvalidTradeData, match="symbol is required"):
            trade_from_record({
                "id": "x", "direction": "long", "entry_price": 1,
                "quantity": 1, "entry_time": "2024-01-01",
            })

    def test_missing_id(self):
        """Records without an id are rejected."""
        with pytest.raises(InvalidTradeData, match="id cannot be empty"):
            trade_from_record({"symbol": "AAPL"})

    def test_half_closed_record(self):
        """Exit price without exit time is malformed."""
        with pytest.raises(InvalidTradeData, match="missing exit_time"):
            trade_from_record({
                "id": "x", "symbol": "AAPL", "direction": "long", "entry_price": 1,
                "quantity": 1, "entry_time": "2024-01-01", "exit_price": 2,
            })

    def test_declared_closed_without_exit(self):
        """A record declared closed must carry its exits."""
        with pytest.raises(InvalidTradeData, match="closed trade is missing"):
            trade_from_record({
                "id": "x", "symbol": "AAPL", "direction": "long", "status": "closed",
                "entry_price": 1, "quantity": 1, "entry_time": "2024-01-01",
            })

    def test_invalid_status(self):
        """Unknown status values are rejected."""
        with pytest.raises(InvalidTradeData, match="status must be"):
            trade_from_record({
                "id": "x", "symbol": "AAPL", "direction": "long", "status": "pending",
                "entry_price": 1, "quantity": 1, "entry_time": "2024-01-01",
            })

    def test_invalid_number(self):
        """Non-numeric prices are rejected."""
        with pytest.raises(InvalidTradeData, match="entry_price must be a number"):
            trade_from_record({
                "id": "x", "symbol": "AAPL", "direction": "long",
                "entry_price": "abc", "quantity": 1, "entry_time": "2024-01-01",
            })

    def test_invalid_timestamp(self):
        """Unparseable timestamps are rejected."""
        with pytest.raises(InvalidTradeData, match="entry_time must be an ISO-8601"):
            trade_from_record({
                "id": "x", "symbol": "AAPL", "direction": "long",
                "entry_price": 1, "quantity": 1, "entry_time": "yesterday",
            })

    def test_not_a_mapping(self):
        """Non-mapping records are rejected."""
        with pytest.raises(InvalidTradeData, match="must be a mapping"):
            trade_from_record(["t1", "AAPL"])

    def test_to_record_and_back(self):
        """trade_to_record output is accepted by trade_from_record."""
        trade = _closed(planned_stop_loss=95.0, setup="breakout", discipline_rating=4, followed_plan="yes")
        record = trade_to_record(trade)

        assert record["status"] == "closed"
        assert record["direction"] == "long"
        assert trade_from_record(record) == trade

    def test_open_to_record(self):
        """Open trades serialize without exits and read back."""
        trade = OpenTrade(
            id="o1", symbol="TSLA", direction=Direction.LONG,
            entry_price=200.0, quantity=3, entry_time=ENTRY,
        )
        record = trade_to_record(trade)
        assert record["status"] == "open"
        assert record["exit_price"] is None
        assert trade_from_record(record) == trade
