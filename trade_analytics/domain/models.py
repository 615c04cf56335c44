"""Domain Models: Trades recorded in the journal.

These models represent the fundamental business entities:
- Direction: Long or short exposure
- OpenTrade: A position that has been entered but not exited
- ClosedTrade: A round-tripped position with realized profit
- Trade: Tagged union of the two shapes

Design Principles:
- Immutable (frozen dataclass)
- Open and closed trades are distinct types, so exit fields are never None
- Validation in __post_init__, repeated at the analytics boundary
- Computed properties for derived values
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Mapping

from trade_analytics.domain.errors import InvalidTradeData


class Direction(str, Enum):
    """Trade direction."""

    LONG = "long"
    SHORT = "short"

    @classmethod
    def parse(cls, value: Any, trade_id: str | None = None) -> Direction:
        """Parse a direction from an enum member or a case-insensitive string."""
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidTradeData(
            f"direction must be 'long' or 'short', got: {value!r}", trade_id
        )


class TradeStatus(str, Enum):
    """Lifecycle state of a trade, derived from its shape."""

    OPEN = "open"
    CLOSED = "closed"


class PlanAdherence(str, Enum):
    """Whether the trade followed its plan (recorded when closing)."""

    YES = "yes"
    NO = "no"
    PARTIALLY = "partially"

    @classmethod
    def parse(cls, value: Any, trade_id: str | None = None) -> PlanAdherence:
        if isinstance(value, PlanAdherence):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidTradeData(
            f"followed_plan must be yes, no or partially, got: {value!r}", trade_id
        )


DISCIPLINE_RATINGS = range(1, 6)


# =============================================================================
# Field Helpers
# =============================================================================

def ensure_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any, field_name: str, trade_id: str | None = None) -> datetime:
    """Parse an ISO-8601 string, date or datetime into an aware UTC datetime."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            pass
    raise InvalidTradeData(
        f"{field_name} must be an ISO-8601 timestamp, got: {value!r}", trade_id
    )


def _parse_number(value: Any, field_name: str, trade_id: str | None) -> float:
    if isinstance(value, bool):
        raise InvalidTradeData(f"{field_name} must be a number, got: {value!r}", trade_id)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidTradeData(
            f"{field_name} must be a number, got: {value!r}", trade_id
        ) from None


def _check_number(value: Any, field_name: str, trade_id: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidTradeData(f"{field_name} must be a number, got: {value!r}", trade_id)
    if not math.isfinite(value):
        raise InvalidTradeData(f"{field_name} must be finite, got: {value!r}", trade_id)


def _check_positive(value: Any, field_name: str, trade_id: str) -> None:
    _check_number(value, field_name, trade_id)
    if value <= 0:
        raise InvalidTradeData(f"{field_name} must be positive, got: {value}", trade_id)


def _check_non_negative(value: Any, field_name: str, trade_id: str) -> None:
    _check_number(value, field_name, trade_id)
    if value < 0:
        raise InvalidTradeData(f"{field_name} must be non-negative, got: {value}", trade_id)


def _check_timestamp(value: Any, field_name: str, trade_id: str) -> None:
    if not isinstance(value, datetime):
        raise InvalidTradeData(f"{field_name} must be a datetime, got: {value!r}", trade_id)


def _check_rating(value: Any, trade_id: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value not in DISCIPLINE_RATINGS:
        raise InvalidTradeData(
            f"discipline_rating must be an integer from 1 to 5, got: {value!r}", trade_id
        )


def _validate_entry(trade: OpenTrade | ClosedTrade) -> None:
    """Checks shared by both trade shapes."""
    if not isinstance(trade.id, str) or not trade.id:
        raise InvalidTradeData("id cannot be empty", None)
    if not isinstance(trade.symbol, str) or not trade.symbol.strip():
        raise InvalidTradeData("symbol cannot be empty", trade.id)
    if not isinstance(trade.direction, Direction):
        raise InvalidTradeData(
            f"direction must be a Direction, got: {trade.direction!r}", trade.id
        )
    _check_positive(trade.entry_price, "entry_price", trade.id)
    _check_positive(trade.quantity, "quantity", trade.id)
    _check_non_negative(trade.fees, "fees", trade.id)
    _check_timestamp(trade.entry_time, "entry_time", trade.id)
    if trade.planned_stop_loss is not None:
        _check_positive(trade.planned_stop_loss, "planned_stop_loss", trade.id)
    if trade.discipline_rating is not None:
        _check_rating(trade.discipline_rating, trade.id)
    if trade.followed_plan is not None and not isinstance(trade.followed_plan, PlanAdherence):
        raise InvalidTradeData(
            f"followed_plan must be a PlanAdherence, got: {trade.followed_plan!r}", trade.id
        )


def _normalize(trade: OpenTrade | ClosedTrade, *time_fields: str) -> None:
    """Coerce symbol, enum strings and naive timestamps in place (pre-freeze)."""
    if isinstance(trade.symbol, str):
        object.__setattr__(trade, "symbol", trade.symbol.strip())
    if isinstance(trade.direction, str) and not isinstance(trade.direction, Direction):
        object.__setattr__(trade, "direction", Direction.parse(trade.direction, trade.id))
    if isinstance(trade.followed_plan, str) and not isinstance(trade.followed_plan, PlanAdherence):
        object.__setattr__(trade, "followed_plan", PlanAdherence.parse(trade.followed_plan, trade.id))
    for name in time_fields:
        value = getattr(trade, name)
        if isinstance(value, datetime):
            object.__setattr__(trade, name, ensure_utc(value))


# =============================================================================
# Trade Shapes
# =============================================================================

@dataclass(frozen=True, slots=True)
class OpenTrade:
    """A position that has been entered but not yet exited.

    Open trades carry no realized profit and are ignored by the analytics
    engine.

    Attributes:
        id: Unique, immutable identifier
        symbol: Instrument ticker (e.g., "AAPL")
        direction: Long or short
        entry_price: Fill price on entry (must be positive)
        quantity: Position size (must be positive)
        entry_time: Entry timestamp (naive values are taken as UTC)
        fees: Commissions paid so far (must be non-negative)
        planned_stop_loss: Stop price used to size the initial risk
        setup: Entry reason or strategy tag
        discipline_rating: Self-assessed discipline, 1 to 5 stars
        followed_plan: Whether the plan was followed
    """

    id: str
    symbol: str
    direction: Direction
    entry_price: float
    quantity: float
    entry_time: datetime
    fees: float = 0.0
    planned_stop_loss: float | None = None
    setup: str | None = None
    discipline_rating: int | None = None
    followed_plan: PlanAdherence | None = None

    def __post_init__(self) -> None:
        _normalize(self, "entry_time")
        self.validate()

    def validate(self) -> None:
        """Check all invariants, raising InvalidTradeData on the first failure."""
        _validate_entry(self)

    @property
    def status(self) -> TradeStatus:
        return TradeStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return False

    @property
    def initial_risk(self) -> float | None:
        """Money at risk between entry and the planned stop."""
        return _initial_risk(self)

    def close(
        self,
        exit_price: float,
        exit_time: datetime,
        exit_fees: float = 0.0,
        discipline_rating: int | None = None,
        followed_plan: PlanAdherence | str | None = None,
    ) -> ClosedTrade:
        """Return the closed counterpart of this trade.

        Args:
            exit_price: Fill price on exit
            exit_time: Exit timestamp (must not precede entry_time)
            exit_fees: Additional fees charged on exit
            discipline_rating: Rating given when closing (keeps the current one if None)
            followed_plan: Plan adherence (keeps the current one if None)

        Returns:
            A new ClosedTrade; this trade is left untouched
        """
        return ClosedTrade(
            id=self.id,
            symbol=self.symbol,
            direction=self.direction,
            entry_price=self.entry_price,
            exit_price=exit_price,
            quantity=self.quantity,
            entry_time=self.entry_time,
            exit_time=exit_time,
            fees=self.fees + exit_fees,
            planned_stop_loss=self.planned_stop_loss,
            setup=self.setup,
            discipline_rating=(
                self.discipline_rating if discipline_rating is None else discipline_rating
            ),
            followed_plan=self.followed_plan if followed_plan is None else followed_plan,
        )


@dataclass(frozen=True, slots=True)
class ClosedTrade:
    """A round-tripped position with realized profit.

    Example:
        >>> trade = ClosedTrade(
        ...     id="t1", symbol="AAPL", direction=Direction.LONG,
        ...     entry_price=100.0, exit_price=110.0, quantity=10,
        ...     entry_time=datetime(2024, 1, 15, 14, 30),
        ...     exit_time=datetime(2024, 1, 16, 15, 0),
        ...     fees=5.0,
        ... )
        >>> trade.net_profit
        95.0
    """

    id: str
    symbol: str
    direction: Direction
    entry_price: float
    exit_price: float
    quantity: float
    entry_time: datetime
    exit_time: datetime
    fees: float = 0.0
    planned_stop_loss: float | None = None
    setup: str | None = None
    discipline_rating: int | None = None
    followed_plan: PlanAdherence | None = None

    def __post_init__(self) -> None:
        _normalize(self, "entry_time", "exit_time")
        self.validate()

    def validate(self) -> None:
        """Check all invariants, raising InvalidTradeData on the first failure."""
        _validate_entry(self)
        _check_positive(self.exit_price, "exit_price", self.id)
        _check_timestamp(self.exit_time, "exit_time", self.id)
        if self.exit_time < self.entry_time:
            raise InvalidTradeData(
                f"exit_time {self.exit_time.isoformat()} precedes "
                f"entry_time {self.entry_time.isoformat()}",
                self.id,
            )

    @property
    def status(self) -> TradeStatus:
        return TradeStatus.CLOSED

    @property
    def is_closed(self) -> bool:
        return True

    @property
    def price_move(self) -> float:
        """Per-unit price change in the trade's favour."""
        if self.direction is Direction.LONG:
            return self.exit_price - self.entry_price
        return self.entry_price - self.exit_price

    @property
    def gross_profit(self) -> float:
        """Profit before fees."""
        return self.price_move * self.quantity

    @property
    def net_profit(self) -> float:
        """Realized profit after fees.

        long:  (exit_price - entry_price) * quantity - fees
        short: (entry_price - exit_price) * quantity - fees
        """
        return self.price_move * self.quantity - self.fees

    @property
    def return_pct(self) -> float:
        """Price return in percent of the entry price (fees excluded)."""
        return self.price_move / self.entry_price * 100

    @property
    def holding_duration(self) -> timedelta:
        return self.exit_time - self.entry_time

    @property
    def initial_risk(self) -> float | None:
        """Money at risk between entry and the planned stop."""
        return _initial_risk(self)

    @property
    def r_multiple(self) -> float | None:
        """Net profit expressed in units of initial risk (None without a stop)."""
        risk = self.initial_risk
        if not risk:
            return None
        return self.net_profit / risk

    @property
    def is_win(self) -> bool:
        return self.net_profit > 0

    @property
    def is_loss(self) -> bool:
        return self.net_profit < 0


Trade = OpenTrade | ClosedTrade
TRADE_TYPES = (OpenTrade, ClosedTrade)


def _initial_risk(trade: Trade) -> float | None:
    if trade.planned_stop_loss is None:
        return None
    return abs(trade.entry_price - trade.planned_stop_loss) * trade.quantity


# =============================================================================
# Record Coercion
# =============================================================================

# Field names used by the journal's stored records
FIELD_ALIASES = {
    "position_size": "quantity",
    "datetime": "entry_time",
    "entry_reason": "setup",
    "exit_datetime": "exit_time",
}


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_rating(value: Any, trade_id: str) -> int:
    number = _parse_number(value, "discipline_rating", trade_id)
    if not number.is_integer():
        raise InvalidTradeData(
            f"discipline_rating must be an integer from 1 to 5, got: {value!r}", trade_id
        )
    return int(number)


def trade_from_record(record: Mapping[str, Any]) -> Trade:
    """Build an OpenTrade or ClosedTrade from a raw mapping.

    A record is closed when it carries exit_price/exit_time, or when it
    declares ``status: "closed"``. Numbers may be given as strings and
    timestamps as ISO-8601 strings.

    Args:
        record: Mapping as stored by the persistence layer

    Returns:
        The trade in its tagged shape

    Raises:
        InvalidTradeData: If the record is malformed
    """
    if not isinstance(record, Mapping):
        raise InvalidTradeData(f"trade record must be a mapping, got: {type(record).__name__}")

    data = {FIELD_ALIASES.get(key, key): value for key, value in record.items()}

    trade_id = data.get("id")
    if _missing(trade_id):
        raise InvalidTradeData("id cannot be empty")
    trade_id = str(trade_id)

    for name in ("symbol", "direction", "entry_price", "quantity", "entry_time"):
        if _missing(data.get(name)):
            raise InvalidTradeData(f"{name} is required", trade_id)

    status = data.get("status")
    if not _missing(status) and str(status).strip().lower() not in ("open", "closed"):
        raise InvalidTradeData(f"status must be 'open' or 'closed', got: {status!r}", trade_id)
    declared_closed = not _missing(status) and str(status).strip().lower() == "closed"

    has_exit_price = not _missing(data.get("exit_price"))
    has_exit_time = not _missing(data.get("exit_time"))
    if has_exit_price != has_exit_time:
        missing = "exit_time" if has_exit_price else "exit_price"
        raise InvalidTradeData(f"closed trade is missing {missing}", trade_id)
    if declared_closed and not has_exit_price:
        raise InvalidTradeData("closed trade is missing exit_price and exit_time", trade_id)

    fees = data.get("fees")
    stop = data.get("planned_stop_loss")
    setup = data.get("setup")
    rating = data.get("discipline_rating")
    plan = data.get("followed_plan")
    common = {
        "id": trade_id,
        "symbol": str(data["symbol"]).strip(),
        "direction": Direction.parse(data["direction"], trade_id),
        "entry_price": _parse_number(data["entry_price"], "entry_price", trade_id),
        "quantity": _parse_number(data["quantity"], "quantity", trade_id),
        "entry_time": parse_timestamp(data["entry_time"], "entry_time", trade_id),
        "fees": 0.0 if _missing(fees) else _parse_number(fees, "fees", trade_id),
        "planned_stop_loss": (
            None if _missing(stop) else _parse_number(stop, "planned_stop_loss", trade_id)
        ),
        "setup": None if _missing(setup) else str(setup).strip(),
        "discipline_rating": None if _missing(rating) else _parse_rating(rating, trade_id),
        "followed_plan": None if _missing(plan) else PlanAdherence.parse(plan, trade_id),
    }

    if not has_exit_price:
        return OpenTrade(**common)

    return ClosedTrade(
        exit_price=_parse_number(data["exit_price"], "exit_price", trade_id),
        exit_time=parse_timestamp(data["exit_time"], "exit_time", trade_id),
        **common,
    )


def trade_to_record(trade: Trade) -> dict[str, Any]:
    """Flatten a trade into a JSON-friendly mapping."""
    record: dict[str, Any] = {
        "id": trade.id,
        "symbol": trade.symbol,
        "direction": trade.direction.value,
        "status": trade.status.value,
        "entry_price": trade.entry_price,
        "quantity": trade.quantity,
        "entry_time": trade.entry_time.isoformat(),
        "exit_price": None,
        "exit_time": None,
        "fees": trade.fees,
        "planned_stop_loss": trade.planned_stop_loss,
        "setup": trade.setup,
        "discipline_rating": trade.discipline_rating,
        "followed_plan": trade.followed_plan.value if trade.followed_plan else None,
    }
    if isinstance(trade, ClosedTrade):
        record["exit_price"] = trade.exit_price
        record["exit_time"] = trade.exit_time.isoformat()
    return record
