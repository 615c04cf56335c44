"""Domain errors raised by the ledger and the analytics engine."""


class TradeAnalyticsError(Exception):
    """Base class for all trade analytics errors."""


class InvalidTradeData(TradeAnalyticsError, ValueError):
    """A trade record violates its structural invariants.

    Attributes:
        trade_id: Id of the offending record (None if it has none)
        reason: What was wrong with the record
    """

    def __init__(self, reason: str, trade_id: str | None = None):
        self.trade_id = trade_id
        self.reason = reason
        prefix = f"trade {trade_id!r}: " if trade_id else ""
        super().__init__(f"{prefix}{reason}")


class DuplicateTradeId(TradeAnalyticsError, ValueError):
    """The same trade id appears twice in a ledger."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"duplicate trade id: {trade_id!r}")
