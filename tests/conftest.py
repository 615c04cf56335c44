"""Shared fixtures: a small journal on disk."""

import json

import pytest

from trade_analytics.infrastructure import DataPaths


SAMPLE_RECORDS = [
    {
        "id": "t1", "symbol": "AAPL", "direction": "long", "status": "closed",
        "entry_price": 100.0, "exit_price": 110.0, "quantity": 10,
        "entry_time": "2024-01-15T14:30:00Z", "exit_time": "2024-01-16T15:00:00Z",
        "fees": 5.0, "planned_stop_loss": 95.0, "setup": "breakout",
    },
    {
        "id": "t2", "symbol": "MSFT", "direction": "short", "status": "closed",
        "entry_price": 400.0, "exit_price": 410.0, "quantity": 5,
        "entry_time": "2024-01-17T14:30:00Z", "exit_time": "2024-01-18T15:00:00Z",
        "fees": 2.0, "setup": "reversal",
    },
    {
        "id": "t3", "symbol": "AAPL", "direction": "long", "status": "closed",
        "entry_price": 120.0, "exit_price": 126.0, "quantity": 10,
        "entry_time": "2024-02-01T14:30:00Z", "exit_time": "2024-02-02T15:00:00Z",
        "fees": 0.0, "planned_stop_loss": 117.0, "setup": "breakout",
    },
    {
        "id": "t4", "symbol": "TSLA", "direction": "long", "status": "open",
        "entry_price": 200.0, "quantity": 3,
        "entry_time": "2024-02-05T14:30:00Z",
    },
]
# Net profits: t1 = +95, t2 = -52, t3 = +60 (t4 is open)


@pytest.fixture
def sample_records():
    """Raw journal records (three closed trades, one open)."""
    return [dict(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def data_root(tmp_path, sample_records):
    """Project root with data/trades.json in export-document form."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    document = {"trades": sample_records, "exportDate": "2024-03-01T00:00:00Z", "version": "1.0.0"}
    (data_dir / "trades.json").write_text(json.dumps(document), encoding="utf-8")
    return tmp_path


@pytest.fixture
def paths(data_root):
    return DataPaths(root=data_root)
