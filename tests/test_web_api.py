import sqlite3
from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from sales_tracker.config import Settings
from sales_tracker.core.models import Transaction
from sales_tracker.database import append_transactions
from sales_tracker.errors import SeedError
from sales_tracker.web import create_app


def _client(db_path):
    return TestClient(create_app(Settings(db_path=db_path, seed_on_startup=False)))


@pytest.fixture
def client(seeded_db):
    return _client(seeded_db)


def test_transactions_endpoint_search_and_pagination(client):
    res = client.get("/transactions", params={"month": "03"})
    assert res.status_code == 200
    assert len(res.json()) == 4

    res = client.get("/transactions", params={"month": "3", "search": "Men"})
    assert [tx["title"] for tx in res.json()] == ["Mens Casual T-Shirt"]

    res = client.get("/transactions", params={"month": "03", "page": "2", "perPage": "1"})
    assert [tx["title"] for tx in res.json()] == ["Backpack"]


def test_pagination_returns_second_of_three_rows(db_path):
    append_transactions(
        [
            Transaction(title=name, description="", price=10, date_of_sale=date(2022, 5, day))
            for day, name in ((1, "first"), (2, "second"), (3, "third"))
        ],
        db_path,
    )
    res = _client(db_path).get("/transactions?month=05&perPage=1&page=2")
    assert [tx["title"] for tx in res.json()] == ["second"]


def test_statistics_and_charts(client):
    stats = client.get("/statistics?month=03").json()
    assert stats == {"totalSales": 1276.14, "soldItems": 2, "notSoldItems": 2}

    bar = client.get("/bar-chart?month=03").json()
    assert len(bar) == 10
    assert bar[0] == {"range": "0-100", "count": 2}
    assert bar[-1] == {"range": "900-above", "count": 1}
    assert sum(row["count"] for row in bar) == stats["soldItems"] + stats["notSoldItems"]

    pie = client.get("/pie-chart?month=03").json()
    assert {"category": "men's clothing", "count": 2} in pie


def test_combined_matches_individual_endpoints(client):
    combined = client.get("/combined?month=03")
    assert combined.status_code == 200
    payload = combined.json()

    assert set(payload) == {"transactions", "stats", "barChart", "pieChart"}
    assert payload["barChart"] == client.get("/bar-chart?month=03").json()
    assert payload["pieChart"] == client.get("/pie-chart?month=03").json()
    assert payload["stats"] == client.get("/statistics?month=03").json()
    assert len(payload["transactions"]) == 4


def test_combined_lists_every_transaction_in_month(db_path):
    append_transactions(
        [
            Transaction(title=f"item {day}", description="", price=day * 10, date_of_sale=date(2022, 3, day))
            for day in range(1, 16)
        ],
        db_path,
    )
    client = _client(db_path)

    payload = client.get("/combined?month=03").json()
    assert len(payload["transactions"]) == 15
    assert [tx["title"] for tx in payload["transactions"]][-1] == "item 15"
    assert len(client.get("/transactions?month=03").json()) == 10


@pytest.mark.parametrize(
    "url",
    [
        "/transactions",
        "/statistics",
        "/bar-chart?month=13",
        "/pie-chart?month=march",
        "/combined?month=0",
        "/transactions?month=03&page=0",
        "/transactions?month=03&perPage=abc",
        "/transactions?month=03&perPage=1000",
        "/transactions?month=03&page=1000000000000000000",
    ],
)
def test_malformed_parameters_return_400(client, url):
    res = client.get(url)
    assert res.status_code == 400
    assert "error" in res.json()


def test_query_failure_returns_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr("sales_tracker.web.price_histogram", broken)

    res = client.get("/bar-chart?month=03")
    assert res.status_code == 500
    assert res.json() == {"error": "database is locked"}

    res = client.get("/combined?month=03")
    assert res.status_code == 500
    assert res.json() == {"error": "database is locked"}


def test_health_reports_row_count(client):
    assert client.get("/health").json() == {"status": "ok", "transactions": 5}


def test_startup_seeds_database(db_path, monkeypatch):
    payload = [
        {"title": "a", "description": "", "price": 50, "category": "A", "sold": True, "dateOfSale": "2022-03-01"},
        {"title": "b", "description": "", "price": 150, "category": "B", "sold": False, "dateOfSale": "2022-03-15"},
    ]
    monkeypatch.setattr(
        "sales_tracker.seed.requests.get",
        lambda url, timeout: SimpleNamespace(raise_for_status=lambda: None, json=lambda: payload),
    )
    app = create_app(Settings(db_path=db_path, seed_url="https://example.com/data.json"))

    with TestClient(app) as client:
        assert '"totalSales":200,' in client.get("/statistics?month=03").text
        assert client.get("/statistics?month=03").json() == {
            "totalSales": 200,
            "soldItems": 1,
            "notSoldItems": 1,
        }
        counts = {row["range"]: row["count"] for row in client.get("/bar-chart?month=03").json()}
        assert counts["0-100"] == 1
        assert counts["100-200"] == 1
        assert sum(counts.values()) == 2


def test_startup_fails_when_seed_fetch_fails(db_path, monkeypatch):
    def fake_fetch(url, timeout):
        raise SeedError("unreachable")

    monkeypatch.setattr("sales_tracker.seed.fetch_seed_data", fake_fetch)
    app = create_app(Settings(db_path=db_path, seed_url="https://example.com/data.json"))

    with pytest.raises(SeedError):
        with TestClient(app):
            pass
