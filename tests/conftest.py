from datetime import date

import pytest

from sales_tracker.core.models import Transaction
from sales_tracker.database import append_transactions

SAMPLE_TRANSACTIONS = [
    Transaction(title="Mens Casual T-Shirt", description="Slim-fitting style", price=22.3,
                date_of_sale=date(2022, 3, 2), category="men's clothing", sold=True),
    Transaction(title="Backpack", description="Fits 15 inch laptops", price=329.85,
                date_of_sale=date(2022, 3, 10), category="men's clothing", sold=False),
    Transaction(title="Gold Ring", description="Classic created wedding ring", price=9.99,
                date_of_sale=date(2022, 3, 27), category="jewelery", sold=True),
    Transaction(title="Hard Drive", description="USB 3.0 portable storage", price=914.0,
                date_of_sale=date(2021, 3, 5), category="electronics", sold=False),
    Transaction(title="Rain Jacket", description="Lightweight women's jacket", price=150.0,
                date_of_sale=date(2022, 7, 14), category="women's clothing", sold=True),
]


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "transactions.db")


@pytest.fixture
def seeded_db(db_path):
    append_transactions(SAMPLE_TRANSACTIONS, db_path)
    return db_path
