# sales_tracker/seed.py
from __future__ import annotations

import logging
from typing import Any, List

import requests

from sales_tracker.core.models import Transaction
from sales_tracker.database import append_transactions, count_transactions
from sales_tracker.errors import SeedError

logger = logging.getLogger(__name__)


def fetch_seed_data(url: str, timeout: float = 30) -> List[dict[str, Any]]:
    """Download the seed dataset and return its JSON array."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise SeedError(f"Could not fetch seed data from {url}: {exc}") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise SeedError(f"Seed data from {url} is not valid JSON") from exc

    if not isinstance(payload, list):
        raise SeedError(f"Seed data from {url} must be a JSON array")
    return payload


def seed_database(
    db_path: str,
    url: str,
    *,
    force: bool = False,
    timeout: float = 30,
) -> int:
    """Load the remote dataset into *db_path*.

    Seeding is skipped when the table already holds rows, unless *force* is
    set, in which case every record is appended again. Returns the number of
    rows inserted.
    """
    existing = count_transactions(db_path)
    if existing and not force:
        logger.info("Skipping seed: %s already holds %d transaction(s)", db_path, existing)
        return 0

    logger.info("Fetching seed data from %s", url)
    entries = fetch_seed_data(url, timeout=timeout)
    try:
        transactions = [Transaction.from_dict(entry) for entry in entries]
    except (AttributeError, TypeError, ValueError) as exc:
        raise SeedError(f"Malformed seed record: {exc}") from exc

    inserted = append_transactions(transactions, db_path)
    logger.info("Seeded %d transaction(s) into %s", inserted, db_path)
    return inserted
