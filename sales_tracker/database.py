import sqlite3
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from sales_tracker.core.buckets import bucket_prices
from sales_tracker.core.models import Transaction

_MONTH_FILTER = "CAST(strftime('%m', date_of_sale) AS INTEGER) = ?"


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            price REAL NOT NULL,
            date_of_sale TEXT NOT NULL,
            category TEXT NOT NULL,
            sold INTEGER NOT NULL
        )
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    _init_db(conn)
    return conn


def append_transactions(transactions: Iterable[Transaction], db_path: str) -> int:
    """Insert transactions into the SQLite database in one batch.

    Parameters
    ----------
    transactions:
        Iterable of Transaction objects to store.
    db_path:
        Path to the SQLite database file.

    Returns the number of rows inserted. Rows are never deduplicated.
    """
    rows = [
        (
            tx.title,
            tx.description,
            float(tx.price),
            tx.date_of_sale.isoformat(),
            tx.category,
            int(bool(tx.sold)),
        )
        for tx in transactions
    ]
    if not rows:
        return 0

    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = _connect(str(path))
    try:
        conn.executemany(
            """
            INSERT INTO transactions
            (title, description, price, date_of_sale, category, sold)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            rows,
        )
        conn.commit()
    finally:
        conn.close()
    return len(rows)


def _build_filters(month: int | None, search: str | None = None) -> Tuple[str, list]:
    conditions: list[str] = []
    params: list = []
    if month is not None:
        conditions.append(_MONTH_FILTER)
        params.append(int(month))
    if search:
        like = f"%{search}%"
        clauses = ["title LIKE ?", "description LIKE ?"]
        params.extend([like, like])
        try:
            price = float(search)
        except ValueError:
            price = None
        if price is not None:
            clauses.append("price = ?")
            params.append(price)
        conditions.append("(" + " OR ".join(clauses) + ")")
    where = " WHERE " + " AND ".join(conditions) if conditions else ""
    return where, params


def _row_to_dict(row) -> Dict[str, object]:
    return {
        "id": row[0],
        "title": row[1],
        "description": row[2],
        "price": float(row[3]),
        "dateOfSale": row[4],
        "category": row[5],
        "sold": bool(row[6]),
    }


def count_transactions(db_path: str, month: int | None = None) -> int:
    conn = _connect(db_path)
    try:
        where, params = _build_filters(month)
        row = conn.execute(f"SELECT COUNT(*) FROM transactions{where}", params).fetchone()
        return int(row[0] or 0)
    finally:
        conn.close()


def query_transactions(
    db_path: str,
    month: int,
    search: str | None = None,
    page: int = 1,
    per_page: int | None = 10,
) -> List[Dict[str, object]]:
    """List the transactions sold in *month*, in insertion order.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.
    month:
        Calendar month (1-12) of ``date_of_sale``.
    search:
        Optional case-insensitive substring matched against the title and
        description, or an exact price when it parses as a number.
    page, per_page:
        One-based page number and page size. ``per_page=None`` disables
        pagination.
    """
    conn = _connect(db_path)
    try:
        where, params = _build_filters(month, search)
        query = (
            "SELECT id, title, description, price, date_of_sale, category, sold "
            f"FROM transactions{where} ORDER BY id"
        )
        if per_page is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([per_page, (page - 1) * per_page])
        rows = conn.execute(query, params).fetchall()
        return [_row_to_dict(r) for r in rows]
    finally:
        conn.close()


def transaction_statistics(db_path: str, month: int) -> Dict[str, object]:
    """Return the total sale value and sold/unsold counts for *month*."""

    conn = _connect(db_path)
    try:
        where, params = _build_filters(month)
        row = conn.execute(
            f"""
            SELECT COALESCE(SUM(price), 0.0) AS total,
                   COUNT(CASE WHEN sold = 1 THEN 1 END) AS sold_items,
                   COUNT(CASE WHEN sold = 0 THEN 1 END) AS not_sold_items
            FROM transactions
            {where}
            """,
            params,
        ).fetchone()
        total = round(float(row[0] or 0.0), 2)
        return {
            "totalSales": int(total) if total.is_integer() else total,
            "soldItems": int(row[1] or 0),
            "notSoldItems": int(row[2] or 0),
        }
    finally:
        conn.close()


def price_histogram(db_path: str, month: int) -> List[Dict[str, object]]:
    """Count the month's transactions per fixed price range."""

    conn = _connect(db_path)
    try:
        where, params = _build_filters(month)
        rows = conn.execute(
            f"""
            SELECT price, COUNT(*) AS count
            FROM transactions
            {where}
            GROUP BY price
            """,
            params,
        ).fetchall()
    finally:
        conn.close()
    return bucket_prices(rows)


def category_breakdown(db_path: str, month: int) -> List[Dict[str, object]]:
    """Count the month's transactions grouped by category."""

    conn = _connect(db_path)
    try:
        where, params = _build_filters(month)
        rows = conn.execute(
            f"""
            SELECT category, COUNT(*) AS count
            FROM transactions
            {where}
            GROUP BY category
            ORDER BY category
            """,
            params,
        ).fetchall()
        return [{"category": row[0], "count": int(row[1])} for row in rows]
    finally:
        conn.close()
