# sales_tracker/core/models.py
from dataclasses import dataclass
from datetime import date, datetime


def _parse_sale_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError("Missing 'dateOfSale'")
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # The calendar date is kept as written, not shifted to UTC.
    return datetime.fromisoformat(text).date()


@dataclass
class Transaction:
    title: str
    description: str
    price: float
    date_of_sale: date
    category: str = ""
    sold: bool = False

    @classmethod
    def from_dict(cls, entry):
        """Build a Transaction from one element of the seed JSON array."""
        price = entry.get("price")
        if price is None:
            raise ValueError(f"Missing 'price' in entry: {entry}")
        try:
            sale_date = _parse_sale_date(entry.get("dateOfSale"))
        except ValueError as exc:
            raise ValueError(f"Invalid 'dateOfSale' in entry: {entry}") from exc
        return cls(
            title=entry.get("title") or "",
            description=entry.get("description") or "",
            price=float(price),
            date_of_sale=sale_date,
            category=entry.get("category") or "",
            sold=bool(entry.get("sold", False)),
        )
