import math
from datetime import date, datetime, timezone
from typing import Dict, Mapping, Optional, Union

from app.services.errors import ValidationError

SECONDS_PER_DAY = 86400

DateLike = Union[str, date, datetime, None]


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date(value: DateLike) -> Optional[datetime]:
    """Parse an ISO date or datetime into a naive UTC datetime.

    Values carrying an offset are converted to UTC first; naive values are
    taken as UTC already.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _naive_utc(parsed)


def compute_rental_days(start: DateLike, end: DateLike) -> int:
    """Number of billed rental days between two dates, never negative.

    A partial day counts as a whole one. Missing or unparsable dates give 0,
    which callers treat as "not checkout-able".
    """
    start_dt = parse_date(start)
    end_dt = parse_date(end)
    if start_dt is None or end_dt is None:
        return 0
    days = math.ceil((end_dt - start_dt).total_seconds() / SECONDS_PER_DAY)
    return days if days > 0 else 0


def compute_line_totals(price_per_day, security_deposit, rental_days, quantity) -> Dict[str, float]:
    return {
        "subtotal": price_per_day * rental_days * quantity,
        "deposit_total": security_deposit * quantity,
    }


def compute_rental_total(price_per_day, rental_days, quantity, security_deposit) -> Dict[str, float]:
    totals = compute_line_totals(price_per_day, security_deposit, rental_days, quantity)
    return {
        "rental_fee": totals["subtotal"],
        "deposit": totals["deposit_total"],
        "total": totals["subtotal"] + totals["deposit_total"],
    }


def coupon_percent(code: Optional[str], coupons: Mapping[str, float]) -> float:
    """Percentage off rental fees for ``code``; 0 when no code is given."""
    if code is None or not str(code).strip():
        return 0.0
    normalized = str(code).strip().upper()
    known = {k.upper(): float(v) for k, v in (coupons or {}).items()}
    if normalized not in known:
        raise ValidationError("Invalid coupon code")
    return known[normalized]


def coupon_discount(code: Optional[str], total_rental_fees: float, coupons: Mapping[str, float]) -> float:
    """Discount for ``code``; applies to rental fees only, never to deposits."""
    return total_rental_fees * coupon_percent(code, coupons) / 100.0


__all__ = [
    "parse_date",
    "compute_rental_days",
    "compute_line_totals",
    "compute_rental_total",
    "coupon_percent",
    "coupon_discount",
]
