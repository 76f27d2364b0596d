from datetime import datetime, timedelta, timezone

import pytest

from app.services.errors import ValidationError
from app.services.pricing import (
    compute_line_totals,
    compute_rental_days,
    compute_rental_total,
    coupon_discount,
    coupon_percent,
    parse_date,
)

COUPONS = {"STYLE10": 10}


def test_rental_days_whole_days():
    assert compute_rental_days("2024-06-01", "2024-06-04") == 3


def test_partial_day_rounds_up():
    assert compute_rental_days("2024-06-01T10:00:00", "2024-06-02T11:00:00") == 2


def test_end_before_start_is_zero():
    assert compute_rental_days("2024-06-05", "2024-06-01") == 0


def test_same_day_is_zero():
    assert compute_rental_days("2024-06-01", "2024-06-01") == 0


@pytest.mark.parametrize("start,end", [(None, "2024-06-02"), ("2024-06-01", ""), ("garbage", "2024-06-02")])
def test_missing_or_bad_dates_are_zero(start, end):
    assert compute_rental_days(start, end) == 0


def test_parse_date_accepts_zulu_and_datetime():
    assert parse_date("2024-06-01T00:00:00Z") == datetime(2024, 6, 1)
    assert parse_date(datetime(2024, 6, 1, 12)) == datetime(2024, 6, 1, 12)
    assert parse_date("not a date") is None


def test_parse_date_converts_offsets_to_utc():
    assert parse_date("2024-06-01T05:30:00+05:30") == datetime(2024, 6, 1)
    aware = datetime(2024, 6, 1, 2, tzinfo=timezone(timedelta(hours=2)))
    assert parse_date(aware) == datetime(2024, 6, 1)


def test_mixed_offsets_count_the_real_span():
    # 2024-05-31T18:30Z to 2024-06-01T23:00Z is 28.5 hours
    assert compute_rental_days("2024-06-01T00:00:00+05:30", "2024-06-01T23:00:00Z") == 2
    assert compute_rental_days("2024-06-01T00:00:00Z", "2024-06-01T23:00:00-02:00") == 2


def test_compute_rental_total_matches_formula():
    totals = compute_rental_total(100, 3, 1, 50)
    assert totals == {"rental_fee": 300, "deposit": 50, "total": 350}

    totals = compute_rental_total(200, 2, 2, 100)
    assert totals["total"] == 1000


def test_line_totals_scale_deposit_by_quantity():
    assert compute_line_totals(80, 20, 4, 3) == {"subtotal": 960, "deposit_total": 60}


def test_coupon_percent_is_case_insensitive():
    assert coupon_percent("style10", COUPONS) == 10
    assert coupon_percent("  STYLE10 ", COUPONS) == 10


def test_no_coupon_means_no_discount():
    assert coupon_percent(None, COUPONS) == 0
    assert coupon_percent("", COUPONS) == 0


def test_unknown_coupon_rejected():
    with pytest.raises(ValidationError):
        coupon_percent("FREESTUFF", COUPONS)


def test_coupon_discount_only_touches_rental_fees():
    assert coupon_discount("STYLE10", 300, COUPONS) == pytest.approx(30)
