from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app.services.rental_billing import compute_rent, paused_duration

T0 = datetime(2024, 3, 1, 8, 0, 0)


def test_per_day_rounds_partial_days_up():
    quote = compute_rent(rental_type="perDay", rate=Decimal("1000"), start=T0, end=T0 + timedelta(days=2, minutes=1))
    assert quote.billable_units == 3
    assert quote.total_rent == Decimal("3000.00")
    assert quote.duration_display == "3 days"
    assert quote.duration_minutes == 3 * 1440


def test_per_hour_bills_by_started_minute():
    quote = compute_rent(
        rental_type="perHour",
        rate=Decimal("600"),
        start=T0,
        end=T0 + timedelta(hours=1, minutes=30, seconds=1),
    )
    assert quote.billable_units == 91
    assert quote.total_rent == Decimal("910.00")
    assert quote.duration_display == "91 mins"


def test_per_hour_rounds_half_up_to_cents():
    # 1 minute at 100/hr is 1.6666...
    quote = compute_rent(rental_type="perHour", rate=Decimal("100"), start=T0, end=T0 + timedelta(minutes=1))
    assert quote.total_rent == Decimal("1.67")


def test_pauses_are_excluded_from_billable_time():
    pauses = [(T0 + timedelta(days=2), T0 + timedelta(days=4))]
    quote = compute_rent(
        rental_type="perDay",
        rate=Decimal("500"),
        start=T0,
        end=T0 + timedelta(days=10),
        pauses=pauses,
    )
    assert quote.paused_hours == Decimal("48.0000")
    assert quote.billable_units == 8
    assert quote.total_rent == Decimal("4000.00")


def test_open_pause_runs_until_end():
    end = T0 + timedelta(hours=10)
    assert paused_duration([(T0 + timedelta(hours=6), None)], end=end) == timedelta(hours=4)


def test_billable_time_never_negative():
    quote = compute_rent(rental_type="perDay", rate=Decimal("500"), start=T0 + timedelta(hours=1), end=T0)
    assert quote.billable_units == 0
    assert quote.total_rent == Decimal("0.00")


def test_naive_and_aware_datetimes_mix():
    aware_end = (T0 + timedelta(days=1)).replace(tzinfo=timezone.utc)
    quote = compute_rent(rental_type="perDay", rate=Decimal("250"), start=T0, end=aware_end)
    assert quote.billable_units == 1
    assert quote.total_rent == Decimal("250.00")


def test_per_hour_pause_scenario_bills_eight_hours():
    pauses = [(T0 + timedelta(hours=3), T0 + timedelta(hours=5))]
    quote = compute_rent(
        rental_type="perHour",
        rate=Decimal("150"),
        start=T0,
        end=T0 + timedelta(hours=10),
        pauses=pauses,
    )
    assert quote.billable_hours == Decimal("8.0000")
    assert quote.total_rent == Decimal("8") * Decimal("150")
