"""Time-based rent for machines, net of paused intervals.

Pure functions only: the same computation serves the live estimate and the
final charge at return.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Tuple

PER_DAY = "perDay"
PER_HOUR = "perHour"

_CENTS = Decimal("0.01")
_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class RentQuote:
    rental_type: str
    rate: Decimal
    start: datetime
    end: datetime
    total_hours: Decimal
    paused_hours: Decimal
    billable_hours: Decimal
    billable_units: int  # days for perDay, minutes for perHour
    total_rent: Decimal

    @property
    def duration_minutes(self) -> int:
        if self.rental_type == PER_HOUR:
            return self.billable_units
        return self.billable_units * 24 * 60

    @property
    def duration_display(self) -> str:
        if self.rental_type == PER_HOUR:
            return f"{self.billable_units} mins"
        return f"{self.billable_units} days"


def _to_utc_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _hours(delta: timedelta) -> Decimal:
    return (Decimal(str(delta.total_seconds())) / Decimal(3600)).quantize(Decimal("0.0001"))


def paused_duration(
    pauses: Iterable[Tuple[datetime, Optional[datetime]]],
    *,
    end: datetime,
) -> timedelta:
    """Sum paused intervals clipped to ``end``; an open interval (no resume) runs until ``end``."""
    end_utc = _to_utc_aware(end)
    total = timedelta(0)
    for paused_at, resumed_at in pauses:
        if paused_at is None:
            continue
        start = _to_utc_aware(paused_at)
        stop = _to_utc_aware(resumed_at) if resumed_at is not None else end_utc
        stop = min(stop, end_utc)
        if stop > start:
            total += stop - start
    return total


def compute_rent(
    *,
    rental_type: str,
    rate,
    start: datetime,
    end: datetime,
    pauses: Iterable[Tuple[datetime, Optional[datetime]]] = (),
) -> RentQuote:
    """
    perDay:  ceil(billable seconds / 86400) * rate
    perHour: ceil(billable minutes) * rate / 60
    Rounded half-up to 2 decimals. Billable time never goes below zero.
    """
    rate = Decimal(str(rate or 0))
    start_utc = _to_utc_aware(start)
    end_utc = _to_utc_aware(end)

    elapsed = max(end_utc - start_utc, timedelta(0))
    paused = paused_duration(pauses, end=end_utc)
    billable = max(elapsed - paused, timedelta(0))
    seconds = billable.total_seconds()

    if rental_type == PER_HOUR:
        units = math.ceil(seconds / 60)
        total = Decimal(units) * rate / Decimal(60)
    else:
        units = math.ceil(seconds / _SECONDS_PER_DAY)
        total = Decimal(units) * rate

    return RentQuote(
        rental_type=PER_HOUR if rental_type == PER_HOUR else PER_DAY,
        rate=rate,
        start=start_utc,
        end=end_utc,
        total_hours=_hours(elapsed),
        paused_hours=_hours(paused),
        billable_hours=_hours(billable),
        billable_units=units,
        total_rent=total.quantize(_CENTS, rounding=ROUND_HALF_UP),
    )


def machine_rate(machine) -> Decimal:
    if machine.assigned_as_rental:
        return Decimal(str(machine.assigned_rental_rate or 0))
    return Decimal(str(machine.per_day_expense or 0))


def machine_pauses(machine) -> list[Tuple[datetime, Optional[datetime]]]:
    pauses = [(p.paused_at, p.resumed_at) for p in machine.rent_pauses]
    if machine.is_rent_paused and machine.rent_paused_at is not None:
        pauses.append((machine.rent_paused_at, None))
    return pauses


def quote_machine(machine, *, now: datetime) -> RentQuote:
    start = machine.assigned_at or machine.created_at
    end = machine.returned_at or now
    return compute_rent(
        rental_type=machine.rental_type,
        rate=machine_rate(machine),
        start=start,
        end=end,
        pauses=machine_pauses(machine),
    )
