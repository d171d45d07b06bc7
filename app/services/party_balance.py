"""Drain-then-overflow arithmetic for vendor and contractor balances.

A party carries two non-negative counters: ``pending`` (what we owe them) and
``advance`` (what we paid beyond that). Payments drain ``pending`` first and the
overflow lands in ``advance``. Charges (new supplies, or reversing a payment)
consume ``advance`` first and the remainder lands in ``pending``.
"""

from decimal import Decimal
from typing import Tuple

ZERO = Decimal("0")


def _as_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def apply_payment(pending, advance, amount) -> Tuple[Decimal, Decimal]:
    pending = _as_decimal(pending)
    advance = _as_decimal(advance)
    amount = _as_decimal(amount)

    if amount <= pending:
        return pending - amount, advance

    overflow = amount - pending
    return ZERO, advance + overflow


def apply_charge(pending, advance, amount) -> Tuple[Decimal, Decimal]:
    pending = _as_decimal(pending)
    advance = _as_decimal(advance)
    amount = _as_decimal(amount)

    if amount <= advance:
        return pending, advance - amount

    remainder = amount - advance
    return pending + remainder, ZERO


# undoing a payment is the same movement as charging the party again
reverse_payment = apply_charge


def settle_payment(party, amount) -> None:
    party.pending_amount, party.advance_payment = apply_payment(
        party.pending_amount, party.advance_payment, amount
    )


def settle_charge(party, amount) -> None:
    party.pending_amount, party.advance_payment = apply_charge(
        party.pending_amount, party.advance_payment, amount
    )
