from decimal import Decimal
from types import SimpleNamespace

from app.services.party_balance import apply_charge, apply_payment, reverse_payment, settle_charge, settle_payment


def test_payment_within_pending_reduces_pending_only():
    assert apply_payment(Decimal("1000"), Decimal("0"), Decimal("400")) == (Decimal("600"), Decimal("0"))


def test_overpayment_spills_into_advance():
    pending, advance = apply_payment(Decimal("1000"), Decimal("0"), Decimal("1500"))
    assert pending == Decimal("0")
    assert advance == Decimal("500")


def test_exact_payment_clears_pending():
    assert apply_payment(Decimal("250.50"), Decimal("10"), Decimal("250.50")) == (Decimal("0"), Decimal("10"))


def test_charge_consumes_advance_before_pending():
    assert apply_charge(Decimal("0"), Decimal("500"), Decimal("200")) == (Decimal("0"), Decimal("300"))
    assert apply_charge(Decimal("100"), Decimal("500"), Decimal("800")) == (Decimal("400"), Decimal("0"))


def test_reversal_restores_state_before_overpayment():
    pending, advance = apply_payment(Decimal("1000"), Decimal("0"), Decimal("1500"))
    assert reverse_payment(pending, advance, Decimal("1500")) == (Decimal("1000"), Decimal("0"))


def test_balances_never_go_negative():
    pending, advance = apply_payment(None, None, Decimal("75"))
    assert pending >= 0 and advance >= 0
    pending, advance = apply_charge(pending, advance, Decimal("100"))
    assert (pending, advance) == (Decimal("25"), Decimal("0"))


def test_settle_helpers_write_back_to_party():
    vendor = SimpleNamespace(pending_amount=Decimal("1000"), advance_payment=Decimal("0"))
    settle_payment(vendor, Decimal("1500"))
    assert (vendor.pending_amount, vendor.advance_payment) == (Decimal("0"), Decimal("500"))

    settle_charge(vendor, Decimal("700"))
    assert (vendor.pending_amount, vendor.advance_payment) == (Decimal("200"), Decimal("0"))
