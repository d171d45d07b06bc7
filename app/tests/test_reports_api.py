from decimal import Decimal

from app.models.contractor import Contractor
from app.models.vendor import Vendor
from app.services import accounts_service, ledger_service


def _money(value) -> Decimal:
    return Decimal(str(value))


def test_profit_and_loss_uses_budgets_and_expenses(db, factory):
    project = factory.project(name="Tower")
    project.budget = Decimal("50000")
    db.commit()

    ledger_service.record_expense(db=db, project_id=project.id, name="Steel", amount=Decimal("12000"))
    db.commit()

    rows = {row["type"]: row["amount"] for row in accounts_service.profit_and_loss(db)}
    assert _money(rows["Revenue"]) == Decimal("50000")
    assert _money(rows["Expenses"]) == Decimal("12000")
    assert _money(rows["Profit"]) == Decimal("38000")


def test_admin_dashboard_counts_and_outstanding(client, db, factory, headers_for):
    admin = factory.user(name="Owner", role="admin")
    running = factory.project(name="Bridge")
    done = factory.project(name="School")
    done.status = "completed"
    factory.user(name="Ravi", role="sitemanager", sites=[running])
    db.add_all(
        [
            Vendor(name="Sand Co", contact="9000000001", pending_amount=Decimal("700")),
            Contractor(name="Shiv Earthworks", mobile="9000000002", pending_amount=Decimal("300")),
        ]
    )
    db.commit()

    r = client.get("/admin/dashboard", headers=headers_for(admin.id))
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["total_projects"] == 2
    assert data["running_projects"] == 1
    assert data["completed_projects"] == 1
    assert data["total_site_managers"] == 1
    assert _money(data["vendor_pending"]) == Decimal("700")
    assert _money(data["contractor_pending"]) == Decimal("300")
    assert {p["name"] for p in data["projects"]} == {"Bridge", "School"}


def test_site_manager_cannot_read_reports(client, factory, headers_for):
    manager = factory.user(name="Ravi", role="sitemanager")

    r = client.get("/admin/reports/pl", headers=headers_for(manager.id))
    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Forbidden. Admin access required."}
