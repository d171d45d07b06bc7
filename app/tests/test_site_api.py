from decimal import Decimal

from app.models.machine import Machine
from app.models.user import User


def _setup(factory):
    admin = factory.user(name="Owner", role="admin")
    mine = factory.project(name="Site A")
    other = factory.project(name="Site B")
    manager = factory.user(name="Ravi", role="sitemanager", sites=[mine])
    return admin, manager, mine, other


def test_machine_outside_assigned_sites_is_forbidden(client, db, factory, headers_for):
    _admin, manager, mine, other = _setup(factory)
    machine = Machine(name="Crane", project_id=other.id)
    db.add(machine)
    db.commit()

    r = client.get(f"/site/machines/{machine.id}", headers=headers_for(manager.id))
    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Access denied. Project not assigned to you."}

    missing = client.get("/site/machines/987654", headers=headers_for(manager.id))
    assert missing.status_code == 404


def test_site_lists_only_assigned_machines(client, db, factory, headers_for):
    _admin, manager, mine, other = _setup(factory)
    db.add_all([Machine(name="Mixer", project_id=mine.id), Machine(name="Crane", project_id=other.id)])
    db.commit()

    r = client.get("/site/machines", headers=headers_for(manager.id))
    assert r.status_code == 200
    assert [m["name"] for m in r.json()["data"]] == ["Mixer"]


def test_expense_on_unassigned_project_is_forbidden(client, factory, headers_for):
    _admin, manager, _mine, other = _setup(factory)
    r = client.post(
        "/site/expenses",
        json={"project_id": other.id, "name": "Tea", "amount": "50"},
        headers=headers_for(manager.id),
    )
    assert r.status_code == 403


def test_allocated_funds_pay_site_expenses(client, db, factory, headers_for):
    admin, manager, mine, _other = _setup(factory)

    alloc = client.post(
        "/admin/accounts/allocate",
        json={"manager_id": manager.id, "amount": "1000", "payment_mode": "cash"},
        headers=headers_for(admin.id),
    )
    assert alloc.status_code == 201, alloc.text

    spent = client.post(
        "/site/expenses",
        json={"project_id": mine.id, "name": "Cement bags", "amount": "400", "category": "material"},
        headers=headers_for(manager.id),
    )
    assert spent.status_code == 201, spent.text

    too_much = client.post(
        "/site/expenses",
        json={"project_id": mine.id, "name": "Generator", "amount": "601"},
        headers=headers_for(manager.id),
    )
    assert too_much.status_code == 400
    assert too_much.json()["error"].startswith("Insufficient wallet balance")

    wallet = client.get("/site/wallet", headers=headers_for(manager.id))
    assert wallet.status_code == 200
    assert Decimal(str(wallet.json()["data"]["wallet_balance"])) == Decimal("600")

    db.expire_all()
    assert db.query(User).filter_by(id=manager.id).one().wallet_balance == Decimal("600")


def test_site_stock_out_insufficient_stock(client, factory, headers_for):
    _admin, manager, mine, _other = _setup(factory)
    headers = headers_for(manager.id)

    for qty in ("50", "30"):
        r = client.post(
            "/site/stocks",
            json={"project_id": mine.id, "material_name": "Cement", "quantity": qty, "unit_price": "10"},
            headers=headers,
        )
        assert r.status_code == 201, r.text

    r = client.post(
        "/site/stock-out",
        json={"project_id": mine.id, "material_name": "Cement", "quantity": "60", "used_for": "Slab"},
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["success"] is False

    ok = client.post(
        "/site/stock-out",
        json={"project_id": mine.id, "material_name": "Cement", "quantity": "45", "used_for": "Slab"},
        headers=headers,
    )
    assert ok.status_code == 201, ok.text

    materials = client.get("/site/materials", headers=headers).json()["data"]
    assert Decimal(str(materials[0]["quantity"])) == Decimal("35")


def test_site_transfer_notifies_admin(client, factory, headers_for):
    admin, manager, mine, other = _setup(factory)
    headers = headers_for(manager.id)

    client.post(
        "/site/stocks",
        json={"project_id": mine.id, "material_name": "Sand", "quantity": "20", "unit_price": "5"},
        headers=headers,
    )
    r = client.post(
        "/site/transfers",
        json={"type": "stock", "item_id": "Sand", "from_project": mine.id, "to_project": other.id, "quantity": "8"},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    assert r.json()["data"]["status"] == "approved"

    notes = client.get("/admin/notifications", headers=headers_for(admin.id)).json()["data"]
    assert [n["title"] for n in notes] == ["New Transfer Request"]

    read = client.put(f"/admin/notifications/{notes[0]['id']}/read", headers=headers_for(admin.id))
    assert read.status_code == 200
    assert read.json()["data"]["read"] is True


def test_transfer_from_unassigned_project_forbidden(client, factory, headers_for):
    _admin, manager, mine, other = _setup(factory)
    r = client.post(
        "/site/transfers",
        json={"type": "stock", "item_id": "Sand", "from_project": other.id, "to_project": mine.id, "quantity": "1"},
        headers=headers_for(manager.id),
    )
    assert r.status_code == 403


def test_attendance_and_labour_payment(client, db, factory, headers_for):
    _admin, manager, mine, _other = _setup(factory)
    manager.wallet_balance = Decimal("2000")
    db.commit()
    headers = headers_for(manager.id)

    labour = client.post(
        "/site/labours",
        json={"name": "Suresh", "phone": "9000000001", "daily_wage": "800", "designation": "Mason", "assigned_site_id": mine.id},
        headers=headers,
    )
    assert labour.status_code == 201, labour.text
    labour_id = labour.json()["data"]["id"]

    for status in ("present", "half"):
        r = client.post(
            "/site/labour-attendance",
            json={"labour_id": labour_id, "project_id": mine.id, "date": "2024-06-01", "status": status},
            headers=headers,
        )
        assert r.status_code == 201, r.text

    labours = client.get("/site/labours", headers=headers).json()["data"]
    assert Decimal(str(labours[0]["pending_payout"])) == Decimal("400")

    pay = client.post(
        "/site/payments/labour",
        json={"labour_id": labour_id, "amount": "400", "deduction": "50"},
        headers=headers,
    )
    assert pay.status_code == 201, pay.text
    assert Decimal(str(pay.json()["data"]["final_amount"])) == Decimal("350")

    wallet = client.get("/site/wallet", headers=headers).json()["data"]
    assert Decimal(str(wallet["wallet_balance"])) == Decimal("1650")


def test_transfer_of_machine_held_by_another_project_rejected(client, db, factory, headers_for):
    _admin, manager, mine, other = _setup(factory)
    third = factory.project(name="Site C")
    crane = Machine(name="Crane", project_id=other.id)
    db.add(crane)
    db.commit()

    r = client.post(
        "/site/transfers",
        json={"type": "machine", "item_id": str(crane.id), "from_project": mine.id, "to_project": third.id},
        headers=headers_for(manager.id),
    )
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Machine is not at the source project"}

    db.refresh(crane)
    assert crane.project_id == other.id


def test_attendance_for_labour_at_another_site_forbidden(client, db, factory, headers_for):
    from app.models.labour import Labour

    _admin, manager, mine, other = _setup(factory)
    labour = Labour(name="Gopal", phone="9000000009", daily_wage=Decimal("800"), designation="Mason", assigned_site_id=other.id)
    db.add(labour)
    db.commit()

    r = client.post(
        "/site/labour-attendance",
        json={"labour_id": labour.id, "project_id": mine.id, "date": "2024-06-01", "status": "present"},
        headers=headers_for(manager.id),
    )
    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Access denied. Project not assigned to you."}

    db.refresh(labour)
    assert labour.pending_payout == Decimal("0")


def _add_lot(client, headers, project_id, material, quantity):
    r = client.post(
        "/site/stocks",
        json={"project_id": project_id, "material_name": material, "quantity": quantity, "unit_price": "10"},
        headers=headers,
    )
    assert r.status_code == 201, r.text


def test_daily_report_consumes_materials(client, factory, headers_for):
    _admin, manager, mine, _other = _setup(factory)
    headers = headers_for(manager.id)
    _add_lot(client, headers, mine.id, "Cement", "40")
    _add_lot(client, headers, mine.id, "Bitumen", "25")

    r = client.post(
        "/site/daily-reports",
        json={
            "project_id": mine.id,
            "report_type": "Evening Report",
            "description": "Laid base course",
            "road_progress": [{"description": "Base course", "value": "120", "unit": "m"}],
            "stock_used": [
                {"material_name": "Cement", "quantity": "15", "unit": "bag"},
                {"material_name": "Bitumen", "quantity": "5", "unit": "kg"},
            ],
        },
        headers=headers,
    )
    assert r.status_code == 201, r.text
    report = r.json()["data"]
    assert [s["material_name"] for s in report["stock_used"]] == ["Cement", "Bitumen"]
    assert {s["used_for"] for s in report["stock_used"]} == {"Daily Report - Evening Report"}
    assert report["stock_used"][0]["remarks"] == "Road construction: Base course: 120 m"

    left = {m["material_name"]: Decimal(str(m["quantity"])) for m in client.get("/site/materials", headers=headers).json()["data"]}
    assert left == {"Cement": Decimal("25"), "Bitumen": Decimal("20")}

    listed = client.get("/site/daily-reports", headers=headers).json()["data"]
    assert [d["id"] for d in listed] == [report["id"]]


def test_daily_report_with_short_material_changes_nothing(client, factory, headers_for):
    _admin, manager, mine, _other = _setup(factory)
    headers = headers_for(manager.id)
    _add_lot(client, headers, mine.id, "Cement", "40")
    _add_lot(client, headers, mine.id, "Bitumen", "3")

    r = client.post(
        "/site/daily-reports",
        json={
            "project_id": mine.id,
            "report_type": "Full Day Report",
            "description": "Surfacing",
            "stock_used": [
                {"material_name": "Cement", "quantity": "15", "unit": "bag"},
                {"material_name": "Bitumen", "quantity": "5", "unit": "kg"},
            ],
        },
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Insufficient stock for Bitumen"}

    left = {m["material_name"]: Decimal(str(m["quantity"])) for m in client.get("/site/materials", headers=headers).json()["data"]}
    assert left == {"Cement": Decimal("40"), "Bitumen": Decimal("3")}
    assert client.get("/site/daily-reports", headers=headers).json()["data"] == []
    assert client.get("/site/stock-out", headers=headers).json()["data"] == []


def test_daily_report_for_unassigned_project_forbidden(client, factory, headers_for):
    _admin, manager, _mine, other = _setup(factory)
    r = client.post(
        "/site/daily-reports",
        json={"project_id": other.id, "report_type": "Morning Report", "description": "Survey"},
        headers=headers_for(manager.id),
    )
    assert r.status_code == 403


def test_attendance_must_use_the_labours_own_site(client, db, factory, headers_for):
    from app.models.labour import Labour

    a = factory.project(name="Site A")
    b = factory.project(name="Site B")
    manager = factory.user(name="Ravi", role="sitemanager", sites=[a, b])
    labour = Labour(name="Gopal", phone="9000000009", daily_wage=Decimal("800"), designation="Mason", assigned_site_id=b.id)
    db.add(labour)
    db.commit()

    r = client.post(
        "/site/labour-attendance",
        json={"labour_id": labour.id, "project_id": a.id, "date": "2024-06-01", "status": "present"},
        headers=headers_for(manager.id),
    )
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Labour is not assigned to this project"}
