def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_missing_authorization_header_401(client):
    r = client.get("/admin/projects")
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Unauthorized. Please log in."}


def test_wrong_scheme_401(client, factory, headers_for):
    admin = factory.user(name="Owner", role="admin")
    token = headers_for(admin.id)["Authorization"].split(" ", 1)[1]
    r = client.get("/admin/projects", headers={"Authorization": f"Basic {token}"})
    assert r.status_code == 401


def test_garbled_bearer_token_401(client):
    r = client.get("/admin/projects", headers={"Authorization": "Bearer not-a-real-token"})
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_token_for_unknown_user_rejected(client):
    r = client.post("/auth/token", json={"user_id": 999999})
    assert r.status_code == 401


def test_token_for_inactive_user_rejected(client, db, factory):
    manager = factory.user(name="Gone", role="sitemanager")
    manager.active = False
    db.commit()

    r = client.post("/auth/token", json={"user_id": manager.id})
    assert r.status_code == 401


def test_token_carries_role(client, factory):
    manager = factory.user(name="Ravi", role="sitemanager")
    r = client.post("/auth/token", json={"user_id": manager.id})
    assert r.status_code == 200
    assert r.json()["role"] == "sitemanager"


def test_site_manager_cannot_use_admin_routes(client, factory, headers_for):
    manager = factory.user(name="Ravi", role="sitemanager")
    r = client.get("/admin/projects", headers=headers_for(manager.id))
    assert r.status_code == 403
    assert r.json() == {"success": False, "error": "Forbidden. Admin access required."}


def test_admin_cannot_use_site_routes(client, factory, headers_for):
    admin = factory.user(name="Owner", role="admin")
    r = client.get("/site/dashboard", headers=headers_for(admin.id))
    assert r.status_code == 403
    assert r.json()["error"] == "Forbidden. Site Manager access required."


def test_validation_errors_use_error_envelope(client, factory, headers_for):
    admin = factory.user(name="Owner", role="admin")
    r = client.post("/admin/projects", json={"location": "Pune"}, headers=headers_for(admin.id))
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_new_project_is_visible_to_site_managers(client, factory, headers_for):
    admin = factory.user(name="Owner", role="admin")
    manager = factory.user(name="Ravi", role="sitemanager")

    created = client.post(
        "/admin/projects",
        json={"name": "Tower B", "location": "Nashik"},
        headers=headers_for(admin.id),
    )
    assert created.status_code == 201, created.text
    body = created.json()
    assert body["success"] is True
    project_id = body["data"]["id"]

    dashboard = client.get("/site/dashboard", headers=headers_for(manager.id))
    assert dashboard.status_code == 200
    assert project_id in dashboard.json()["data"]["user"]["assigned_site_ids"]


def test_new_site_manager_gets_existing_projects(client, factory, headers_for):
    admin = factory.user(name="Owner", role="admin")
    project = factory.project(name="Bridge")

    r = client.post(
        "/admin/users",
        json={"name": "Meera", "email": "meera@example.com", "role": "sitemanager"},
        headers=headers_for(admin.id),
    )
    assert r.status_code == 201, r.text
    assert r.json()["data"]["assigned_site_ids"] == [project.id]

    dup = client.post(
        "/admin/users",
        json={"name": "Meera", "email": "meera@example.com", "role": "sitemanager"},
        headers=headers_for(admin.id),
    )
    assert dup.status_code == 400
