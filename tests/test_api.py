def _create(client, payload, **headers):
    response = client.post("/bills/", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


# ------------------------------------------------------------
# Bills
# ------------------------------------------------------------
def test_create_bill(client, make_bill_payload):
    body = _create(client, make_bill_payload())

    assert body["success"] == "Bill saved successfully!"
    data = body["data"]
    assert data["bill"]["invoice_number"] == "HG0100"
    assert data["bill"]["status"] == "Pending"
    assert data["bill"]["discount"] == 125.0
    assert data["company"]["name"] == "Your Company Name"
    assert data["totals"] == {
        "subtotal": 1250.0,
        "discount": 125.0,
        "subtotal_after_discount": 1125.0,
        "vat": 146.25,
        "total": 1271.25,
        "applied_discount_label": "Discount (10%)",
    }


def test_create_bill_request_validation(client, make_bill_payload):
    response = client.post("/bills/", json=make_bill_payload(items=[]))

    assert response.status_code == 422
    assert response.json()["error"].startswith("Invalid fields!")
    assert client.get("/bills/").json()["data"] == []


def test_next_invoice_number(client, make_bill_payload):
    assert client.get("/bills/next-invoice-number").json() == {"invoice_number": "HG0100"}
    _create(client, make_bill_payload())
    assert client.get("/bills/next-invoice-number").json() == {"invoice_number": "HG0101"}


def test_list_bills_newest_first(client, make_bill_payload):
    _create(client, make_bill_payload(client_name="First"))
    _create(client, make_bill_payload(client_name="Second"))

    rows = client.get("/bills/").json()["data"]

    assert [r["client_name"] for r in rows] == ["Second", "First"]
    assert rows[0]["amount"] == 1271.25


def test_get_bill(client, make_bill_payload):
    bill_id = _create(client, make_bill_payload())["data"]["bill"]["id"]

    data = client.get(f"/bills/{bill_id}").json()["data"]

    assert len(data["bill"]["items"]) == 2
    assert data["totals"]["total"] == 1271.25
    assert data["totals"]["applied_discount_label"] == "Discount"


def test_get_missing_bill(client):
    response = client.get("/bills/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Bill not found."}


def test_update_bill(client, make_bill_payload):
    bill_id = _create(client, make_bill_payload())["data"]["bill"]["id"]
    payload = make_bill_payload(
        client_name="Everest Suppliers",
        items=[{"description": "Audit", "quantity": 1, "unit": "job", "rate": 2000}],
        discount_amount=0,
    )
    del payload["discount_type"]
    del payload["discount_percentage"]

    response = client.put(f"/bills/{bill_id}", json=payload)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["bill"]["client_name"] == "Everest Suppliers"
    assert data["bill"]["invoice_number"] == "HG0100"
    assert data["totals"]["total"] == 2260.0


def test_update_status(client, make_bill_payload):
    bill_id = _create(client, make_bill_payload())["data"]["bill"]["id"]

    response = client.patch(f"/bills/{bill_id}/status", json={"status": "Paid"})

    assert response.status_code == 200
    assert response.json()["success"] == "Bill HG0100 marked as Paid."
    assert client.get(f"/bills/{bill_id}").json()["data"]["bill"]["status"] == "Paid"


def test_update_status_rejects_unknown_value(client, make_bill_payload):
    bill_id = _create(client, make_bill_payload())["data"]["bill"]["id"]

    response = client.patch(f"/bills/{bill_id}/status", json={"status": "Cancelled"})

    assert response.status_code == 422
    assert "Cancelled" in response.json()["error"]
    assert client.get(f"/bills/{bill_id}").json()["data"]["bill"]["status"] == "Pending"


def test_delete_bill(client, make_bill_payload):
    bill_id = _create(client, make_bill_payload())["data"]["bill"]["id"]

    response = client.delete(f"/bills/{bill_id}")

    assert response.status_code == 200
    assert response.json()["success"] == "Bill deleted successfully."
    assert client.get(f"/bills/{bill_id}").status_code == 404
    assert client.delete(f"/bills/{bill_id}").status_code == 404


def test_download_pdf(client, make_bill_payload):
    bill_id = _create(client, make_bill_payload())["data"]["bill"]["id"]

    response = client.get(f"/bills/{bill_id}/pdf")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="HG0100.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


# ------------------------------------------------------------
# Dashboard
# ------------------------------------------------------------
def test_dashboard_summary(client, make_bill_payload):
    first = _create(client, make_bill_payload())["data"]["bill"]["id"]
    _create(client, make_bill_payload())
    client.patch(f"/bills/{first}/status", json={"status": "Paid"})

    body = client.get("/dashboard/summary").json()

    assert body["stats"] == {
        "total_revenue": 2542.5,
        "total_bills": 2,
        "paid_bills": 1,
        "due_bills": 1,
    }
    assert [r["invoice_number"] for r in body["recent_bills"]] == ["HG0101", "HG0100"]


def test_dashboard_empty(client):
    body = client.get("/dashboard/summary").json()
    assert body["stats"]["total_bills"] == 0
    assert body["stats"]["total_revenue"] == 0
    assert body["recent_bills"] == []


# ------------------------------------------------------------
# Company / auth / account
# ------------------------------------------------------------
def test_company_profile(client, make_bill_payload):
    assert client.get("/companies/me").json()["name"] == "Your Company Name"

    response = client.put("/companies/me", json={"name": "Haitomns Groups", "vat_number": "300000001"})
    assert response.status_code == 200
    assert response.json()["data"]["user_id"] == 1

    assert client.get("/companies/me").json()["name"] == "Haitomns Groups"
    assert _create(client, make_bill_payload())["data"]["company"]["name"] == "Haitomns Groups"


def test_company_profile_validation(client):
    response = client.put("/companies/me", json={"name": "H"})
    assert response.status_code == 422
    assert response.json()["error"].startswith("Invalid fields!")


def test_register_and_login(client):
    payload = {
        "name": "Sita Sharma",
        "phone": "9841234567",
        "email": "sita@haitomns.com",
        "password": "correct-horse",
    }
    registered = client.post("/auth/register", json=payload)
    assert registered.status_code == 200
    user_id = registered.json()["data"]["id"]

    duplicate = client.post("/auth/register", json=payload)
    assert duplicate.status_code == 409

    login = client.post("/auth/login", json={"email": "sita@haitomns.com", "password": "correct-horse"})
    assert login.json()["data"]["id"] == user_id

    bad = client.post("/auth/login", json={"email": "sita@haitomns.com", "password": "wrong-horse"})
    assert bad.status_code == 422
    assert bad.json() == {"error": "Invalid credentials!"}

    assert client.get("/auth/me", headers={"X-User-Id": str(user_id)}).json() == {"user": {"id": user_id}}


def test_bill_owner_follows_user_header(client, make_bill_payload):
    user_id = client.post(
        "/auth/register",
        json={"name": "Sita Sharma", "phone": "9841234567", "email": "sita@haitomns.com", "password": "correct-horse"},
    ).json()["data"]["id"]

    data = _create(client, make_bill_payload(), **{"X-User-Id": str(user_id)})["data"]
    assert data["bill"]["user_id"] == user_id


def test_create_bill_for_unknown_user(client, make_bill_payload):
    response = client.post("/bills/", json=make_bill_payload(), headers={"X-User-Id": "999"})

    assert response.status_code == 404
    assert response.json() == {"error": "User not found."}
    assert client.get("/bills/").json()["data"] == []


def test_over_precise_rate_is_rejected(client, make_bill_payload):
    payload = make_bill_payload(items=[{"description": "Bolts", "quantity": 8, "unit": "pcs", "rate": 0.125}])

    response = client.post("/bills/", json=payload)

    assert response.status_code == 422
    assert response.json()["error"].startswith("Invalid fields! items.0.rate")


def test_default_user_without_header(client):
    assert client.get("/auth/me").json() == {"user": {"id": 1}}


def test_invalid_user_header(client):
    response = client.get("/auth/me", headers={"X-User-Id": "abc"})
    assert response.status_code == 422
    assert "error" in response.json()


def test_account(client):
    details = client.get("/account/").json()
    assert details["user"]["id"] == 1
    assert details["company"] is None

    response = client.put(
        "/account/profile",
        json={"name": "Ram Thapa", "email": "ram@haitomns.com", "phone": "9812345678"},
    )
    assert response.status_code == 200
    assert client.get("/account/").json()["user"]["email"] == "ram@haitomns.com"

    # Seeded user has no password to verify against
    response = client.put(
        "/account/password",
        json={"current_password": "anything", "new_password": "battery-staple"},
    )
    assert response.status_code == 404


# ------------------------------------------------------------
# System
# ------------------------------------------------------------
def test_health(client):
    assert client.get("/system/health").json() == {"status": "ok", "database": "ok", "version": "1.0.0"}


def test_root(client):
    assert client.get("/").json()["status"] == "running"
