"""End-to-end flows through the HTTP API on an in-memory database."""

from techmarket.models import Booking, Review

from conftest import TEST_PASSWORD, auth_headers, count_rows, make_user, make_technician, make_booking


async def _register(client, email, role="user", name="Someone"):
    resp = await client.post("/api/auth/register", json={
        "name": name, "email": email, "password": TEST_PASSWORD, "role": role,
    })
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return body["user_id"], {"x-auth-token": body["token"]}


async def test_root(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "API is running"}


async def test_marketplace_flow(client, db):
    admin = await make_user(db, role="admin")
    admin_headers = auth_headers(admin.id, "admin")

    _, alice = await _register(client, "alice@example.com", name="Alice")
    bob_id, bob = await _register(client, "bob@example.com", role="technician", name="Bob")

    # Bob's placeholder profile is hidden until an admin verifies it.
    assert (await client.get("/api/technicians")).json() == []
    pending = (await client.get("/api/admin/unverified-technicians", headers=admin_headers)).json()
    assert len(pending) == 1
    tech_id = pending[0]["id"]
    assert pending[0]["user"]["id"] == bob_id

    resp = await client.post("/api/profile/technician", headers=bob, json={
        "services_offered": "Plumbing, Electrical Services",
        "contact_number": "+15551234567",
        "location": "Springfield",
        "service_areas": "Downtown, Riverside",
    })
    assert resp.status_code == 200
    assert resp.json()["services_offered"] == ["Plumbing", "Electrical Services"]

    resp = await client.put(f"/api/admin/technicians/{tech_id}/verify", headers=admin_headers)
    assert resp.status_code == 200
    listed = (await client.get("/api/technicians")).json()
    assert [t["id"] for t in listed] == [tech_id]

    found = (await client.get("/api/technicians/search", params={"serviceArea": "river"})).json()
    assert [t["id"] for t in found] == [tech_id]

    booking = {
        "technician_id": tech_id, "service": "Plumbing",
        "booking_date": "2024-06-03", "booking_time": "10:00 AM",
    }
    resp = await client.post("/api/bookings", headers=alice, json=booking)
    assert resp.status_code == 201
    booking_id = resp.json()["id"]
    assert resp.json()["status"] == "pending"

    # Same slot again is a conflict; a Saturday is outside Bob's availability.
    assert (await client.post("/api/bookings", headers=alice, json=booking)).status_code == 409
    resp = await client.post("/api/bookings", headers=alice, json={**booking, "booking_date": "2024-06-08"})
    assert resp.status_code == 400
    assert "Bob is not available on Saturday" in resp.json()["detail"]

    # No review before the job is done.
    review = {"technician_id": tech_id, "rating": 5, "comment": "Great work"}
    assert (await client.post("/api/reviews", headers=alice, json=review)).status_code == 400

    mine = (await client.get("/api/bookings/me", headers=bob)).json()
    assert [b["id"] for b in mine] == [booking_id]
    resp = await client.put(f"/api/bookings/{booking_id}/status", headers=bob, json={"status": "completed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"

    resp = await client.post("/api/reviews", headers=alice, json=review)
    assert resp.status_code == 201

    tech = (await client.get(f"/api/technicians/{tech_id}")).json()
    assert tech["average_rating"] == 5.0
    assert tech["review_count"] == 1

    assert (await client.post("/api/reviews", headers=alice, json=review)).status_code == 409

    reviews = (await client.get(f"/api/reviews/{tech_id}")).json()
    assert len(reviews) == 1
    assert reviews[0]["user"]["name"] == "Alice"


async def test_admin_delete_user_cascades(client, db):
    admin = await make_user(db, role="admin")
    customer = await make_user(db)
    tech = await make_technician(db)
    other = await make_technician(db)
    customer_id, tech_id, other_id = customer.id, tech.id, other.id
    await make_booking(db, customer_id, tech_id, status="completed")
    await make_booking(db, customer_id, other_id, status="completed")

    headers = auth_headers(customer_id, "user")
    for tid, rating in ((tech_id, 4), (other_id, 2)):
        resp = await client.post("/api/reviews", headers=headers, json={"technician_id": tid, "rating": rating})
        assert resp.status_code == 201

    resp = await client.delete(f"/api/admin/users/{customer_id}", headers=auth_headers(admin.id, "admin"))
    assert resp.status_code == 200
    assert resp.json()["user_deleted"] is True
    assert sorted(resp.json()["ratings_recomputed"]) == sorted([tech_id, other_id])

    for tid in (tech_id, other_id):
        body = (await client.get(f"/api/technicians/{tid}")).json()
        assert body["review_count"] == 0
        assert body["average_rating"] == 0.0
        assert (await client.get(f"/api/reviews/{tid}")).json() == []

    users = (await client.get("/api/admin/users", headers=auth_headers(admin.id, "admin"))).json()
    assert customer_id not in [u["id"] for u in users]


async def test_admin_delete_technician_removes_owner(client, db):
    admin = await make_user(db, role="admin")
    tech = await make_technician(db)
    tech_id, owner_id = tech.id, tech.user_id

    resp = await client.delete(f"/api/admin/technicians/{tech_id}", headers=auth_headers(admin.id, "admin"))
    assert resp.status_code == 200
    assert resp.json()["msg"] == "Technician and associated user deleted successfully"
    assert (await client.get(f"/api/technicians/{tech_id}")).status_code == 404

    resp = await client.get("/api/profile/me", headers=auth_headers(owner_id, "technician"))
    assert resp.status_code == 404


async def test_admin_cannot_delete_or_demote_self(client, db):
    admin = await make_user(db, role="admin")
    headers = auth_headers(admin.id, "admin")

    assert (await client.delete(f"/api/admin/users/{admin.id}", headers=headers)).status_code == 403
    resp = await client.put(f"/api/admin/users/{admin.id}/role", headers=headers, json={"role": "user"})
    assert resp.status_code == 403


async def test_admin_role_change(client, db):
    admin = await make_user(db, role="admin")
    user = await make_user(db, email="dave@example.com")

    resp = await client.put(
        f"/api/admin/users/{user.id}/role", headers=auth_headers(admin.id, "admin"), json={"role": "technician"},
    )
    assert resp.status_code == 200
    assert resp.json()["msg"] == "User dave@example.com role updated to technician"


async def test_login(client):
    user_id, _ = await _register(client, "erin@example.com")

    resp = await client.post("/api/auth/login", json={"email": "ERIN@example.com", "password": TEST_PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["user_id"] == user_id
    assert resp.json()["role"] == "user"

    resp = await client.post("/api/auth/login", json={"email": "erin@example.com", "password": "wrong-one"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid credentials"


async def test_register_validation(client):
    resp = await client.post("/api/auth/register", json={
        "name": "Frank", "email": "not-an-email", "password": TEST_PASSWORD,
    })
    assert resp.status_code == 400

    await _register(client, "frank@example.com")
    resp = await client.post("/api/auth/register", json={
        "name": "Frank", "email": "frank@example.com", "password": TEST_PASSWORD,
    })
    assert resp.status_code == 400


async def test_missing_or_bad_token(client):
    resp = await client.get("/api/profile/me")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "No token, authorization denied"

    resp = await client.get("/api/profile/me", headers={"x-auth-token": "garbage"})
    assert resp.status_code == 401


async def test_bearer_header_accepted(client, db):
    user = await make_user(db, name="Grace")
    token = auth_headers(user.id, "user")["x-auth-token"]
    resp = await client.get("/api/profile/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Grace"


async def test_role_guard(client, db):
    user = await make_user(db)
    tech = await make_technician(db)
    user_headers = auth_headers(user.id, "user")

    assert (await client.get("/api/admin/users", headers=user_headers)).status_code == 403
    assert (await client.get("/api/profile/technician/me", headers=user_headers)).status_code == 403
    resp = await client.post(
        "/api/reviews", headers=auth_headers(tech.user_id, "technician"),
        json={"technician_id": tech.id, "rating": 5},
    )
    assert resp.status_code == 403


async def test_booking_validation_errors(client, db):
    user = await make_user(db)
    resp = await client.post("/api/bookings", headers=auth_headers(user.id, "user"), json={"service": "Plumbing"})
    assert resp.status_code == 400

    resp = await client.post("/api/bookings", headers=auth_headers(user.id, "user"), json={
        "technician_id": "missing", "service": "Plumbing",
        "booking_date": "2024-06-03", "booking_time": "10:00 AM",
    })
    assert resp.status_code == 404


async def test_search_without_matches_returns_empty_list(client, db):
    await make_technician(db, services_offered=["Plumbing"])
    resp = await client.get("/api/technicians/search", params={"service": "Roofing"})
    assert resp.status_code == 200
    assert resp.json() == []


async def test_unknown_technician_is_404(client):
    resp = await client.get("/api/technicians/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Technician not found"}


async def test_technician_without_profile_gets_404(client, db):
    owner = await make_user(db, role="technician")
    resp = await client.get("/api/profile/technician/me", headers=auth_headers(owner.id, "technician"))
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Technician profile not found"}


async def test_token_of_deleted_user_cannot_book_or_review(client, db):
    admin = await make_user(db, role="admin")
    customer = await make_user(db)
    tech = await make_technician(db)
    customer_id, tech_id = customer.id, tech.id
    await make_booking(db, customer_id, tech_id, status="completed")
    stale_headers = auth_headers(customer_id, "user")

    resp = await client.delete(f"/api/admin/users/{customer_id}", headers=auth_headers(admin.id, "admin"))
    assert resp.status_code == 200

    resp = await client.post("/api/bookings", headers=stale_headers, json={
        "technician_id": tech_id, "service": "Plumbing",
        "booking_date": "2024-06-04", "booking_time": "9:00 AM",
    })
    assert resp.status_code == 401
    assert resp.json()["detail"] == "User account no longer exists"

    resp = await client.post("/api/reviews", headers=stale_headers, json={"technician_id": tech_id, "rating": 5})
    assert resp.status_code == 401

    assert await count_rows(db, Booking, Booking.user_id == customer_id) == 0
    assert await count_rows(db, Review, Review.user_id == customer_id) == 0
