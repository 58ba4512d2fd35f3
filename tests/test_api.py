"""
API tests.

Tests:
1.    Health check
2-4.  /api/quotes/calculate (camelCase breakdown, admin price list, admin rates)
5.    Invalid configuration rejected with 422
6-7.  /api/quotes/area-usage
8-9.  Quote submission and retrieval
10-12. Materials and cost rate admin endpoints
"""

import pytest

from factories import luxone_product, make_pieces, make_product

FULL_SERVICE = "fabrication-delivery-installation"


def _seed(client):
    assert client.get("/api/materials/seed").status_code == 200
    assert client.get("/api/cost-rates/seed").status_code == 200


# ============================================================
# 1. Health
# ============================================================

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["currency"] == "AED"


# ============================================================
# 2-5. Live calculation
# ============================================================

def test_calculate_returns_camel_case_breakdown(client):
    _seed(client)
    payload = {
        "serviceLevel": "fabrication",
        "selectedProducts": [luxone_product("kt", pieces=make_pieces(("2", "1")))],
    }
    response = client.post("/api/quotes/calculate", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["materialCost"] == 560
    assert data["subtotal"] == 560
    assert data["grandTotal"] == pytest.approx(705.6)
    assert data["totalSqm"] == 2
    assert data["slabsRequired"] == 1
    assert data["productBreakdown"]["kt"]["productType"] == "Kitchen Top"
    assert "hobCutOut" in data


def test_calculate_with_nothing_selected(client):
    response = client.post("/api/quotes/calculate", json={})
    assert response.status_code == 200
    assert response.json()["grandTotal"] == 0


def test_calculate_uses_admin_price_list(client):
    _seed(client)
    created = client.post("/api/materials/", json={
        "name": "Nero Marquina", "color_name": "Nero Marquina",
        "finishing": "Polished", "thickness": "20mm", "price_per_sqm": 450,
    })
    assert created.status_code == 200
    payload = {"selectedProducts": [
        luxone_product("a", color="Nero Marquina", pieces=make_pieces(("1", "1"))),
    ]}
    data = client.post("/api/quotes/calculate", json=payload).json()
    assert data["materialCost"] == 450


def test_calculate_uses_admin_cost_rates(client):
    _seed(client)
    patched = client.patch("/api/cost-rates/hob_cut_out_flat", json={"value": 150})
    assert patched.status_code == 200
    payload = {
        "serviceLevel": FULL_SERVICE,
        "hobCutOutAddon": True,
        "selectedProducts": [make_product("a", pieces=make_pieces(("1", "1")))],
    }
    data = client.post("/api/quotes/calculate", json=payload).json()
    assert data["hobCutOut"] == 150


def test_calculate_tolerates_null_pieces(client):
    payload = {"selectedProducts": [
        make_product("a", pieces={"a": {"length": "2", "width": "1"}, "b": None}),
    ]}
    response = client.post("/api/quotes/calculate", json=payload)
    assert response.status_code == 200
    assert response.json()["totalSqm"] == 2


@pytest.mark.parametrize("payload", [
    [1, 2],
    {"selectedProducts": "Kitchen Top"},
])
def test_calculate_rejects_invalid_configuration(client, payload):
    response = client.post("/api/quotes/calculate", json=payload)
    assert response.status_code == 422


# ============================================================
# 6-7. Area usage
# ============================================================

def test_area_usage_per_product(client):
    payload = {"selectedProducts": [
        make_product("island", productType="Island", pieces=make_pieces(("2", "1"))),
        luxone_product("kt", pieces=make_pieces(("3", "1"))),
        make_product("floor", productType="Flooring", slabSize="3200x1600", numberOfSlabs=1,
                     pieces=make_pieces(("3", "2"))),
    ]}
    response = client.post("/api/quotes/area-usage", json=payload)
    assert response.status_code == 200
    usage = {row["productId"]: row for row in response.json()}

    assert usage["island"]["availableArea"] == 10.24
    assert usage["island"]["usedArea"] == 2
    assert usage["island"]["exceeded"] is False

    assert usage["kt"]["unlimited"] is True
    assert usage["kt"]["availableArea"] is None
    assert usage["kt"]["exceeded"] is False

    assert usage["floor"]["availableArea"] == pytest.approx(5.12)
    assert usage["floor"]["remainingArea"] == pytest.approx(-0.88)
    assert usage["floor"]["exceeded"] is True


def test_area_usage_with_missing_slab_details(client):
    payload = {"selectedProducts": [make_product("a", pieces=make_pieces(("1", "1")))]}
    [row] = client.post("/api/quotes/area-usage", json=payload).json()
    assert row["availableArea"] is None
    assert row["unlimited"] is False
    assert row["exceeded"] is False


# ============================================================
# 8-9. Submission
# ============================================================

def test_submit_quote_and_fetch_it(client):
    _seed(client)
    payload = {
        "serviceLevel": "fabrication-delivery",
        "deliveryLocation": "dubai",
        "selectedProducts": [luxone_product("kt", pieces=make_pieces(("2", "1")))],
        "name": "Sam Customer",
        "email": "sam@example.com",
        "contactNumber": "+971 50 000 0000",
        "location": "Dubai Marina",
    }
    response = client.post("/api/quotes/", json=payload)
    assert response.status_code == 200
    quote = response.json()
    assert quote["quote_id"].startswith("LUX-")
    assert quote["quote_id"].endswith("-0001")
    assert quote["customer_name"] == "Sam Customer"
    assert quote["service_level"] == "fabrication-delivery"
    assert quote["total_amount"] == pytest.approx((560 + 500) * 1.2 * 1.05)
    assert quote["pricing_data"]["delivery"] == 500
    assert quote["quote_data"]["selectedProducts"][0]["id"] == "kt"

    fetched = client.get(f"/api/quotes/{quote['quote_id']}")
    assert fetched.status_code == 200
    assert fetched.json()["total_amount"] == quote["total_amount"]

    listed = client.get("/api/quotes/").json()
    assert [q["quote_id"] for q in listed] == [quote["quote_id"]]


def test_get_missing_quote(client):
    assert client.get("/api/quotes/LUX-2020-9999").status_code == 404


# ============================================================
# 10-12. Admin endpoints
# ============================================================

def test_seed_materials_is_idempotent(client):
    first = client.get("/api/materials/seed").json()
    second = client.get("/api/materials/seed").json()
    assert first["seeded"] == 21
    assert second["seeded"] == 0

    materials = client.get("/api/materials/", params={"category": "quartz"}).json()
    assert len(materials) == 21
    assert materials[0]["color_name"] == "Golden River"


def test_update_and_delete_material(client):
    _seed(client)
    material_id = client.get("/api/materials/").json()[0]["id"]

    updated = client.patch(f"/api/materials/{material_id}", json={"price_per_sqm": 299})
    assert updated.status_code == 200
    assert updated.json()["price_per_sqm"] == 299

    assert client.delete(f"/api/materials/{material_id}").status_code == 200
    assert client.patch(f"/api/materials/{material_id}", json={"price_per_sqm": 1}).status_code == 404
    assert client.delete(f"/api/materials/{material_id}").status_code == 404


def test_cost_rate_updates(client):
    assert client.patch("/api/cost-rates/cutting_per_sqm", json={"value": 45}).status_code == 404
    _seed(client)

    assert client.patch("/api/cost-rates/cutting_per_sqm", json={"value": -5}).status_code == 422
    response = client.patch("/api/cost-rates/cutting_per_sqm", json={"value": 45})
    assert response.status_code == 200
    assert client.get("/api/cost-rates/effective").json()["cutting_per_sqm"] == 45

    client.patch("/api/cost-rates/cutting_per_sqm", json={"value": 45, "is_active": False})
    assert client.get("/api/cost-rates/effective").json()["cutting_per_sqm"] == 40

    names = [rate["name"] for rate in client.get("/api/cost-rates/").json()]
    assert "delivery_dubai" in names
