from menuhub.models.category import Category
from menuhub.models.product import Product
from menuhub.models.tenant import Tenant
from menuhub.models.user import User
from tests.fixtures_data import build_client, login_as, seed_tenant, seed_user


def _two_tenants():
    client, session_factory = build_client()
    acme_id = seed_tenant(session_factory, "Acme", "acme")
    beta_id = seed_tenant(session_factory, "Beta", "beta")
    acme_user = seed_user(session_factory, "acme-owner", tenant_id=acme_id)
    beta_user = seed_user(session_factory, "beta-owner", tenant_id=beta_id)
    return client, session_factory, acme_id, beta_id, acme_user, beta_user


def _create_catalog(client, tenant_id: int) -> tuple[int, int]:
    category = client.post(f"/api/tenants/{tenant_id}/categories", json={"name": "Drinks"})
    assert category.status_code == 201
    category_id = category.json()["id"]
    product = client.post(
        f"/api/tenants/{tenant_id}/categories/{category_id}/products",
        json={"name": "Cola", "basePrice": "2.00"},
    )
    assert product.status_code == 201
    return category_id, product.json()["id"]


def test_money_round_trip_is_string_exact():
    client, session_factory, acme_id, _, acme_user, _ = _two_tenants()
    login_as(client, acme_user)
    category_id = client.post(f"/api/tenants/{acme_id}/categories", json={"name": "Food"}).json()["id"]

    created = client.post(
        f"/api/tenants/{acme_id}/categories/{category_id}/products",
        json={"name": "Burger", "basePrice": "12.50"},
    )
    listed = client.get(f"/api/tenants/{acme_id}/products")

    assert created.json()["basePrice"] == "12.50"
    assert listed.json()[0]["basePrice"] == "12.50"
    assert created.json()["tenantId"] == acme_id
    assert created.json()["active"] is True
    assert created.json()["order"] == 0


def test_float_price_is_rejected():
    client, _, acme_id, _, acme_user, _ = _two_tenants()
    login_as(client, acme_user)
    category_id = client.post(f"/api/tenants/{acme_id}/categories", json={"name": "Food"}).json()["id"]

    response = client.post(
        f"/api/tenants/{acme_id}/categories/{category_id}/products",
        json={"name": "Burger", "basePrice": 12.5},
    )

    assert response.status_code == 400
    assert response.json()["fields"][0]["field"] == "basePrice"


def test_oversized_and_over_precise_prices_are_validation_errors():
    client, session_factory, acme_id, _, acme_user, _ = _two_tenants()
    login_as(client, acme_user)
    category_id, product_id = _create_catalog(client, acme_id)
    products_url = f"/api/tenants/{acme_id}/categories/{category_id}/products"

    huge = client.post(products_url, json={"name": "Burger", "basePrice": "1e30"})
    over_precise = client.post(products_url, json={"name": "Burger", "basePrice": "12.505"})
    huge_modifier = client.post(
        f"/api/tenants/{acme_id}/products/{product_id}/variants",
        json={"name": "Gigante", "priceModifier": "-1e40"},
    )

    for response, field in ((huge, "basePrice"), (over_precise, "basePrice"), (huge_modifier, "priceModifier")):
        assert response.status_code == 400
        assert response.json()["error"] == "validation_failed"
        assert response.json()["fields"][0]["field"] == field

    with session_factory() as db:
        assert db.query(Product).filter(Product.tenant_id == acme_id).count() == 1


def test_listing_is_scoped_and_ordered():
    client, _, acme_id, _, acme_user, _ = _two_tenants()
    login_as(client, acme_user)
    for name, order in (("Desserts", 2), ("Drinks", 1), ("Burgers", 1)):
        client.post(f"/api/tenants/{acme_id}/categories", json={"name": name, "order": order})

    names = [row["name"] for row in client.get(f"/api/tenants/{acme_id}/categories").json()]

    assert names == ["Burgers", "Drinks", "Desserts"]


def test_cross_tenant_rows_are_not_found_even_with_own_tenant_path():
    client, session_factory, acme_id, beta_id, acme_user, beta_user = _two_tenants()
    login_as(client, beta_user)
    beta_category, beta_product = _create_catalog(client, beta_id)

    login_as(client, acme_user)
    read = client.get(f"/api/tenants/{acme_id}/categories/{beta_category}/products")
    write = client.patch(f"/api/tenants/{acme_id}/products/{beta_product}", json={"name": "Hacked"})
    rename = client.patch(f"/api/tenants/{acme_id}/categories/{beta_category}", json={"name": "Hacked"})
    attach = client.post(
        f"/api/tenants/{acme_id}/categories/{beta_category}/products",
        json={"name": "Intruder", "basePrice": "1.00"},
    )

    assert read.status_code == 404
    assert write.status_code == 404
    assert rename.status_code == 404
    assert attach.status_code == 404

    db = session_factory()
    try:
        assert db.query(Product).filter(Product.id == beta_product).one().name == "Cola"
        assert db.query(Category).filter(Category.id == beta_category).one().name == "Drinks"
        assert db.query(Product).count() == 1
    finally:
        db.close()


def test_other_tenant_path_is_forbidden():
    client, _, acme_id, beta_id, acme_user, _ = _two_tenants()
    login_as(client, acme_user)

    response = client.get(f"/api/tenants/{beta_id}/categories")

    assert response.status_code == 403
    assert response.json() == {"error": "forbidden", "message": "Tenant não autorizado"}


def test_moving_product_to_foreign_category_is_not_found():
    client, _, acme_id, beta_id, acme_user, beta_user = _two_tenants()
    login_as(client, beta_user)
    beta_category, _ = _create_catalog(client, beta_id)
    login_as(client, acme_user)
    _, acme_product = _create_catalog(client, acme_id)

    response = client.patch(
        f"/api/tenants/{acme_id}/products/{acme_product}",
        json={"categoryId": beta_category},
    )

    assert response.status_code == 404


def test_partial_update_keeps_unsent_fields():
    client, _, acme_id, _, acme_user, _ = _two_tenants()
    login_as(client, acme_user)
    _, product_id = _create_catalog(client, acme_id)

    response = client.patch(
        f"/api/tenants/{acme_id}/products/{product_id}",
        json={"active": False, "description": "Gelada"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["active"] is False
    assert body["description"] == "Gelada"
    assert body["name"] == "Cola"
    assert body["basePrice"] == "2.00"


def test_variants_are_scoped_and_validated():
    client, _, acme_id, beta_id, acme_user, beta_user = _two_tenants()
    login_as(client, acme_user)
    _, product_id = _create_catalog(client, acme_id)

    created = client.post(
        f"/api/tenants/{acme_id}/products/{product_id}/variants",
        json={"name": "Lata 350ml", "priceModifier": "0.50"},
    )
    too_cheap = client.post(
        f"/api/tenants/{acme_id}/products/{product_id}/variants",
        json={"name": "Brinde", "priceModifier": "-3.00"},
    )
    variant_id = created.json()["id"]
    updated = client.patch(
        f"/api/tenants/{acme_id}/products/{product_id}/variants/{variant_id}",
        json={"priceModifier": "-0.50"},
    )

    assert created.status_code == 201
    assert created.json()["priceModifier"] == "0.50"
    assert too_cheap.status_code == 400
    assert updated.json()["priceModifier"] == "-0.50"

    login_as(client, beta_user)
    foreign = client.get(f"/api/tenants/{beta_id}/products/{product_id}/variants")
    assert foreign.status_code == 404


def test_tenant_routes_require_authentication():
    client, _, acme_id, _, _, _ = _two_tenants()

    response = client.get(f"/api/tenants/{acme_id}/categories")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthenticated"


def test_super_admin_has_no_tenant_data_access():
    client, session_factory, acme_id, _, _, _ = _two_tenants()
    login_as(client, seed_user(session_factory, "root", super_admin=True))

    response = client.get(f"/api/tenants/{acme_id}/categories")

    assert response.status_code == 403


def test_super_admin_routes_forbidden_for_tenant_user_without_side_effects():
    client, session_factory, acme_id, _, acme_user, _ = _two_tenants()
    login_as(client, acme_user)

    create_tenant = client.post("/api/tenants", json={"name": "Evil", "subdomain": "evil"})
    list_tenants = client.get("/api/tenants")
    create_user = client.post(
        f"/api/tenants/{acme_id}/users",
        json={"username": "intruder", "password": "secret123"},
    )

    assert create_tenant.status_code == 403
    assert list_tenants.status_code == 403
    assert create_user.status_code == 403

    db = session_factory()
    try:
        assert db.query(Tenant).filter(Tenant.subdomain == "evil").count() == 0
        assert db.query(User).filter(User.username == "intruder").count() == 0
    finally:
        db.close()


def test_super_admin_creates_tenant_user():
    client, session_factory, acme_id, _, _, _ = _two_tenants()
    login_as(client, seed_user(session_factory, "root", super_admin=True))

    created = client.post(
        f"/api/tenants/{acme_id}/users",
        json={"username": "cashier", "password": "secret123", "role": "staff"},
    )
    duplicate = client.post(
        f"/api/tenants/{acme_id}/users",
        json={"username": "cashier", "password": "secret123"},
    )
    missing = client.post(
        "/api/tenants/999/users",
        json={"username": "ghost", "password": "secret123"},
    )

    assert created.status_code == 201
    assert created.json()["tenantId"] == acme_id
    assert created.json()["isSuperAdmin"] is False
    assert duplicate.status_code == 409
    assert missing.status_code == 404
