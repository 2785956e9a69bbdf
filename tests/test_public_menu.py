from types import SimpleNamespace

from menuhub.services.menu import build_menu_sections
from tests.fixtures_data import DEV_SETTINGS, PRODUCTION_SETTINGS, build_client, login_as, seed_tenant, seed_user


def _seed_acme_menu(client, session_factory) -> int:
    tenant_id = seed_tenant(session_factory, "Acme", "acme")
    login_as(client, seed_user(session_factory, "acme-owner", tenant_id=tenant_id))

    drinks = client.post(f"/api/tenants/{tenant_id}/categories", json={"name": "Drinks"}).json()["id"]
    client.post(f"/api/tenants/{tenant_id}/categories", json={"name": "Empty"})
    client.post(
        f"/api/tenants/{tenant_id}/categories/{drinks}/products",
        json={"name": "Cola", "basePrice": "2.00"},
    )
    client.post(
        f"/api/tenants/{tenant_id}/categories/{drinks}/products",
        json={"name": "Beer", "basePrice": "5.00", "active": False},
    )
    client.cookies.clear()
    return tenant_id


def test_public_products_include_inactive_rows():
    client, session_factory = build_client(settings=PRODUCTION_SETTINGS)
    tenant_id = _seed_acme_menu(client, session_factory)

    response = client.get(f"/api/public/products/{tenant_id}")

    assert response.status_code == 200
    assert sorted(product["name"] for product in response.json()) == ["Beer", "Cola"]


def test_public_menu_shows_only_active_products_in_non_empty_sections():
    client, session_factory = build_client(settings=PRODUCTION_SETTINGS)
    _seed_acme_menu(client, session_factory)

    response = client.get("/api/public/menu", headers={"host": "acme.example.com"})

    body = response.json()
    assert response.status_code == 200
    assert body["tenant"]["name"] == "Acme"
    assert [section["name"] for section in body["sections"]] == ["Drinks"]
    assert [product["name"] for product in body["sections"][0]["products"]] == ["Cola"]
    assert body["sections"][0]["products"][0]["basePrice"] == "2.00"


def test_public_menu_resolves_through_dev_header_on_localhost():
    client, session_factory = build_client(settings=DEV_SETTINGS)
    _seed_acme_menu(client, session_factory)

    response = client.get(
        "/api/public/menu",
        headers={"host": "localhost:5000", "x-tenant-subdomain": "acme"},
    )

    assert response.status_code == 200
    assert response.json()["tenant"]["subdomain"] == "acme"


def test_public_tenant_lookup_by_subdomain():
    client, session_factory = build_client()
    tenant_id = seed_tenant(session_factory, "Acme", "acme")
    seed_tenant(session_factory, "Closed", "closed", active=False)

    found = client.get("/api/public/tenant-by-subdomain/ACME")
    inactive = client.get("/api/public/tenant-by-subdomain/closed")
    unknown = client.get("/api/public/tenant-by-subdomain/ghost")

    assert found.status_code == 200
    assert found.json()["id"] == tenant_id
    assert found.json()["config"]["theme"] == "light"
    assert inactive.status_code == 404
    assert unknown.status_code == 404


def test_public_categories_for_unknown_tenant_is_not_found():
    client, _ = build_client()

    assert client.get("/api/public/categories/999").status_code == 404


def test_build_menu_sections_includes_variant_final_price():
    category = SimpleNamespace(id=1, name="Pizzas", description=None, image=None, order=0, active=True)
    product = SimpleNamespace(
        id=10,
        category_id=1,
        name="Margherita",
        description=None,
        image=None,
        base_price="30.00",
        order=0,
        active=True,
    )
    variants = [
        SimpleNamespace(id=100, product_id=10, name="Grande", price_modifier="8.50", order=1, active=True),
        SimpleNamespace(id=101, product_id=10, name="Broto", price_modifier="-6.00", order=0, active=True),
        SimpleNamespace(id=102, product_id=10, name="Gigante", price_modifier="15.00", order=2, active=False),
    ]

    sections = build_menu_sections([category], [product], variants)

    menu_variants = sections[0].products[0].variants
    assert [(variant.name, variant.final_price) for variant in menu_variants] == [
        ("Broto", "24.00"),
        ("Grande", "38.50"),
    ]
