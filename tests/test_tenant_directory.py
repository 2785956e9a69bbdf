import pytest

from menuhub.core.errors import ConflictError, ResourceNotFoundError
from menuhub.models.tenant import Tenant
from menuhub.schemas.tenant import TenantConfig
from menuhub.services.tenant_directory import TenantDirectory
from tests.fixtures_data import build_client, build_session_factory, login_as, seed_user


def test_create_backfills_config_and_lowercases_subdomain():
    session_factory = build_session_factory()
    db = session_factory()
    try:
        tenant = TenantDirectory(db).create(name=" Acme ", subdomain="ACME")
    finally:
        db.close()

    assert tenant.subdomain == "acme"
    assert tenant.name == "Acme"
    assert tenant.config == {
        "theme": "light",
        "logo": None,
        "contactEmail": None,
        "address": None,
        "phone": None,
    }


def test_find_by_subdomain_is_case_insensitive():
    session_factory = build_session_factory()
    db = session_factory()
    try:
        directory = TenantDirectory(db)
        created = directory.create(name="Acme", subdomain="acme")

        assert directory.find_by_subdomain("AcMe").id == created.id
        assert directory.find_by_subdomain("ghost") is None
        assert directory.find_by_id(created.id).name == "Acme"
    finally:
        db.close()


def test_duplicate_subdomain_raises_conflict():
    session_factory = build_session_factory()
    db = session_factory()
    try:
        directory = TenantDirectory(db)
        directory.create(name="Acme", subdomain="acme")
        with pytest.raises(ConflictError):
            directory.create(name="Acme 2", subdomain="Acme")
        assert db.query(Tenant).count() == 1
    finally:
        db.close()


def test_update_config_replaces_whole_config():
    session_factory = build_session_factory()
    db = session_factory()
    try:
        directory = TenantDirectory(db)
        tenant = directory.create(
            name="Acme",
            subdomain="acme",
            config=TenantConfig(theme="dark", phone="555-0100"),
        )

        updated = directory.update_config(tenant.id, TenantConfig(theme="dark", address="Main St 1"))
        reread = TenantConfig.model_validate(directory.find_by_id(tenant.id).config)
    finally:
        db.close()

    assert updated.id == tenant.id
    assert reread == TenantConfig(theme="dark", address="Main St 1")
    # Campo omitido na atualização volta para o padrão.
    assert reread.phone is None


def test_update_config_unknown_tenant():
    session_factory = build_session_factory()
    db = session_factory()
    try:
        with pytest.raises(ResourceNotFoundError):
            TenantDirectory(db).update_config(404, TenantConfig())
    finally:
        db.close()


def test_duplicate_subdomain_over_http_returns_409_and_keeps_one_tenant():
    client, session_factory = build_client()
    login_as(client, seed_user(session_factory, "root", super_admin=True))

    first = client.post("/api/tenants", json={"name": "Acme", "subdomain": "acme"})
    second = client.post("/api/tenants", json={"name": "Other Acme", "subdomain": "ACME"})
    listing = client.get("/api/tenants")

    assert first.status_code == 201
    assert first.json()["config"]["theme"] == "light"
    assert second.status_code == 409
    assert second.json()["error"] == "conflict"
    assert [tenant["subdomain"] for tenant in listing.json()] == ["acme"]


def test_invalid_subdomain_is_rejected_with_fields():
    client, session_factory = build_client()
    login_as(client, seed_user(session_factory, "root", super_admin=True))

    response = client.post("/api/tenants", json={"name": "Acme", "subdomain": "bad_sub!"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_failed"
    assert body["fields"][0]["field"] == "subdomain"


def test_settings_patch_round_trip_uses_replace_semantics():
    client, session_factory = build_client()
    login_as(client, seed_user(session_factory, "root", super_admin=True))
    tenant_id = client.post(
        "/api/tenants",
        json={"name": "Acme", "subdomain": "acme", "config": {"theme": "dark", "phone": "555"}},
    ).json()["id"]

    login_as(client, seed_user(session_factory, "owner", tenant_id=tenant_id))
    patched = client.patch(
        f"/api/tenants/{tenant_id}/settings",
        json={"config": {"theme": "dark", "contactEmail": "hi@acme.com"}},
    )
    fetched = client.get(f"/api/tenants/{tenant_id}/settings")

    assert patched.status_code == 200
    assert fetched.json()["config"] == {
        "theme": "dark",
        "logo": None,
        "contactEmail": "hi@acme.com",
        "address": None,
        "phone": None,
    }


def test_blank_tenant_name_is_rejected_and_name_is_trimmed():
    client, session_factory = build_client()
    login_as(client, seed_user(session_factory, "root", super_admin=True))

    blank = client.post("/api/tenants", json={"name": "   ", "subdomain": "acme"})
    padded = client.post("/api/tenants", json={"name": "  Acme  ", "subdomain": "acme"})

    assert blank.status_code == 400
    assert blank.json()["fields"][0]["field"] == "name"
    assert padded.status_code == 201
    assert padded.json()["name"] == "Acme"
