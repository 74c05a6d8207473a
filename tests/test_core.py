from fastapi.testclient import TestClient

from wanderlust.app.core.db import parse_id
from wanderlust.app.core.security import hash_password, sign_value, unsign_value, verify_password
from wanderlust.app.main import app
from wanderlust.app.services.listing_service import ListingService


def test_password_hashing():
    hashed = hash_password("p1")

    assert hashed != hash_password("p1")
    assert verify_password("p1", hashed)
    assert not verify_password("p2", hashed)
    assert not verify_password("p1", "garbage")


def test_signed_values():
    signed = sign_value("abc")

    assert unsign_value(signed) == "abc"
    assert unsign_value(signed[:-2] + "xx") is None
    assert unsign_value("abc") is None
    assert unsign_value("") is None


def test_parse_id():
    assert parse_id("12") == 12
    assert parse_id(7) == 7
    assert parse_id("0") is None
    assert parse_id("-3") is None
    assert parse_id("12abc") is None
    assert parse_id(None) is None
    assert parse_id(str(2**63 - 1)) == 2**63 - 1
    assert parse_id(str(2**63)) is None


def test_unmatched_path_is_not_found(client):
    for response in (client.get("/nowhere"), client.post("/listings/1/unknown"), client.get("/")):
        assert response.status_code == 404
        assert response.text == "Page Not Found!"


def test_unhandled_error_is_generic_500(monkeypatch):
    async def broken(cls):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(ListingService, "list_listings", classmethod(broken))

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/listings")

    assert response.status_code == 500
    assert response.text == "Something went wrong!"
