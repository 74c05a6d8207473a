"""Shared helpers for driving the application through its HTTP surface."""

from wanderlust.app.core.db import get_connection


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

LISTING_FIELDS = {
    "title": "Cozy Beachfront Cottage",
    "description": "Escape to this charming cottage by the sea.",
    "price": "1500",
    "location": "Malibu",
}


def signup(client, username, password="p1", email=None):
    return client.post(
        "/signup",
        data={"username": username, "email": email or f"{username}@x.com", "password": password},
        follow_redirects=False,
    )


def login(client, username, password="p1"):
    return client.post(
        "/login",
        data={"username": username, "password": password},
        follow_redirects=False,
    )


def listing_form(**overrides):
    fields = dict(LISTING_FIELDS, **overrides)
    return {f"listing[{key}]": value for key, value in fields.items() if value is not None}


def create_listing(client, image=("house.png", PNG_BYTES, "image/png"), **overrides):
    files = {"listing[image]": image} if image else None
    return client.post("/listings", data=listing_form(**overrides), files=files, follow_redirects=False)


def post_review(client, listing_id, comment="Lovely stay", rating="5"):
    return client.post(
        f"/listings/{listing_id}/reviews",
        data={"review[comment]": comment, "review[rating]": rating},
        follow_redirects=False,
    )


def latest_id(table):
    conn = get_connection()
    try:
        row = conn.execute(f"SELECT MAX(id) AS id FROM {table}").fetchone()
        return row["id"]
    finally:
        conn.close()


def count_rows(table):
    conn = get_connection()
    try:
        return conn.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()["n"]
    finally:
        conn.close()
