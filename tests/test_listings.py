import asyncio

from wanderlust.app.services.listing_service import ListingService

from .helpers import (
    PNG_BYTES,
    count_rows,
    create_listing,
    latest_id,
    listing_form,
    post_review,
    signup,
)


def test_index_lists_all_listings(client):
    signup(client, "alice")
    create_listing(client, title="First place")
    create_listing(client, title="Second place")

    response = client.get("/listings")

    assert response.status_code == 200
    assert "First place" in response.text
    assert "Second place" in response.text


def test_new_form_requires_login(client):
    response = client.get("/listings/new", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert "You must be logged in to do that!" in client.get("/login").text


def test_create_listing_sets_owner_and_image(client):
    signup(client, "alice")

    response = create_listing(client)

    assert response.status_code == 302
    assert response.headers["location"] == "/listings"
    assert "New listing created successfully!" in client.get("/listings").text

    listing = asyncio.run(ListingService.get_listing(latest_id("listings"), expand=True))
    assert listing.owner.username == "alice"
    assert listing.image.url.startswith("/uploads/")
    assert listing.image.filename.endswith(".png")


def test_created_listing_round_trip(client):
    signup(client, "alice")
    create_listing(client, title="Treehouse", description="Up high", price="99.5", location="Oregon")

    listing = asyncio.run(ListingService.get_listing(latest_id("listings"), expand=True))

    assert listing.title == "Treehouse"
    assert listing.description == "Up high"
    assert listing.price == 99.5
    assert listing.location == "Oregon"
    assert listing.owner is not None
    assert listing.reviews == []


def test_create_listing_without_image_writes_nothing(client):
    signup(client, "alice")

    response = create_listing(client, image=None)

    assert response.status_code == 400
    assert '"listing.image" is required' in response.text
    assert count_rows("listings") == 0


def test_create_listing_rejects_unsupported_image_type(client):
    signup(client, "alice")

    response = create_listing(client, image=("anim.gif", b"GIF89a", "image/gif"))

    assert response.status_code == 400
    assert count_rows("listings") == 0


def test_create_listing_validation_joins_all_errors(client):
    signup(client, "alice")

    response = create_listing(client, title="", price="-10")

    assert response.status_code == 400
    assert '"listing.title"' in response.text
    assert '"listing.price"' in response.text
    assert ", " in response.text
    assert count_rows("listings") == 0


def test_create_listing_requires_login(client):
    response = create_listing(client)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert count_rows("listings") == 0


def test_show_missing_listing_redirects_with_notice(client):
    for listing_id in ("9999", "not-an-id"):
        response = client.get(f"/listings/{listing_id}", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/listings"
        assert "Listing not found!" in client.get("/listings").text


def test_show_listing_renders_reviews_and_owner(client, other_client):
    signup(client, "alice")
    create_listing(client, title="Lake cabin")
    listing_id = latest_id("listings")
    signup(other_client, "bob")
    post_review(other_client, listing_id, comment="Quiet and clean")

    page = client.get(f"/listings/{listing_id}").text

    assert "Lake cabin" in page
    assert "alice" in page
    assert "Quiet and clean" in page
    assert "@bob" in page


def test_owner_can_edit_and_update(client):
    signup(client, "alice")
    create_listing(client)
    listing_id = latest_id("listings")
    original = asyncio.run(ListingService.get_listing(listing_id))

    assert client.get(f"/listings/{listing_id}/edit").status_code == 200
    response = client.put(
        f"/listings/{listing_id}",
        data=listing_form(title="Renamed cottage", price="2000"),
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == f"/listings/{listing_id}"
    updated = asyncio.run(ListingService.get_listing(listing_id))
    assert updated.title == "Renamed cottage"
    assert updated.price == 2000
    # No new file, so the image is untouched.
    assert updated.image == original.image


def test_update_with_new_image_replaces_it(client):
    signup(client, "alice")
    create_listing(client)
    listing_id = latest_id("listings")
    original = asyncio.run(ListingService.get_listing(listing_id))

    response = client.post(
        f"/listings/{listing_id}?_method=PUT",
        data=listing_form(),
        files={"listing[image]": ("new.jpg", PNG_BYTES, "image/jpeg")},
        follow_redirects=False,
    )

    assert response.status_code == 302
    updated = asyncio.run(ListingService.get_listing(listing_id))
    assert updated.image.filename != original.image.filename
    assert updated.image.filename.endswith(".jpg")


def test_update_validates_payload(client):
    signup(client, "alice")
    create_listing(client)
    listing_id = latest_id("listings")

    response = client.put(f"/listings/{listing_id}", data=listing_form(location=""))

    assert response.status_code == 400
    assert '"listing.location"' in response.text
    assert asyncio.run(ListingService.get_listing(listing_id)).location == "Malibu"


def test_non_owner_cannot_edit_update_or_delete(client, other_client):
    signup(client, "alice")
    create_listing(client)
    listing_id = latest_id("listings")
    signup(other_client, "mallory")

    attempts = [
        other_client.get(f"/listings/{listing_id}/edit", follow_redirects=False),
        other_client.put(f"/listings/{listing_id}", data=listing_form(title="Hijacked"), follow_redirects=False),
        other_client.delete(f"/listings/{listing_id}", follow_redirects=False),
    ]

    for response in attempts:
        assert response.status_code == 302
        assert response.headers["location"] == f"/listings/{listing_id}"
    assert "You are not the owner of this listing!" in other_client.get(f"/listings/{listing_id}").text
    listing = asyncio.run(ListingService.get_listing(listing_id))
    assert listing.title == "Cozy Beachfront Cottage"


def test_mutations_on_missing_listing_do_not_crash(client):
    signup(client, "alice")

    responses = [
        client.get("/listings/4242/edit", follow_redirects=False),
        client.put("/listings/4242", data=listing_form(), follow_redirects=False),
        client.delete("/listings/4242", follow_redirects=False),
        client.delete("/listings/abc", follow_redirects=False),
    ]

    for response in responses:
        assert response.status_code == 302
        assert response.headers["location"] == "/listings"


def test_owner_can_delete_listing_and_its_reviews(client, other_client):
    signup(client, "alice")
    create_listing(client)
    listing_id = latest_id("listings")
    signup(other_client, "bob")
    post_review(other_client, listing_id)

    response = client.post(f"/listings/{listing_id}?_method=DELETE", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/listings"
    assert "Listing deleted successfully!" in client.get("/listings").text
    assert count_rows("listings") == 0
    assert count_rows("reviews") == 0
    assert count_rows("listing_reviews") == 0


def test_out_of_range_listing_id_is_not_found(client):
    signup(client, "alice")
    huge = "9" * 25

    responses = [
        client.get(f"/listings/{huge}", follow_redirects=False),
        client.get(f"/listings/{huge}/edit", follow_redirects=False),
        client.put(f"/listings/{huge}", data=listing_form(), follow_redirects=False),
        client.delete(f"/listings/{huge}", follow_redirects=False),
    ]

    for response in responses:
        assert response.status_code == 302
        assert response.headers["location"] == "/listings"
    assert "Listing not found!" in client.get("/listings").text
