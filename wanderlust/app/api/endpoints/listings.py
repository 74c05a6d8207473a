"""
Listing pages.

Anyone may browse listings.  Creating one requires a login and an
image; editing, updating and deleting are reserved to the owner, which
``require_listing_owner`` enforces before the handler runs.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.datastructures import UploadFile

from wanderlust.app.api.deps import (
    image_field,
    require_listing_owner,
    require_login,
    validated_form,
)
from wanderlust.app.core.db import parse_id
from wanderlust.app.core.session import flash
from wanderlust.app.core.templating import render
from wanderlust.app.schemas.listing import ListingCreate, ListingRead
from wanderlust.app.schemas.user import UserRead
from wanderlust.app.services.image_service import ImageUploadError, preview_url, store_upload
from wanderlust.app.services.listing_service import ListingService


router = APIRouter()

logger = logging.getLogger(__name__)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("", response_class=HTMLResponse)
async def list_listings(request: Request):
    """Show every listing."""
    listings = await ListingService.list_listings()
    return render(request, "listings/index.html", listings=listings)


@router.get("/new", response_class=HTMLResponse)
async def new_listing(request: Request, current_user: UserRead = Depends(require_login)):
    return render(request, "listings/new.html")


@router.get("/{listing_id}", response_class=HTMLResponse)
async def show_listing(listing_id: str, request: Request):
    """Show one listing with its owner and reviews.

    An unknown id sends the visitor back to the index with a notice.
    """
    parsed_id = parse_id(listing_id)
    listing = await ListingService.get_listing(parsed_id, expand=True) if parsed_id else None
    if listing is None:
        flash(request, "error", "Listing not found!")
        return _redirect("/listings")
    logger.debug("Showing listing %s with %s review(s)", listing.id, len(listing.reviews))
    return render(request, "listings/show.html", listing=listing)


@router.post("")
async def create_listing(
    request: Request,
    current_user: UserRead = Depends(require_login),
    data: ListingCreate = Depends(validated_form(ListingCreate, "listing")),
    upload: UploadFile = Depends(image_field("listing[image]", required=True)),
):
    """Create a listing owned by the current user.

    The payload is validated and the image checked before anything is
    uploaded or stored.
    """
    try:
        image = await store_upload(upload)
    except ImageUploadError as e:
        flash(request, "error", str(e))
        return _redirect("/listings/new")
    await ListingService.create_listing(data, current_user.id, image)
    flash(request, "success", "New listing created successfully!")
    return _redirect("/listings")


@router.get("/{listing_id}/edit", response_class=HTMLResponse)
async def edit_listing(request: Request, listing: ListingRead = Depends(require_listing_owner)):
    original_image_url = preview_url(listing.image.url) if listing.image else None
    return render(request, "listings/edit.html", listing=listing, original_image_url=original_image_url)


@router.put("/{listing_id}")
async def update_listing(
    request: Request,
    listing: ListingRead = Depends(require_listing_owner),
    data: ListingCreate = Depends(validated_form(ListingCreate, "listing")),
    upload: Optional[UploadFile] = Depends(image_field("listing[image]", required=False)),
):
    """Apply the edit form; a newly chosen image replaces the stored one."""
    image = None
    if upload is not None:
        try:
            image = await store_upload(upload)
        except ImageUploadError as e:
            flash(request, "error", str(e))
            return _redirect(f"/listings/{listing.id}/edit")
    updated = await ListingService.update_listing(listing.id, data, image)
    if updated is None:
        flash(request, "error", "Listing not found!")
        return _redirect("/listings")
    flash(request, "success", "Listing updated successfully!")
    return _redirect(f"/listings/{listing.id}")


@router.delete("/{listing_id}")
async def delete_listing(request: Request, listing: ListingRead = Depends(require_listing_owner)):
    await ListingService.delete_listing(listing.id)
    flash(request, "success", "Listing deleted successfully!")
    return _redirect("/listings")
