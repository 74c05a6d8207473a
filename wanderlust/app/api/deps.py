"""
Guard and validation dependencies shared by the routers.

Guards run before the handler body.  A denied request is not an error:
the guard queues a flash notice and raises ``RedirectRequired``, which
the application turns into a redirect.  Every guard checks that the
record it is about to inspect exists before looking at its owner or
author.

Validators parse ``prefix[field]`` form keys into a pydantic model and
answer with a 400 carrying all violations when the payload is invalid.
"""

from typing import Callable, Optional, Type

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from wanderlust.app.core.db import parse_id
from wanderlust.app.core.errors import RedirectRequired
from wanderlust.app.core.session import flash, get_session
from wanderlust.app.schemas import validation_message
from wanderlust.app.schemas.listing import ListingRead
from wanderlust.app.schemas.review import ReviewRead
from wanderlust.app.schemas.user import UserRead
from wanderlust.app.services.image_service import ALLOWED_EXTENSIONS, is_allowed_image
from wanderlust.app.services.listing_service import ListingService
from wanderlust.app.services.review_service import ReviewService


# Session key holding the page to return to after logging in.
REDIRECT_KEY = "redirect_url"

# Pages that are never a useful place to return to after logging in.
IDENTITY_PATHS = {"/login", "/logout", "/signup"}


async def require_login(request: Request) -> UserRead:
    """Return the logged-in user or redirect to the login page.

    For GET requests the requested URL is remembered so the login
    handler can send the user back there.  The login, logout and signup
    pages are not remembered.
    """
    user = getattr(request.state, "user", None)
    if user is None:
        if request.method == "GET" and request.url.path not in IDENTITY_PATHS:
            target = request.url.path
            if request.url.query:
                target += f"?{request.url.query}"
            get_session(request)[REDIRECT_KEY] = target
        flash(request, "error", "You must be logged in to do that!")
        raise RedirectRequired("/login")
    return user


def pop_redirect_url(request: Request) -> Optional[str]:
    """Return the remembered post-login target and forget it."""
    return get_session(request).pop(REDIRECT_KEY, None)


async def require_listing_owner(
    listing_id: str,
    request: Request,
    current_user: UserRead = Depends(require_login),
) -> ListingRead:
    """Allow the request only for the owner of the listing in the path."""
    parsed_id = parse_id(listing_id)
    listing = await ListingService.get_listing(parsed_id) if parsed_id else None
    if listing is None:
        flash(request, "error", "Listing not found!")
        raise RedirectRequired("/listings")
    if listing.owner_id != current_user.id:
        flash(request, "error", "You are not the owner of this listing!")
        raise RedirectRequired(f"/listings/{listing.id}")
    return listing


async def require_review_author(
    listing_id: str,
    review_id: str,
    request: Request,
    current_user: UserRead = Depends(require_login),
) -> ReviewRead:
    """Allow the request only for the author of the review in the path.

    The review must also belong to the listing named in the path.
    """
    parsed_listing_id = parse_id(listing_id)
    listing = await ListingService.get_listing(parsed_listing_id) if parsed_listing_id else None
    if listing is None:
        flash(request, "error", "Listing not found!")
        raise RedirectRequired("/listings")
    parsed_review_id = parse_id(review_id)
    review = await ReviewService.get_review(parsed_review_id) if parsed_review_id else None
    if review is None or not await ReviewService.belongs_to_listing(listing.id, review.id):
        flash(request, "error", "Review not found!")
        raise RedirectRequired(f"/listings/{listing.id}")
    if review.author_id != current_user.id:
        flash(request, "error", "You are not the author of this review!")
        raise RedirectRequired(f"/listings/{listing.id}")
    return review


def nested_fields(form, prefix: str) -> dict:
    """Collect ``prefix[name]`` text fields of a form into ``{name: value}``."""
    start = f"{prefix}["
    fields = {}
    for key, value in form.multi_items():
        if key.startswith(start) and key.endswith("]") and not isinstance(value, UploadFile):
            fields[key[len(start):-1]] = value
    return fields


def validated_form(model: Type[BaseModel], prefix: str) -> Callable:
    """Dependency factory validating the ``prefix[...]`` part of a form.

    Use this in endpoints via ``Depends(validated_form(ReviewCreate, "review"))``.
    """

    async def _validate(request: Request) -> BaseModel:
        form = await request.form()
        try:
            return model.model_validate(nested_fields(form, prefix))
        except ValidationError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=validation_message(e, prefix),
            )

    return _validate


def image_field(field: str, required: bool) -> Callable:
    """Dependency factory returning the uploaded file of ``field``.

    An empty file input counts as no file.  A missing file is a 400 when
    ``required``; files that are not jpeg/png images are always a 400.
    """
    label = field.replace("[", ".").rstrip("]")

    async def _upload(request: Request) -> Optional[UploadFile]:
        form = await request.form()
        upload = form.get(field)
        if not isinstance(upload, UploadFile) or not upload.filename:
            if required:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f'"{label}" is required',
                )
            return None
        if not is_allowed_image(upload.filename):
            allowed = ", ".join(sorted(ALLOWED_EXTENSIONS))
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f'"{label}" must be one of: {allowed}',
            )
        return upload

    return _upload
