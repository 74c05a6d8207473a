"""
Review actions on a listing.

Any logged-in user may review a listing; only a review's author may
delete it.  Both actions redirect back to the listing's page.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from wanderlust.app.api.deps import require_login, require_review_author, validated_form
from wanderlust.app.core.db import parse_id
from wanderlust.app.core.session import flash
from wanderlust.app.schemas.review import ReviewCreate, ReviewRead
from wanderlust.app.schemas.user import UserRead
from wanderlust.app.services.review_service import ReviewService


router = APIRouter()


@router.post("")
async def create_review(
    listing_id: str,
    request: Request,
    current_user: UserRead = Depends(require_login),
    data: ReviewCreate = Depends(validated_form(ReviewCreate, "review")),
):
    parsed_id = parse_id(listing_id)
    review = await ReviewService.create_review(parsed_id, data, current_user.id) if parsed_id else None
    if review is None:
        flash(request, "error", "Listing not found!")
        return RedirectResponse("/listings", status_code=status.HTTP_302_FOUND)
    flash(request, "success", "New review created successfully!")
    return RedirectResponse(f"/listings/{parsed_id}", status_code=status.HTTP_302_FOUND)


@router.delete("/{review_id}")
async def delete_review(
    listing_id: str,
    request: Request,
    review: ReviewRead = Depends(require_review_author),
):
    parsed_id = parse_id(listing_id)
    await ReviewService.delete_review(parsed_id, review.id)
    flash(request, "success", "Review deleted successfully!")
    return RedirectResponse(f"/listings/{parsed_id}", status_code=status.HTTP_302_FOUND)
