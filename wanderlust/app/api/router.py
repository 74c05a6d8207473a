"""
Top‑level router.

Aggregates the domain routers.  The catch-all route must stay last: any
path no other route matched is answered with a 404.
"""

from fastapi import APIRouter, HTTPException, status

from .endpoints import listings, reviews, users


router = APIRouter()

router.include_router(listings.router, prefix="/listings", tags=["listings"])
router.include_router(reviews.router, prefix="/listings/{listing_id}/reviews", tags=["reviews"])
router.include_router(users.router, tags=["users"])


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def not_found(path: str):
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page Not Found!")
