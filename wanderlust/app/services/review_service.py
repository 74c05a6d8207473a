"""
Business logic for reviews.

A review row lives in ``reviews`` and is attached to its listing by a
reference in ``listing_reviews``.  Creating and deleting a review
touches both tables; each operation runs in a single transaction so
a listing never points at a missing review.
"""

import logging
from typing import Optional

from ..schemas.review import ReviewCreate, ReviewRead


class ReviewService:
    """Service for handling listing reviews."""

    @classmethod
    async def create_review(
        cls,
        listing_id: int,
        data: ReviewCreate,
        author_id: int,
    ) -> Optional[ReviewRead]:
        """Create a review and append it to the listing's reviews.

        Returns ``None`` without writing anything if the listing does
        not exist.
        """
        logger = logging.getLogger(__name__)
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            listing = cursor.execute("SELECT id FROM listings WHERE id = ?", (listing_id,)).fetchone()
            if not listing:
                return None
            cursor.execute(
                "INSERT INTO reviews (comment, rating, author_id) VALUES (?, ?, ?)",
                (data.comment, data.rating, author_id),
            )
            review_id = cursor.lastrowid
            position = cursor.execute(
                "SELECT COALESCE(MAX(position), 0) + 1 AS next FROM listing_reviews WHERE listing_id = ?",
                (listing_id,),
            ).fetchone()["next"]
            cursor.execute(
                "INSERT INTO listing_reviews (listing_id, review_id, position) VALUES (?, ?, ?)",
                (listing_id, review_id, position),
            )
            conn.commit()
            row = cursor.execute(
                "SELECT id, comment, rating, author_id, created_at FROM reviews WHERE id = ?",
                (review_id,),
            ).fetchone()
            logger.info("User %s reviewed listing %s (review %s)", author_id, listing_id, review_id)
            return ReviewRead(
                id=row["id"],
                comment=row["comment"],
                rating=row["rating"],
                author_id=row["author_id"],
                created_at=row["created_at"],
            )
        except Exception as e:
            conn.rollback()
            logger.error("Failed to create review: %s", e)
            raise
        finally:
            conn.close()

    @classmethod
    async def get_review(cls, review_id: int) -> Optional[ReviewRead]:
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, comment, rating, author_id, created_at FROM reviews WHERE id = ?",
                (review_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            return None
        return ReviewRead(
            id=row["id"],
            comment=row["comment"],
            rating=row["rating"],
            author_id=row["author_id"],
            created_at=row["created_at"],
        )

    @classmethod
    async def delete_review(cls, listing_id: int, review_id: int) -> bool:
        """Remove the review reference from the listing and delete the review.

        Returns ``False`` if the review does not exist.
        """
        logger = logging.getLogger(__name__)
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT id FROM reviews WHERE id = ?", (review_id,)).fetchone()
            if not row:
                return False
            cursor.execute(
                "DELETE FROM listing_reviews WHERE listing_id = ? AND review_id = ?",
                (listing_id, review_id),
            )
            cursor.execute("DELETE FROM reviews WHERE id = ?", (review_id,))
            conn.commit()
            logger.info("Deleted review %s of listing %s", review_id, listing_id)
            return True
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @classmethod
    async def belongs_to_listing(cls, listing_id: int, review_id: int) -> bool:
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT 1 FROM listing_reviews WHERE listing_id = ? AND review_id = ?",
                (listing_id, review_id),
            ).fetchone()
            return row is not None
        finally:
            conn.close()
