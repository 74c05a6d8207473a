"""
Business logic for listings.

Listings are stored in the ``listings`` table; the ordered review
references of a listing live in ``listing_reviews``.  Ownership checks
are not done here, they run in the guard dependencies before any of
the mutating methods is reached.
"""

import logging
import sqlite3
from typing import List, Optional

from ..schemas.listing import ImageRef, ListingCreate, ListingRead
from ..schemas.review import ReviewRead
from ..schemas.user import UserRead


LISTING_COLUMNS = (
    "id, title, description, price, location, image_url, image_filename, owner_id"
)


def _row_to_listing(row: sqlite3.Row) -> ListingRead:
    image = None
    if row["image_url"]:
        image = ImageRef(url=row["image_url"], filename=row["image_filename"] or "")
    return ListingRead(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        price=row["price"],
        location=row["location"],
        owner_id=row["owner_id"],
        image=image,
    )


class ListingService:
    """Service for managing property listings."""

    @classmethod
    async def list_listings(cls) -> List[ListingRead]:
        """Return every listing, oldest first.  No filtering or paging."""
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {LISTING_COLUMNS} FROM listings ORDER BY id ASC"
            ).fetchall()
            return [_row_to_listing(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_listing(cls, listing_id: int, expand: bool = False) -> Optional[ListingRead]:
        """Fetch one listing or ``None`` if it does not exist.

        With ``expand`` the owner and the reviews (each with its author)
        are loaded as well.  Review references whose review row is gone
        are skipped.
        """
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute(
                f"SELECT {LISTING_COLUMNS} FROM listings WHERE id = ?",
                (listing_id,),
            ).fetchone()
            if not row:
                return None
            listing = _row_to_listing(row)
            if not expand:
                return listing

            owner = cursor.execute(
                "SELECT id, username, email FROM users WHERE id = ?",
                (listing.owner_id,),
            ).fetchone()
            if owner:
                listing.owner = UserRead(id=owner["id"], username=owner["username"], email=owner["email"])

            review_rows = cursor.execute(
                """
                SELECT r.id, r.comment, r.rating, r.author_id, r.created_at,
                       u.username AS author_username, u.email AS author_email
                FROM listing_reviews lr
                JOIN reviews r ON r.id = lr.review_id
                LEFT JOIN users u ON u.id = r.author_id
                WHERE lr.listing_id = ?
                ORDER BY lr.position ASC
                """,
                (listing_id,),
            ).fetchall()
            for r in review_rows:
                author = None
                if r["author_username"] is not None:
                    author = UserRead(id=r["author_id"], username=r["author_username"], email=r["author_email"])
                listing.reviews.append(
                    ReviewRead(
                        id=r["id"],
                        comment=r["comment"],
                        rating=r["rating"],
                        author_id=r["author_id"],
                        author=author,
                        created_at=r["created_at"],
                    )
                )
            return listing
        finally:
            conn.close()

    @classmethod
    async def create_listing(cls, data: ListingCreate, owner_id: int, image: ImageRef) -> ListingRead:
        """Persist a new listing owned by ``owner_id`` and return it."""
        logger = logging.getLogger(__name__)
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO listings (title, description, price, location, image_url, image_filename, owner_id)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.title,
                    data.description,
                    data.price,
                    data.location,
                    image.url,
                    image.filename,
                    owner_id,
                ),
            )
            listing_id = cursor.lastrowid
            conn.commit()
            logger.info("User %s created listing %s '%s'", owner_id, listing_id, data.title)
            return ListingRead(id=listing_id, owner_id=owner_id, image=image, **data.model_dump())
        except Exception as e:
            conn.rollback()
            logger.error("Failed to create listing: %s", e)
            raise
        finally:
            conn.close()

    @classmethod
    async def update_listing(
        cls,
        listing_id: int,
        data: ListingCreate,
        image: Optional[ImageRef] = None,
    ) -> Optional[ListingRead]:
        """Apply ``data`` to a listing and, if given, replace its image.

        Both writes happen in one transaction.  Returns the updated
        listing, or ``None`` if it does not exist.
        """
        logger = logging.getLogger(__name__)
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE listings
                SET title = ?, description = ?, price = ?, location = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (data.title, data.description, data.price, data.location, listing_id),
            )
            if cursor.rowcount == 0:
                return None
            if image is not None:
                cursor.execute(
                    "UPDATE listings SET image_url = ?, image_filename = ? WHERE id = ?",
                    (image.url, image.filename, listing_id),
                )
            conn.commit()
            row = cursor.execute(
                f"SELECT {LISTING_COLUMNS} FROM listings WHERE id = ?",
                (listing_id,),
            ).fetchone()
            logger.info("Updated listing %s (new image: %s)", listing_id, image is not None)
            return _row_to_listing(row)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @classmethod
    async def delete_listing(cls, listing_id: int) -> bool:
        """Delete a listing together with its reviews.

        Returns ``False`` if the listing does not exist.
        """
        logger = logging.getLogger(__name__)
        from wanderlust.app.core.db import get_connection
        conn = get_connection()
        try:
            cursor = conn.cursor()
            exists = cursor.execute("SELECT id FROM listings WHERE id = ?", (listing_id,)).fetchone()
            if not exists:
                return False
            cursor.execute(
                "DELETE FROM reviews WHERE id IN (SELECT review_id FROM listing_reviews WHERE listing_id = ?)",
                (listing_id,),
            )
            removed_reviews = cursor.rowcount
            cursor.execute("DELETE FROM listings WHERE id = ?", (listing_id,))
            conn.commit()
            logger.info("Deleted listing %s and %s review(s)", listing_id, removed_reviews)
            return True
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
