"""Product reviews: buyers only, one review per (buyer, product)."""

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.enums import UserRole
from src.ct_common.errors import (
    ForbiddenError,
    ProductNotFoundError,
    ReviewExistsError,
    ReviewNotFoundError,
)
from src.ct_common.id_generator import generate_id
from src.ct_review.application.schemas import (
    ReviewCreateRequest,
    ReviewResponse,
    ReviewUpdateRequest,
)

_COLUMNS = "id, user_id, product_id, rating, comment, created_at, updated_at"

_PRODUCT_EXISTS_SQL = text("SELECT 1 FROM products WHERE id = :product_id")
_EXISTING_SQL = text(
    "SELECT id FROM reviews WHERE user_id = :user_id AND product_id = :product_id"
)
_INSERT_SQL = text(f"""
    INSERT INTO reviews (id, user_id, product_id, rating, comment)
    VALUES (:id, :user_id, :product_id, :rating, :comment)
    RETURNING {_COLUMNS}
""")
_GET_SQL = text(f"SELECT {_COLUMNS} FROM reviews WHERE id = :id")
_UPDATE_SQL = text(f"""
    UPDATE reviews
    SET rating = COALESCE(:rating, rating),
        comment = COALESCE(:comment, comment),
        updated_at = NOW()
    WHERE id = :id
    RETURNING {_COLUMNS}
""")
_DELETE_SQL = text("DELETE FROM reviews WHERE id = :id")
_LIST_FOR_PRODUCT_SQL = text("""
    SELECT r.id, r.user_id, u.name AS user_name, r.product_id, r.rating, r.comment,
           r.created_at, r.updated_at
    FROM reviews r
    LEFT JOIN users u ON CAST(u.id AS TEXT) = r.user_id
    WHERE r.product_id = :product_id
    ORDER BY r.created_at DESC, r.id DESC
""")


class ReviewService:
    async def create_review(
        self, db: AsyncSession, user_id: str, role: str, req: ReviewCreateRequest
    ) -> ReviewResponse:
        if role != UserRole.BUYER.value:
            raise ForbiddenError("Only buyers can write reviews")
        product = await db.execute(_PRODUCT_EXISTS_SQL, {"product_id": req.product_id})
        if product.fetchone() is None:
            raise ProductNotFoundError(req.product_id)
        existing = await db.execute(
            _EXISTING_SQL, {"user_id": user_id, "product_id": req.product_id}
        )
        if existing.fetchone() is not None:
            raise ReviewExistsError()
        try:
            result = await db.execute(
                _INSERT_SQL,
                {
                    "id": generate_id(),
                    "user_id": user_id,
                    "product_id": req.product_id,
                    "rating": req.rating,
                    "comment": req.comment,
                },
            )
            row = result.fetchone()
            await db.commit()
        except IntegrityError:
            # Lost a race against a concurrent review by the same buyer
            await db.rollback()
            raise ReviewExistsError() from None
        except Exception:
            await db.rollback()
            raise
        return ReviewResponse.from_row(row)

    async def update_review(
        self, db: AsyncSession, review_id: str, user_id: str, req: ReviewUpdateRequest
    ) -> ReviewResponse:
        current = (await db.execute(_GET_SQL, {"id": review_id})).fetchone()
        if current is None:
            raise ReviewNotFoundError(review_id)
        if str(current.user_id) != user_id:
            raise ForbiddenError("You can only edit your own reviews")
        try:
            result = await db.execute(
                _UPDATE_SQL, {"id": review_id, "rating": req.rating, "comment": req.comment}
            )
            row = result.fetchone()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ReviewResponse.from_row(row)

    async def delete_review(
        self, db: AsyncSession, review_id: str, user_id: str, role: str
    ) -> None:
        current = (await db.execute(_GET_SQL, {"id": review_id})).fetchone()
        if current is None:
            raise ReviewNotFoundError(review_id)
        if str(current.user_id) != user_id and role != UserRole.ADMIN.value:
            raise ForbiddenError("You are not allowed to delete this review")
        try:
            await db.execute(_DELETE_SQL, {"id": review_id})
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    async def list_for_product(self, db: AsyncSession, product_id: str) -> list[ReviewResponse]:
        result = await db.execute(_LIST_FOR_PRODUCT_SQL, {"product_id": product_id})
        return [ReviewResponse.from_row(row) for row in result.fetchall()]
