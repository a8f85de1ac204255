import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from storefront.errors import AlreadyExistsError, InvalidInputError, NotFoundError
from storefront.models.review import Review
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product_schema import RatingSummary
from storefront.schemas.review_schema import ReviewOut
from storefront.utils.ids import normalize_id
from storefront.utils.transactions import persisting

logger = logging.getLogger(__name__)


def review_view(review: Review) -> ReviewOut:
    return ReviewOut.model_validate(
        {
            "id": review.id,
            "user": {"id": review.user.id, "name": review.user.name},
            "rating": review.rating,
            "comment": review.comment,
            "created_at": review.created_at,
        }
    )


def rating_summary(reviews: Iterable[Review]) -> RatingSummary:
    # computed on every read, never stored on the product
    ratings = [r.rating for r in reviews]
    if not ratings:
        return RatingSummary(average_rating=0.0, num_reviews=0)
    return RatingSummary(
        average_rating=round(sum(ratings) / len(ratings), 2),
        num_reviews=len(ratings),
    )


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.product_repo = ProductRepository(db)

    def list_reviews(self, raw_id: str) -> List[ReviewOut]:
        product_id = normalize_id(raw_id, "item ID")
        p = self.product_repo.get_with_reviews(product_id)
        if p is None:
            raise NotFoundError("Item not found")
        return [review_view(r) for r in p.reviews]

    def add_review(
        self, user: User, raw_id: str, rating: Optional[int], comment: Optional[str]
    ) -> ReviewOut:
        product_id = normalize_id(raw_id, "item ID")
        comment = (comment or "").strip()
        if rating is None or not comment:
            raise InvalidInputError("Rating and comment are required")
        if rating < 1 or rating > 5:
            raise InvalidInputError("Rating must be between 1 and 5")

        with persisting(self.db, "review.add"):
            p = self.product_repo.get_with_reviews(product_id)
            if p is None or not p.is_active:
                raise NotFoundError("Item not found")
            if any(r.user_id == user.id for r in p.reviews):
                raise AlreadyExistsError("You have already reviewed this item")
            review = Review(user_id=user.id, rating=rating, comment=comment)
            review.user = user
            p.reviews.append(review)
            self.db.flush()

        logger.info("review.add user=%s product=%s rating=%s", user.id, product_id, rating)
        return review_view(review)
