import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.config import Settings
from storefront.errors import InvalidInputError, NotFoundError
from storefront.models.product import PLACEHOLDER_IMAGE, Category, Product
from storefront.repositories.product_repo import ProductQuery, ProductRepository
from storefront.schemas.product_schema import (
    ProductCreateIn,
    ProductDetailOut,
    ProductOut,
    ProductUpdateIn,
)
from storefront.services.review_service import rating_summary, review_view
from storefront.utils.ids import normalize_id
from storefront.utils.pagination import paginate
from storefront.utils.transactions import persisting

logger = logging.getLogger(__name__)


def _to_price(value) -> Decimal:
    try:
        price = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        raise InvalidInputError("Price must be a number")
    if price < 0:
        raise InvalidInputError("Price cannot be negative")
    return price


def _check_stock(value: int) -> int:
    if value < 0:
        raise InvalidInputError("Stock cannot be negative")
    return value


def _check_category(value: str) -> str:
    if value not in Category.values():
        raise InvalidInputError(
            f"Category must be one of: {', '.join(Category.values())}"
        )
    return value


class CatalogueService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.repo = ProductRepository(db)

    def list_products(self, q: ProductQuery) -> dict:
        """Active products for one page plus pagination metadata."""
        # out-of-range paging values are clamped, never rejected
        q.page = max(q.page, 1)
        q.limit = max(1, min(q.limit, self.settings.MAX_PAGE_SIZE))
        items, total = self.repo.list(q)
        return {
            "items": [ProductOut.model_validate(p) for p in items],
            "pagination": paginate(q.page, q.limit, total),
        }

    def categories(self) -> List[str]:
        return self.repo.distinct_categories()

    def get_product(self, raw_id: str) -> ProductDetailOut:
        product_id = normalize_id(raw_id, "item ID")
        p = self.repo.get_with_reviews(product_id)
        if p is None or not p.is_active:
            raise NotFoundError("Item not found")
        summary = rating_summary(p.reviews)
        data = ProductOut.model_validate(p).model_dump()
        data.update(
            reviews=[review_view(r) for r in p.reviews],
            average_rating=summary.average_rating,
            num_reviews=summary.num_reviews,
        )
        return ProductDetailOut.model_validate(data)

    def create_product(self, payload: ProductCreateIn) -> ProductOut:
        name = (payload.name or "").strip()
        description = (payload.description or "").strip()
        if not name or not description or payload.price is None or not payload.category:
            raise InvalidInputError("Name, description, price, and category are required")

        product = Product(
            name=name,
            description=description,
            price=_to_price(payload.price),
            category=_check_category(payload.category),
            image_url=payload.image_url or PLACEHOLDER_IMAGE,
            stock=_check_stock(payload.stock or 0),
            is_active=True,
        )
        with persisting(self.db, "product.create"):
            self.repo.add(product)
        logger.info("Created product id=%s name=%r", product.id, product.name)
        return ProductOut.model_validate(product)

    def update_product(self, raw_id: str, payload: ProductUpdateIn) -> ProductOut:
        """Partial update; only fields present in the payload are applied."""
        product_id = normalize_id(raw_id, "item ID")
        fields = payload.model_dump(exclude_unset=True)

        with persisting(self.db, "product.update"):
            p = self.repo.get(product_id)
            if p is None:
                raise NotFoundError("Item not found")
            if "name" in fields:
                if not (fields["name"] or "").strip():
                    raise InvalidInputError("Name cannot be empty")
                p.name = fields["name"].strip()
            if "description" in fields:
                if not (fields["description"] or "").strip():
                    raise InvalidInputError("Description cannot be empty")
                p.description = fields["description"].strip()
            if "price" in fields:
                if fields["price"] is None:
                    raise InvalidInputError("Price must be a number")
                p.price = _to_price(fields["price"])
            if "category" in fields:
                p.category = _check_category(fields["category"])
            if "image_url" in fields:
                p.image_url = fields["image_url"] or PLACEHOLDER_IMAGE
            if "stock" in fields:
                if fields["stock"] is None:
                    raise InvalidInputError("Stock must be a number")
                p.stock = _check_stock(fields["stock"])
            if fields.get("is_active") is not None:
                p.is_active = fields["is_active"]
            self.db.flush()

        logger.info("Updated product id=%s fields=%s", p.id, sorted(fields))
        return ProductOut.model_validate(p)

    def soft_delete(self, raw_id: str) -> None:
        product_id = normalize_id(raw_id, "item ID")
        with persisting(self.db, "product.delete"):
            p: Optional[Product] = self.repo.get(product_id)
            if p is None:
                raise NotFoundError("Item not found")
            p.is_active = False
        logger.info("Soft-deleted product id=%s", product_id)
