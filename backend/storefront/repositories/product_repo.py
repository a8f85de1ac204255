from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from storefront.models.product import Product
from storefront.models.review import Review

SORT_FIELDS = {
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
    "price": Product.price,
    "name": Product.name,
    "stock": Product.stock,
}
DEFAULT_SORT = "createdAt"


@dataclass
class ProductQuery:
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    search: Optional[str] = None
    sort_by: str = DEFAULT_SORT
    sort_order: str = "desc"
    page: int = 1
    limit: int = 12


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: str) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def get_active(self, product_id: str) -> Optional[Product]:
        p = self.get(product_id)
        if p is None or not p.is_active:
            return None
        return p

    def get_with_reviews(self, product_id: str) -> Optional[Product]:
        return (
            self.db.query(Product)
            .options(selectinload(Product.reviews).selectinload(Review.user))
            .filter(Product.id == product_id)
            .first()
        )

    def get_many(self, product_ids: List[str], refresh: bool = False) -> Dict[str, Product]:
        if not product_ids:
            return {}
        query = self.db.query(Product).filter(Product.id.in_(product_ids))
        if refresh:
            query = query.populate_existing()
        rows = query.all()
        return {p.id: p for p in rows}

    def list(self, q: ProductQuery) -> Tuple[List[Product], int]:
        query = self.db.query(Product).filter(Product.is_active == True)  # noqa: E712
        if q.category and q.category != "all":
            query = query.filter(Product.category == q.category)
        if q.min_price is not None:
            query = query.filter(Product.price >= q.min_price)
        if q.max_price is not None:
            query = query.filter(Product.price <= q.max_price)
        if q.search:
            like = f"%{_escape_like(q.search)}%"
            query = query.filter(
                or_(
                    Product.name.ilike(like, escape="\\"),
                    Product.description.ilike(like, escape="\\"),
                )
            )

        total = query.with_entities(func.count(Product.id)).scalar() or 0

        column = SORT_FIELDS.get(q.sort_by, SORT_FIELDS[DEFAULT_SORT])
        # anything but "asc" sorts descending
        ordering = column.asc() if (q.sort_order or "").lower() == "asc" else column.desc()
        # id as tie-breaker keeps pages stable
        items = (
            query.order_by(ordering, Product.id.asc())
            .offset((q.page - 1) * q.limit)
            .limit(q.limit)
            .all()
        )
        return items, total

    def distinct_categories(self) -> List[str]:
        rows = (
            self.db.query(Product.category)
            .filter(Product.is_active == True)  # noqa: E712
            .distinct()
            .order_by(Product.category)
            .all()
        )
        return [r[0] for r in rows]

    def add(self, product: Product) -> Product:
        self.db.add(product)
        self.db.flush()
        return product
