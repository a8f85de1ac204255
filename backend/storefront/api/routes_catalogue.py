from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_app_settings, get_current_user
from storefront.config import Settings
from storefront.db import get_db
from storefront.models.user import User
from storefront.repositories.product_repo import DEFAULT_SORT, ProductQuery
from storefront.schemas.product_schema import ProductCreateIn, ProductUpdateIn
from storefront.schemas.review_schema import ReviewIn
from storefront.services.catalogue_service import CatalogueService
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/api/items", tags=["catalogue"])


def get_catalogue(
    db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)
) -> CatalogueService:
    return CatalogueService(db, settings)


@router.get("", summary="List products")
def list_products(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    category: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    search: Optional[str] = Query(None, description="search term"),
    sort_by: str = Query(DEFAULT_SORT, alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    svc: CatalogueService = Depends(get_catalogue),
):
    q = ProductQuery(
        category=category or None,
        min_price=min_price,
        max_price=max_price,
        search=search.strip() if search and search.strip() else None,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit if limit is not None else svc.settings.DEFAULT_PAGE_SIZE,
    )
    return svc.list_products(q)


@router.get("/categories", summary="Categories with active products")
def categories(svc: CatalogueService = Depends(get_catalogue)):
    return {"categories": svc.categories()}


@router.get("/{item_id}", summary="Get product")
def get_product(item_id: str, svc: CatalogueService = Depends(get_catalogue)):
    return svc.get_product(item_id)


@router.post("", status_code=201, summary="Create product")
def create_product(
    payload: ProductCreateIn,
    user: User = Depends(get_current_user),
    svc: CatalogueService = Depends(get_catalogue),
):
    return {"message": "Item created successfully", "item": svc.create_product(payload)}


@router.put("/{item_id}", summary="Update product")
def update_product(
    item_id: str,
    payload: ProductUpdateIn,
    user: User = Depends(get_current_user),
    svc: CatalogueService = Depends(get_catalogue),
):
    return {"message": "Item updated successfully", "item": svc.update_product(item_id, payload)}


@router.delete("/{item_id}", summary="Soft-delete product")
def delete_product(
    item_id: str,
    user: User = Depends(get_current_user),
    svc: CatalogueService = Depends(get_catalogue),
):
    svc.soft_delete(item_id)
    return {"message": "Item deleted successfully"}


@router.get("/{item_id}/reviews", summary="List reviews")
def list_reviews(item_id: str, db: Session = Depends(get_db)):
    return {"reviews": ReviewService(db).list_reviews(item_id)}


@router.post("/{item_id}/reviews", status_code=201, summary="Add review")
def add_review(
    item_id: str,
    payload: ReviewIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = ReviewService(db).add_review(user, item_id, payload.rating, payload.comment)
    return {"message": "Review added successfully", "review": review}
