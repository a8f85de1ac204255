from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_app_settings, get_current_user
from storefront.config import Settings
from storefront.db import get_db
from storefront.models.user import User
from storefront.schemas.cart_schema import AddToCartIn, UpdateCartIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_cart_service(
    db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)
) -> CartService:
    return CartService(db, settings)


@router.get("", summary="Get cart")
def get_cart(user: User = Depends(get_current_user), svc: CartService = Depends(get_cart_service)):
    return {"cart": svc.get_cart(user.id)}


@router.post("/add", summary="Add item to cart")
def add_item(
    payload: AddToCartIn,
    user: User = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.add_item(user.id, payload.product_id, payload.quantity)
    return {"message": "Item added to cart successfully", "cart": cart}


@router.put("/update", summary="Set quantity of a cart line")
def update_item(
    payload: UpdateCartIn,
    user: User = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.update_item(user.id, payload.product_id, payload.quantity)
    return {"message": "Cart updated successfully", "cart": cart}


@router.delete("/remove/{product_id}", summary="Remove item")
def remove_item(
    product_id: str,
    user: User = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.remove_item(user.id, product_id)
    return {"message": "Item removed from cart successfully", "cart": cart}


@router.delete("/clear", summary="Clear cart")
def clear(user: User = Depends(get_current_user), svc: CartService = Depends(get_cart_service)):
    return {"message": "Cart cleared successfully", "cart": svc.clear(user.id)}


@router.get("/count", summary="Number of units in cart")
def count(user: User = Depends(get_current_user), svc: CartService = Depends(get_cart_service)):
    return {"count": svc.count(user.id)}
