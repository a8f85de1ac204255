from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field

from storefront.schemas.base import CamelModel, Money


class CartProductOut(CamelModel):
    id: str
    name: str
    price: Money
    image_url: str
    category: str
    stock: int


class CartLineOut(CamelModel):
    product: CartProductOut
    quantity: int


class CartOut(CamelModel):
    id: str
    user_id: str
    items: List[CartLineOut]
    total_amount: Money
    created_at: datetime
    updated_at: datetime


def _product_id_field():
    # "itemId" is what older storefront clients send
    return Field(
        default=None,
        validation_alias=AliasChoices("productId", "itemId", "product_id"),
        serialization_alias="productId",
    )


class AddToCartIn(CamelModel):
    product_id: Optional[str] = _product_id_field()
    quantity: int = 1


class UpdateCartIn(CamelModel):
    product_id: Optional[str] = _product_id_field()
    quantity: Optional[int] = None
