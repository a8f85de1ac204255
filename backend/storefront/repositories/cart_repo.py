from typing import Optional

from sqlalchemy.orm import Session, selectinload

from storefront.models.cart import Cart
from storefront.models.cart_item import CartItem


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> Optional[Cart]:
        return (
            self.db.query(Cart)
            .options(selectinload(Cart.items))
            .filter(Cart.user_id == user_id)
            .first()
        )

    def create_for_user(self, user_id: str) -> Cart:
        c = Cart(user_id=user_id, total_amount=0)
        self.db.add(c)
        self.db.flush()
        return c

    def find_line(self, cart: Cart, product_id: str) -> Optional[CartItem]:
        return next((it for it in cart.items if it.product_id == product_id), None)

    def append_line(self, cart: Cart, product_id: str, quantity: int) -> CartItem:
        position = max((it.position for it in cart.items), default=-1) + 1
        item = CartItem(product_id=product_id, quantity=quantity, position=position)
        cart.items.append(item)
        return item

    def remove_line(self, cart: Cart, item: CartItem) -> None:
        # delete-orphan cascade deletes the row on flush
        cart.items.remove(item)

    def clear(self, cart: Cart) -> None:
        cart.items.clear()
