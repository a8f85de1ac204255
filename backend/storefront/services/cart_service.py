import logging
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy.orm import Session

from storefront.config import Settings
from storefront.errors import InsufficientStockError, InvalidInputError, NotFoundError
from storefront.models.cart import Cart
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart_schema import CartOut
from storefront.utils.ids import normalize_id
from storefront.utils.locks import cart_line_lock
from storefront.utils.transactions import persisting

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class CartService:
    """
    Per-user cart: validates every mutation against current stock and the
    existing lines, recomputes the total from current prices and persists.

    Totals always follow the catalogue: a price change between "add" and
    "checkout" is picked up on the next persist of the cart.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.cart_repo = CartRepository(db)
        self.product_repo = ProductRepository(db)

    # -- queries --------------------------------------------------------

    def get_cart(self, user_id: str) -> CartOut:
        """The user's cart, created empty on first access."""
        cart = self.cart_repo.get_by_user(user_id)
        if cart is None:
            with persisting(self.db, "cart.create"):
                cart = self.cart_repo.create_for_user(user_id)
                self._recompute_total(cart)
            logger.info("Created cart for user=%s", user_id)
        else:
            # prices may have moved since the last write; only then is the cart written
            total = self._current_total(cart)
            if total != Decimal(cart.total_amount):
                with persisting(self.db, "cart.reprice"):
                    cart.total_amount = total
                logger.info("Repriced cart user=%s total=%s", user_id, total)
        return self.build_view(cart)

    def count(self, user_id: str) -> int:
        cart = self.cart_repo.get_by_user(user_id)
        if cart is None:
            return 0
        return sum(it.quantity for it in cart.items)

    # -- commands -------------------------------------------------------

    def add_item(self, user_id: str, product_id: Optional[str], quantity: int = 1) -> CartOut:
        if not product_id:
            raise InvalidInputError("Item ID is required")
        product_id = normalize_id(product_id, "item ID")
        if quantity is None or quantity < 1:
            raise InvalidInputError("Quantity must be at least 1")

        with cart_line_lock(self.settings, user_id, product_id):
            with persisting(self.db, "cart.add"):
                product = self._active_product(product_id)
                if product.stock < quantity:
                    raise InsufficientStockError("Insufficient stock available")

                cart = self.cart_repo.get_by_user(user_id) or self.cart_repo.create_for_user(user_id)
                line = self.cart_repo.find_line(cart, product_id)
                if line is not None:
                    new_quantity = line.quantity + quantity
                    if product.stock < new_quantity:
                        raise InsufficientStockError(
                            f"Only {product.stock} items available in stock"
                        )
                    line.quantity = new_quantity
                else:
                    self.cart_repo.append_line(cart, product_id, quantity)
                self._recompute_total(cart)

        logger.info("cart.add user=%s product=%s qty=%s", user_id, product_id, quantity)
        return self.build_view(cart)

    def update_item(self, user_id: str, product_id: Optional[str], quantity: Optional[int]) -> CartOut:
        """Set a line to exactly ``quantity``; 0 removes the line."""
        if not product_id:
            raise InvalidInputError("Item ID is required")
        product_id = normalize_id(product_id, "item ID")
        if quantity is None:
            raise InvalidInputError("Quantity is required")
        if quantity < 0:
            raise InvalidInputError("Quantity cannot be negative")

        with cart_line_lock(self.settings, user_id, product_id):
            with persisting(self.db, "cart.update"):
                cart = self._existing_cart(user_id)
                line = self.cart_repo.find_line(cart, product_id)
                if line is None:
                    raise NotFoundError("Item not found in cart")

                if quantity == 0:
                    self.cart_repo.remove_line(cart, line)
                else:
                    product = self._active_product(product_id)
                    if product.stock < quantity:
                        raise InsufficientStockError(
                            f"Only {product.stock} items available in stock"
                        )
                    line.quantity = quantity
                self._recompute_total(cart)

        logger.info("cart.update user=%s product=%s qty=%s", user_id, product_id, quantity)
        return self.build_view(cart)

    def remove_item(self, user_id: str, product_id: str) -> CartOut:
        product_id = normalize_id(product_id, "item ID")

        with cart_line_lock(self.settings, user_id, product_id):
            with persisting(self.db, "cart.remove"):
                cart = self._existing_cart(user_id)
                line = self.cart_repo.find_line(cart, product_id)
                if line is None:
                    raise NotFoundError("Item not found in cart")
                self.cart_repo.remove_line(cart, line)
                self._recompute_total(cart)

        logger.info("cart.remove user=%s product=%s", user_id, product_id)
        return self.build_view(cart)

    def clear(self, user_id: str) -> CartOut:
        with persisting(self.db, "cart.clear"):
            cart = self.cart_repo.get_by_user(user_id)
            if cart is None:
                cart = self.cart_repo.create_for_user(user_id)
            else:
                self.cart_repo.clear(cart)
            self._recompute_total(cart)

        logger.info("cart.clear user=%s", user_id)
        return self.build_view(cart)

    # -- helpers --------------------------------------------------------

    def _active_product(self, product_id: str) -> Product:
        product = self.product_repo.get_active(product_id)
        if product is None:
            raise NotFoundError("Item not found")
        return product

    def _existing_cart(self, user_id: str) -> Cart:
        cart = self.cart_repo.get_by_user(user_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        return cart

    def _recompute_total(self, cart: Cart) -> Decimal:
        """Re-read every line's product price now and store the new total."""
        cart.total_amount = self._current_total(cart)
        return cart.total_amount

    def _current_total(self, cart: Cart) -> Decimal:
        if not cart.items:
            return Decimal("0.00")
        products = self.product_repo.get_many([it.product_id for it in cart.items], refresh=True)
        total = Decimal("0")
        for it in cart.items:
            product = products.get(it.product_id)
            if product is None:
                logger.warning("Cart %s references missing product %s", cart.id, it.product_id)
                continue
            total += Decimal(product.price) * it.quantity
        return total.quantize(CENTS)

    def build_view(self, cart: Cart) -> CartOut:
        """
        Join the cart lines against the catalogue for the client. Product
        details are resolved here and never stored on the cart.
        """
        products: Dict[str, Product] = self.product_repo.get_many(
            [it.product_id for it in cart.items]
        )
        lines = []
        for it in cart.items:
            product = products.get(it.product_id)
            if product is None:
                continue
            lines.append(
                {
                    "product": {
                        "id": product.id,
                        "name": product.name,
                        "price": product.price,
                        "image_url": product.image_url,
                        "category": product.category,
                        "stock": product.stock,
                    },
                    "quantity": it.quantity,
                }
            )
        return CartOut.model_validate(
            {
                "id": cart.id,
                "user_id": cart.user_id,
                "items": lines,
                "total_amount": cart.total_amount,
                "created_at": cart.created_at,
                "updated_at": cart.updated_at,
            }
        )
