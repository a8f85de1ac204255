from storefront.models.cart import Cart
from storefront.models.cart_item import CartItem
from storefront.models.product import Category, Product
from storefront.models.review import Review
from storefront.models.user import User

__all__ = ["Cart", "CartItem", "Category", "Product", "Review", "User"]
