"""
Sample catalogue, inserted idempotently (matched by product name).
"""
import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from storefront.models.product import PLACEHOLDER_IMAGE, Category, Product
from storefront.utils.transactions import persisting

logger = logging.getLogger(__name__)


def _img(label: str) -> str:
    return f"https://via.placeholder.com/300x300?text={label}"


SAMPLE_PRODUCTS = [
    {"name": "iPhone 14 Pro", "description": "Latest iPhone with Pro camera system and A16 Bionic chip",
     "price": "999", "category": "electronics", "image_url": _img("iPhone+14+Pro"), "stock": 25},
    {"name": "Samsung Galaxy S23", "description": "Flagship Android phone with excellent camera and performance",
     "price": "899", "category": "electronics", "image_url": _img("Galaxy+S23"), "stock": 30},
    {"name": "Nike Air Max 270", "description": "Comfortable running shoes with Air Max technology",
     "price": "150", "category": "clothing", "image_url": _img("Nike+Air+Max"), "stock": 50},
    {"name": "MacBook Air M2", "description": "Lightweight laptop with M2 chip and all-day battery life",
     "price": "1199", "category": "electronics", "image_url": _img("MacBook+Air"), "stock": 15},
    {"name": "The Great Gatsby", "description": "Classic American novel by F. Scott Fitzgerald",
     "price": "12.99", "category": "books", "image_url": _img("Great+Gatsby"), "stock": 100},
    {"name": "Coffee Table", "description": "Modern wooden coffee table for living room",
     "price": "299", "category": "home", "image_url": _img("Coffee+Table"), "stock": 12},
    {"name": "Yoga Mat", "description": "Non-slip yoga mat for exercise and meditation",
     "price": "29.99", "category": "sports", "image_url": _img("Yoga+Mat"), "stock": 75},
    {"name": "LEGO Star Wars Set", "description": "Build your own Millennium Falcon with this LEGO set",
     "price": "159.99", "category": "toys", "image_url": _img("LEGO+Set"), "stock": 20},
    {"name": "Bluetooth Headphones", "description": "Wireless noise-cancelling headphones with premium sound",
     "price": "249", "category": "electronics", "image_url": _img("Headphones"), "stock": 40},
    {"name": "Denim Jacket", "description": "Classic blue denim jacket, perfect for casual wear",
     "price": "79.99", "category": "clothing", "image_url": _img("Denim+Jacket"), "stock": 35},
]


def _normalize_entry(entry: dict) -> Optional[dict]:
    """Accept snake_case or camelCase keys; skip entries that cannot be stored."""
    name = (entry.get("name") or entry.get("title") or "").strip()
    category = entry.get("category") or Category.OTHER.value
    if not name or category not in Category.values():
        return None
    try:
        price = Decimal(str(entry.get("price", 0))).quantize(Decimal("0.01"))
        stock = int(entry.get("stock", 0) or 0)
    except (ArithmeticError, ValueError):
        return None
    if price < 0 or stock < 0:
        return None
    return {
        "name": name,
        "description": entry.get("description") or name,
        "price": price,
        "category": category,
        "image_url": entry.get("image_url") or entry.get("imageUrl") or PLACEHOLDER_IMAGE,
        "stock": stock,
    }


def seed_catalog(db: Session, entries: Optional[Iterable[dict]] = None) -> List[Product]:
    """Insert entries whose name is not in the catalogue yet; returns the new rows."""
    created = []
    skipped = 0
    with persisting(db, "seed"):
        for raw in entries if entries is not None else SAMPLE_PRODUCTS:
            ent = _normalize_entry(raw)
            if ent is None:
                skipped += 1
                continue
            if db.query(Product).filter(Product.name == ent["name"]).first():
                continue
            p = Product(**ent)
            db.add(p)
            created.append(p)
    logger.info("Seeded %d products (%d invalid entries skipped)", len(created), skipped)
    return created
