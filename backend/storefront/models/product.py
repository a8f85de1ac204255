import enum

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.db import Base
from storefront.models._common import new_id, utcnow

PLACEHOLDER_IMAGE = "https://via.placeholder.com/300x300?text=No+Image"


class Category(str, enum.Enum):
    ELECTRONICS = "electronics"
    CLOTHING = "clothing"
    BOOKS = "books"
    HOME = "home"
    SPORTS = "sports"
    TOYS = "toys"
    OTHER = "other"

    @classmethod
    def values(cls):
        return [c.value for c in cls]


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    # plain string column; allowed values are checked by the catalogue service
    category = Column(String(32), nullable=False, index=True)
    image_url = Column(String(512), nullable=False, default=PLACEHOLDER_IMAGE)
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    reviews = relationship(
        "Review",
        back_populates="product",
        order_by="Review.created_at",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
