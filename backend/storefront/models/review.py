from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from storefront.db import Base
from storefront.models._common import new_id, utcnow


class Review(Base):
    """One rating per (user, product); the pair is checked by ReviewService."""

    __tablename__ = "reviews"

    id = Column(String(32), primary_key=True, default=new_id)
    product_id = Column(
        String(32), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    product = relationship("Product", back_populates="reviews")
    user = relationship("User")
