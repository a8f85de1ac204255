from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from storefront.db import Base
from storefront.models._common import new_id, utcnow


class Cart(Base):
    __tablename__ = "carts"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), unique=True, index=True, nullable=False)
    # derived; rewritten by CartService on every persist
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="cart")
    items = relationship(
        "CartItem",
        back_populates="cart",
        order_by="CartItem.position",
        cascade="all, delete-orphan",
    )
