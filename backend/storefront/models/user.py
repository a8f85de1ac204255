from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from storefront.db import Base
from storefront.models._common import new_id, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(128), nullable=False)
    email = Column(String(256), unique=True, index=True, nullable=False)
    password_hash = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    cart = relationship("Cart", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"
