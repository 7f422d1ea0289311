"""Item model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Item(Base, TimestampMixin):
    """A product listed in the store."""

    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String, nullable=False, default="")
    price = Column(Integer, nullable=False)  # cents
    image = Column(String(1024), nullable=True)
    large_image = Column(String(1024), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    user = relationship("User", backref="items")
