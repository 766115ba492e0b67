import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, JSON, String, Text
from shared.config.database import Base

PIZZA_CATEGORIES = ("Classic", "Premium", "Vegetarian", "Vegan", "Spicy")
DEFAULT_PIZZA_IMAGE = "/images/default-pizza.jpg"


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Pizza(Base):
    __tablename__ = "pizzas"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(120), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    image = Column(String, nullable=False, default=DEFAULT_PIZZA_IMAGE)
    category = Column(String(20), nullable=False, default="Classic")
    ingredients = Column(JSON, nullable=False, default=list)
    available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
