"""
Menu models: categories and the dishes in them
"""

from sqlmodel import Field, SQLModel
from decimal import Decimal
from datetime import datetime
from typing import Optional


class Category(SQLModel, table=True):
    """Menu category for organizing dishes"""

    __tablename__ = "categories"

    category_id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, nullable=False, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    display_order: int = Field(default=0, description="Order to display categories in UI")

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None


class Dish(SQLModel, table=True):
    """Orderable menu item"""

    __tablename__ = "dishes"

    dish_id: Optional[int] = Field(default=None, primary_key=True)
    category_id: int = Field(foreign_key="categories.category_id", index=True)

    name: str = Field(max_length=150, nullable=False)
    description: Optional[str] = Field(default=None)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    preparation_time: Optional[int] = Field(default=None, description="Minutes")
    image_url: Optional[str] = Field(default=None, max_length=1000)

    is_vegetarian: bool = Field(default=True)
    is_available: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
