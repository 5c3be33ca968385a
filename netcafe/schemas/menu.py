"""
Pydantic schemas for categories and dishes
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)
    display_order: int = 0


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)
    display_order: Optional[int] = None


class DishCreate(BaseModel):
    category_id: int
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    preparation_time: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = Field(default=None, max_length=1000)
    is_vegetarian: bool = True
    is_available: bool = True


class DishUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    preparation_time: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = Field(default=None, max_length=1000)
    is_vegetarian: Optional[bool] = None
    is_available: Optional[bool] = None


class DishResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    dish_id: int
    category_id: int
    name: str
    description: Optional[str]
    price: Decimal
    preparation_time: Optional[int]
    image_url: Optional[str]
    is_vegetarian: bool
    is_available: bool


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: int
    name: str
    description: Optional[str]
    display_order: int
    created_at: datetime


class CategoryWithDishes(CategoryResponse):
    dishes: List[DishResponse] = []
