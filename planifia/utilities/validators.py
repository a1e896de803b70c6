"""
Input validation schemas using Pydantic for the HTTP layer.
"""
from datetime import date as _date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from planifia.domain.Meal import MealType


class SignInInput(BaseModel):
    """Schema for sign-in requests."""
    email: str = Field(..., min_length=3, max_length=254)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Trim and require a single '@' with text on both sides."""
        v = v.strip()
        local, sep, domain = v.partition('@')
        if not sep or not local or not domain or '@' in domain:
            raise ValueError('Invalid email address')
        return v


class MealInput(BaseModel):
    """Schema for saving (creating or editing) a meal.

    dish_name is NOT required to be non-empty here: an empty name is a
    silent no-op handled by the planner, not a validation error.
    """
    date: _date
    meal_type: MealType
    dish_name: str = Field(default="", max_length=200)
    editing_meal_id: Optional[str] = None

    @field_validator('meal_type', mode='before')
    @classmethod
    def normalize_meal_type(cls, v):
        """Accept 'lunch' / 'Dinner' as well as the canonical upper-case values."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('editing_meal_id')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ManualItemInput(BaseModel):
    """Schema for a manually entered shopping list item."""
    name: str = Field(default="", max_length=100)


class DishInput(BaseModel):
    """Schema for the ingredient preview endpoint."""
    dish_name: str = Field(..., min_length=1, max_length=200)

    @field_validator('dish_name')
    @classmethod
    def validate_dish_name(cls, v):
        if not v.strip():
            raise ValueError('Dish name cannot be empty')
        return v.strip()
