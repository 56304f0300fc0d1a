"""
Category schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Union


class CustomCategoryInput(BaseModel):
    """A free-form category entered instead of a known one."""
    custom: str = Field(..., min_length=1)


# Either a known category value ("food") or {"custom": "pets"}
CategoryField = Union[str, CustomCategoryInput]


class CategoryOption(BaseModel):
    value: str
    label: str


class CategoryCatalog(BaseModel):
    expense: List[CategoryOption]
    income: List[CategoryOption]
