from pydantic import BaseModel, field_validator
from typing import Optional

from allowance.schemas.state import WishlistCategory, WishlistItem
from allowance.schemas.tracker import Amount


class _Named(BaseModel):
    name: Optional[str] = None
    amount: Amount = None

    @field_validator("name")
    @classmethod
    def name_trim(cls, v: str | None):
        if v is None:
            return None
        return v.strip()


class SpendingIn(_Named):
    date: Optional[str] = None


class ProposedIn(_Named):
    pass


class WishlistIn(_Named):
    category_id: Optional[int] = None


class CategoryIn(BaseModel):
    name: Optional[str] = None


class ItemCategoryIn(BaseModel):
    category_id: Optional[int] = None


class ColorRangeIn(BaseModel):
    min: Amount = None
    max: Amount = None
    color: Optional[str] = None


class CategoryGroupOut(BaseModel):
    category: WishlistCategory
    visible: bool
    items: list[WishlistItem] = []
