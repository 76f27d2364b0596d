from typing import Optional
from pydantic import BaseModel, Field


class AddCartItemRequest(BaseModel):
    product_id: str
    rental_start_date: str
    rental_end_date: str
    size: Optional[str] = None
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: Optional[int] = None
    rental_start_date: Optional[str] = None
    rental_end_date: Optional[str] = None
    size: Optional[str] = None
