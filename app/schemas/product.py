from typing import List, Optional
from pydantic import BaseModel, Field


class ProductCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price_per_day: float = Field(gt=0)
    security_deposit: float = Field(default=0, ge=0)
    stock_quantity: int = Field(ge=0)
    sizes: List[str] = []
    images: List[str] = []


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    price_per_day: Optional[float] = Field(default=None, gt=0)
    security_deposit: Optional[float] = Field(default=None, ge=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    sizes: Optional[List[str]] = None
    images: Optional[List[str]] = None


class AvailabilityDeltaRequest(BaseModel):
    delta: int
