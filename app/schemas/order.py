from typing import List, Optional
from pydantic import BaseModel, Field


class CheckoutRequest(BaseModel):
    payment_method: Optional[str] = None
    coupon_code: Optional[str] = None
    idempotency_key: Optional[str] = Field(default=None, max_length=100)


class StatusUpdateRequest(BaseModel):
    status: str


class FeedbackRequest(BaseModel):
    rating: int = Field(ge=1, le=5)
    review: str = ""
    tags: List[str] = []
    item_index: Optional[int] = None
    item_name: Optional[str] = None


class RaiseIssueRequest(BaseModel):
    type: str = Field(min_length=1)
    description: str = ""
    item_index: Optional[int] = None
    item_name: Optional[str] = None


class ResolveIssueRequest(BaseModel):
    status: str
    admin_response: Optional[str] = None
