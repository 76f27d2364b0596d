from typing import Optional
from pydantic import BaseModel, Field, field_validator


class RegisterRequest(BaseModel):
    email: str = Field(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: str = "customer"
    shop_name: Optional[str] = None
    shop_address: Optional[str] = None
    mobile_number: Optional[str] = None

    @field_validator("role")
    @classmethod
    def _known_role(cls, v):
        if v not in ("customer", "vendor"):
            raise ValueError("role must be customer or vendor")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str
