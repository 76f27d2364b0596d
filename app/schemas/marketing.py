from pydantic import BaseModel, Field


class SubscribeRequest(BaseModel):
    email: str = Field(pattern=r"^\s*[^\s@]+@[^\s@]+\.[^\s@]+\s*$")
