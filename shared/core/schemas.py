from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

# Shared properties
T = TypeVar("T")


class AdminToken(BaseModel):
    role: str
    email: str
    exp: Optional[int] = None


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
