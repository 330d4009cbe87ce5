from typing import Optional
from pydantic import BaseModel


class AdminLoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AdminLoginResponse(BaseModel):
    token: str
