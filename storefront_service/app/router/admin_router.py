from fastapi import APIRouter

from shared.core import auth
from ..schemas.admin_schemas import AdminLoginRequest, AdminLoginResponse

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login", response_model=AdminLoginResponse)
def login(credentials: AdminLoginRequest):
    token = auth.authenticate_admin(credentials.email, credentials.password)
    return AdminLoginResponse(token=token)
