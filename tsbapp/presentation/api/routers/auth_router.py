import logging

from fastapi import APIRouter, HTTPException, Response, status

from tsbapp import config
from tsbapp.infrastructure.security.jwt_service import create_access_token, verify_admin_password
from tsbapp.presentation.dependencies import ACCESS_TOKEN_COOKIE
from tsbapp.presentation.schemas.auth_schema import LoginRequest, Token
from tsbapp.presentation.schemas.question_schema import SuccessResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
def login(data: LoginRequest, response: Response):
    if not verify_admin_password(data.password):
        logger.warning("Admin login failed: wrong password")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Password is incorrect")
    token = create_access_token()
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token,
        httponly=True,
        samesite="lax",
        max_age=config.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info("Admin logged in")
    return Token(access_token=token)


@router.post("/logout", response_model=SuccessResponse)
def logout(response: Response):
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return SuccessResponse(message="Logged out")
