"""
Authentication endpoints for API v1.

Sign-up and sign-in return a bearer token together with the user's
profile so the client can route customers and providers to their
dashboards.  Sign-out revokes the presented token.
"""

from fastapi import APIRouter, Depends, status

from khadmaty_api.app.core.security import get_current_user
from khadmaty_api.app.schemas.user import SignIn, SignUp, TokenResponse
from khadmaty_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(data: SignUp) -> TokenResponse:
    """Register a customer or provider account."""
    return await UserService.create_user(data)


@router.post("/login", response_model=TokenResponse)
async def sign_in(data: SignIn) -> TokenResponse:
    return await UserService.authenticate(data.email, data.password)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(current_user: dict = Depends(get_current_user)) -> None:
    await UserService.sign_out(current_user)
