"""
Profile endpoints for API v1.

Back the settings page: reading and editing the profile, uploading an
avatar, changing the password and deleting the account.  Providers
also get their dashboard figures from ``/profiles/me/stats``.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from khadmaty_api.app.core.config import settings
from khadmaty_api.app.core.security import get_current_user, require_roles
from khadmaty_api.app.schemas.user import (
    AvatarUploadResponse,
    PasswordChange,
    ProfileRead,
    ProfileUpdate,
    ProviderStats,
)
from khadmaty_api.app.services.storage_service import StorageService
from khadmaty_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/me", response_model=ProfileRead)
async def get_my_profile(current_user: dict = Depends(get_current_user)) -> ProfileRead:
    return await UserService.get_profile(current_user["user_id"])


@router.put("/me", response_model=ProfileRead)
async def update_my_profile(
    update: ProfileUpdate,
    current_user: dict = Depends(get_current_user),
) -> ProfileRead:
    """Update the fields sent in the body; omitted fields keep their value."""
    return await UserService.update_profile(current_user["user_id"], update)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_account(current_user: dict = Depends(get_current_user)) -> None:
    await UserService.delete_user(current_user["user_id"])


@router.post("/me/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    current_user: dict = Depends(get_current_user),
) -> AvatarUploadResponse:
    """Store an avatar image (up to 2 MiB) and set it on the profile."""
    user_id = current_user["user_id"]
    content = await file.read()
    url = StorageService.save_image(
        content,
        file.content_type,
        folder="avatars",
        name_prefix=f"{user_id}-",
        max_bytes=settings.max_avatar_bytes,
        too_large_key="avatar_too_large",
    )
    await UserService.set_avatar(user_id, url)
    return AvatarUploadResponse(avatar_url=url)


@router.post("/me/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    data: PasswordChange,
    current_user: dict = Depends(get_current_user),
) -> None:
    await UserService.change_password(current_user["user_id"], data)


@router.get("/me/stats", response_model=ProviderStats)
async def my_stats(current_user: dict = Depends(require_roles("provider"))) -> ProviderStats:
    return await UserService.provider_stats(current_user["user_id"])
