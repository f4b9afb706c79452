"""
Authentication routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import create_access_token, get_current_active_user, hash_password, verify_password
from workforce.database import get_db
from workforce.logging_config import get_logger
from workforce.models.user import Profile
from workforce.schemas.user import ChangePasswordRequest, LoginRequest, Profile as ProfileSchema, Token
from workforce.services.passwords import validate_password_strength

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = get_logger(__name__)


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    Login with email and password to get an access token.
    """
    result = await db.execute(select(Profile).where(Profile.email == credentials.email.strip().lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Inactive user")

    logger.info(f"User {user.id} logged in")
    return {
        "access_token": create_access_token(user.id),
        "token_type": "bearer",
        "must_change_password": user.must_change_password,
        "user": user,
    }


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_user: Profile = Depends(get_current_active_user),
):
    """
    Change the current user's password and clear the forced-change flag.

    The current password may be omitted only while a change is being forced.
    """
    if payload.new_password != payload.confirm_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Passwords do not match")

    if payload.current_password is not None or not current_user.must_change_password:
        if not verify_password(payload.current_password or "", current_user.hashed_password):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")

    validate_password_strength(payload.new_password)

    if verify_password(payload.new_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New password must be different from the current password",
        )

    current_user.hashed_password = hash_password(payload.new_password)
    current_user.must_change_password = False
    await db.commit()
    logger.info(f"User {current_user.id} changed their password")
    return {"success": True, "message": "Password changed successfully"}


@router.get("/me", response_model=ProfileSchema)
async def get_current_user_info(current_user: Profile = Depends(get_current_active_user)):
    """
    Get current user information.
    """
    return current_user
