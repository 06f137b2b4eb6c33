from fastapi import APIRouter, Depends, status
import asyncio
from sqlalchemy.orm import Session
from storefront.auth.dependencies import require_sign_in, is_admin
from storefront.db.database import get_db
from storefront.models.user import User
from storefront.schemas.common import Envelope, OkResponse, ERROR_RESPONSES, ADMIN_ERROR_RESPONSES
from storefront.schemas.user import (
    RegisterRequest, RegisterResponse, LoginRequest, LoginResponse,
    ForgotPasswordRequest, ProfileUpdate, ProfileResponse, UserListResponse,
)
from storefront.services.user_service import UserService

router = APIRouter(
    prefix="/auth",
    tags=["Auth"]
)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency to get user service"""
    return UserService(db)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a regular user account.

    **Required fields:** name, email, password, phone (digits only), address, answer.
    The security answer is used by `/forgot-password`.
    """,
    responses={
        400: ERROR_RESPONSES[400],
        409: {"description": "Email is already registered"}
    }
)
async def register(
    data: RegisterRequest,
    user_service: UserService = Depends(get_user_service)
):
    # bcrypt hashing is CPU bound
    user = await asyncio.to_thread(user_service.register, data)
    return {"success": True, "message": "User Registered Successfully", "user": user}


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="""
    Exchange email and password for a bearer token valid for 7 days.

    Send the token on later requests:
    ```
    Authorization: Bearer <token>
    ```
    """,
    responses={
        401: {"description": "Invalid Password"},
        404: {"description": "Email is not registered"}
    }
)
async def login(
    data: LoginRequest,
    user_service: UserService = Depends(get_user_service)
):
    user, token = await asyncio.to_thread(user_service.login, data)
    return {"success": True, "message": "Logged in successfully", "user": user, "token": token}


@router.post(
    "/forgot-password",
    response_model=Envelope,
    summary="Reset password with security answer",
    responses={
        404: {"description": "Wrong Email Or Answer"}
    }
)
async def forgot_password(
    data: ForgotPasswordRequest,
    user_service: UserService = Depends(get_user_service)
):
    await asyncio.to_thread(user_service.reset_password, data)
    return {"success": True, "message": "Password Reset Successfully"}


@router.get(
    "/user-auth",
    response_model=OkResponse,
    summary="Check user session",
    responses=ERROR_RESPONSES
)
async def user_auth(current_user: User = Depends(require_sign_in)):
    return {"ok": True}


@router.get(
    "/admin-auth",
    response_model=OkResponse,
    summary="Check admin session",
    responses=ADMIN_ERROR_RESPONSES
)
async def admin_auth(current_user: User = Depends(is_admin)):
    return {"ok": True}


@router.put(
    "/profile",
    response_model=ProfileResponse,
    summary="Update own profile",
    description="""
    Partial update of the caller's profile. Omitted fields remain unchanged.
    The password, when given, must be at least 6 characters. Email cannot be changed.
    """,
    responses=ERROR_RESPONSES
)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(require_sign_in),
    user_service: UserService = Depends(get_user_service)
):
    user = await asyncio.to_thread(user_service.update_profile, current_user, data)
    return {"success": True, "message": "Profile Updated Successfully", "updated_user": user}


@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List regular users (admin only)",
    responses=ADMIN_ERROR_RESPONSES
)
async def list_users(
    current_user: User = Depends(is_admin),
    user_service: UserService = Depends(get_user_service)
):
    return {"success": True, "message": "All Users", "users": user_service.list_users()}
