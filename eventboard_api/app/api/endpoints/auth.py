"""
Authentication endpoints.

Registration and login both answer with a bearer token and the user's
profile; ``/me`` returns the profile of the token's owner.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from eventboard_api.app.core.security import create_access_token, get_current_user
from eventboard_api.app.schemas.user import AuthResponse, MeResponse, UserCreate, UserLogin
from eventboard_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate) -> AuthResponse:
    """Register a new user and log them in.

    Returns HTTP 400 when the e‑mail is already taken.
    """
    try:
        created = await UserService.create_user(user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    token = create_access_token({"sub": created.email})
    return AuthResponse(message="User registered successfully", token=token, user=created)


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin) -> AuthResponse:
    """Exchange e‑mail and password for a bearer token."""
    user = await UserService.authenticate(credentials.email, credentials.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token({"sub": user.email})
    return AuthResponse(message="Login successful", token=token, user=user)


@router.get("/me", response_model=MeResponse)
async def me(current_user: Dict[str, Any] = Depends(get_current_user)) -> MeResponse:
    user = await UserService.get_user_by_id(current_user["user_id"])
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return MeResponse(user=user)
