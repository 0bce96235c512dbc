from fastapi import APIRouter, Depends, status

from catalog.models import AuthResponse, LoginRequest, RegisterRequest, UserProfile
from catalog_api.auth import get_current_user
from catalog_api.dependencies import get_user_service
from catalog_api.services import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, users: UserService = Depends(get_user_service)):
    """Create a regular user account and return a token for it"""
    return await users.register(payload)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, users: UserService = Depends(get_user_service)):
    """Exchange an email (or username) and password for a token"""
    return await users.login(payload)


@router.get("/profile", response_model=UserProfile)
async def profile(user: UserProfile = Depends(get_current_user)):
    return user
