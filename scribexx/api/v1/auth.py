"""
Authentication endpoints.
"""

from fastapi import APIRouter, HTTPException, Request, status

from scribexx.api.deps import CurrentUser, DbSession, get_client_ip, get_user_agent
from scribexx.kernel.identity.identity_service import IdentityService
from scribexx.kernel.models.user import UserRole
from scribexx.schemas.auth import TokenResponse, UserCreate, UserLogin, UserResponse

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    data: UserCreate,
    db: DbSession,
):
    """
    Register a new account.

    Returns an access token on successful registration.
    """
    identity_service = IdentityService(db)
    ip_address = get_client_ip(request)

    try:
        await identity_service.register_user(
            username=data.username,
            password=data.password,
            display_name=data.display_name,
            role=UserRole(data.role),
            age=data.age,
            grade=data.grade,
            avatar_url=data.avatar_url,
            ip_address=ip_address,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    result = await identity_service.authenticate(
        username=data.username,
        password=data.password,
        ip_address=ip_address,
        user_agent=get_user_agent(request),
    )
    if not result:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to authenticate after registration",
        )

    user, token, expires_at = result
    return TokenResponse(
        access_token=token,
        expires_in=IdentityService.expires_in(expires_at),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    data: UserLogin,
    db: DbSession,
):
    """Authenticate with username and password."""
    identity_service = IdentityService(db)
    result = await identity_service.authenticate(
        username=data.username,
        password=data.password,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user, token, expires_at = result
    return TokenResponse(
        access_token=token,
        expires_in=IdentityService.expires_in(expires_at),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(user: CurrentUser):
    """Get the current user's profile."""
    return user
