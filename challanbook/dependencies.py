from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from challanbook.auth import verify_token
from challanbook.models.user import User
from challanbook.services.identity_service import find_user
from config import settings

security = HTTPBearer(auto_error=False)

LOGIN_REDIRECT = {"Location": "/auth/login"}


def get_session_token(request: Request, credentials: HTTPAuthorizationCredentials = None):
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials
    return token


async def get_current_user(request: Request, credentials: HTTPAuthorizationCredentials = Depends(security)) -> User:
    """Restore the session for a gated view, redirecting to login when there is none."""
    token = get_session_token(request, credentials)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Not authenticated",
            headers=LOGIN_REDIRECT
        )

    try:
        claims = verify_token(token)
    except HTTPException:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Invalid token",
            headers=LOGIN_REDIRECT
        )

    user = await find_user(claims["sub"])
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="User not found",
            headers=LOGIN_REDIRECT
        )

    return user


async def get_template_context(request: Request, current_user: User = Depends(get_current_user)):
    """Common template context for every signed-in page."""
    return {
        "request": request,
        "current_user": current_user,
    }
