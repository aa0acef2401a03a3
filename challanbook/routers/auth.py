import secrets
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse, JSONResponse

from challanbook.auth import create_access_token, verify_token, refresh_access_token, set_session_cookie, clear_session_cookie
from challanbook.dependencies import get_session_token
from challanbook.enums import AuditAction
from challanbook.exceptions import IdentityError
from challanbook.logger import logger
from challanbook.services import identity_service
from challanbook.services.audit_service import AuditService
from challanbook.templating import templates
from config import settings

router = APIRouter()

STATE_COOKIE = "oauth_state"
VERIFIER_COOKIE = "oauth_verifier"
SIGN_IN_COOKIE_AGE = 10 * 60


def _callback_url(request: Request) -> str:
    return str(request.base_url).rstrip("/") + "/auth/google/callback"


def _login_page(request: Request, error: str = None, status_code: int = 200):
    return templates.TemplateResponse(request, "auth/login.html", {
        "request": request,
        "error": error,
        "show_setup_help": bool(error and "configuration" in error),
    }, status_code=status_code)


@router.get("/login")
async def login_page(request: Request):
    token = get_session_token(request)
    if token:
        try:
            verify_token(token)
            return RedirectResponse(url="/dashboard", status_code=status.HTTP_302_FOUND)
        except HTTPException:
            pass
    return _login_page(request)


@router.get("/google")
async def google_sign_in(request: Request):
    try:
        auth_url, state, code_verifier = identity_service.start_sign_in(_callback_url(request))
    except IdentityError as e:
        logger.error(f"Google sign-in could not start: {e.message}")
        return _login_page(request, identity_service.describe_auth_error(e.code, e.raw_message))

    response = RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)
    for key, value in ((STATE_COOKIE, state), (VERIFIER_COOKIE, code_verifier or "")):
        response.set_cookie(key, value, httponly=True, max_age=SIGN_IN_COOKIE_AGE, samesite="lax", secure=settings.is_production)
    return response


@router.get("/google/callback")
async def google_callback(request: Request):
    """Google redirects back here with ?code=...&state=... or ?error=..."""
    error = request.query_params.get("error")
    code = request.query_params.get("code", "")
    state = request.query_params.get("state", "")
    expected_state = request.cookies.get(STATE_COOKIE)

    try:
        if error:
            raise IdentityError(error, request.query_params.get("error_description", ""))
        if not code:
            raise IdentityError("invalid_request", "No authorization code returned")
        if not expected_state or not secrets.compare_digest(state, expected_state):
            raise IdentityError("state_mismatch", "OAuth state did not match")

        claims = await identity_service.complete_sign_in(
            code, _callback_url(request), state, request.cookies.get(VERIFIER_COOKIE) or None
        )
        user = await identity_service.upsert_user(claims)
    except IdentityError as e:
        logger.warning(f"Google sign-in failed: {e.message}")
        response = _login_page(request, identity_service.describe_auth_error(e.code, e.raw_message))
        response.delete_cookie(STATE_COOKIE)
        response.delete_cookie(VERIFIER_COOKIE)
        return response

    await AuditService.log_activity(
        user_id=user.uid,
        email=user.email,
        action=AuditAction.LOGIN,
        ip_address=AuditService.get_client_ip(request)
    )

    access_token = create_access_token(data={"sub": user.uid, "email": user.email, "name": user.display_name})
    response = RedirectResponse(url="/dashboard", status_code=status.HTTP_302_FOUND)
    set_session_cookie(response, access_token)
    response.delete_cookie(STATE_COOKIE)
    response.delete_cookie(VERIFIER_COOKIE)
    return response


@router.post("/refresh")
async def refresh_session(request: Request):
    """Force-refresh the session token while it is still valid."""
    token = get_session_token(request)
    if not token:
        return JSONResponse({"detail": "Not authenticated"}, status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        new_token = refresh_access_token(token)
    except HTTPException:
        response = JSONResponse({"detail": "Session expired"}, status_code=status.HTTP_401_UNAUTHORIZED)
        clear_session_cookie(response)
        return response

    response = JSONResponse({"access_token": new_token, "token_type": "bearer"})
    set_session_cookie(response, new_token)
    return response


@router.get("/logout")
async def logout(request: Request):
    token = get_session_token(request)
    claims = None
    if token:
        try:
            claims = verify_token(token)
        except HTTPException:
            pass
    if claims:
        await AuditService.log_activity(
            user_id=claims["sub"],
            email=claims.get("email"),
            action=AuditAction.LOGOUT,
            ip_address=AuditService.get_client_ip(request)
        )
    response = RedirectResponse(url="/auth/login", status_code=status.HTTP_302_FOUND)
    clear_session_cookie(response)
    return response
