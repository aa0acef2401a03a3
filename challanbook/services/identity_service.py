"""Google sign-in.

The OAuth authorization-code flow is driven by ``google_auth_oauthlib``;
the returned ID token is verified with ``google-auth`` before the user is
recorded. Provider failures surface as ``IdentityError`` whose code maps
to a human readable explanation through ``describe_auth_error``.
"""
from datetime import datetime
from typing import Optional, Tuple

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error
from requests.exceptions import RequestException
from starlette.concurrency import run_in_threadpool

from challanbook.database import get_collection
from challanbook.enums import Collection
from challanbook.exceptions import IdentityError
from challanbook.logger import logger
from challanbook.models.user import User
from config import settings

GOOGLE_SCOPES = [
    "openid",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
]

CONFIGURATION_MESSAGE = (
    "Authentication configuration error. Please make sure Google sign-in is enabled "
    "and the OAuth consent screen is configured."
)

AUTH_ERROR_MESSAGES = {
    "configuration_not_found": CONFIGURATION_MESSAGE,
    "invalid_client": CONFIGURATION_MESSAGE,
    "access_denied": "Sign-in was cancelled. Please try again.",
    "redirect_uri_mismatch": (
        "This domain is not authorized for Google sign-in. "
        "Please add it to the authorized redirect URIs of the OAuth client."
    ),
    "invalid_request": "There was a problem with the sign-in configuration. Please try again.",
    "unauthorized_client": "This application is not allowed to use Google sign-in. Check the OAuth client settings.",
    "invalid_grant": "The sign-in code has expired. Please sign in again.",
    "state_mismatch": "The sign-in session expired. Please try again.",
    "invalid_id_token": "Google returned an identity that could not be verified. Please try again.",
}


def describe_auth_error(code: str, message: str = "") -> str:
    if code in AUTH_ERROR_MESSAGES:
        return AUTH_ERROR_MESSAGES[code]
    return f"{code}: {message}"


def is_configured() -> bool:
    return bool(settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET)


def build_flow(redirect_uri: str, state: Optional[str] = None, code_verifier: Optional[str] = None) -> Flow:
    if not is_configured():
        raise IdentityError("configuration_not_found", "Google client credentials are not set")

    return Flow.from_client_config(
        {
            "web": {
                "client_id": settings.GOOGLE_CLIENT_ID,
                "client_secret": settings.GOOGLE_CLIENT_SECRET,
                "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                "token_uri": "https://oauth2.googleapis.com/token",
                "redirect_uris": [redirect_uri],
            }
        },
        scopes=GOOGLE_SCOPES,
        redirect_uri=redirect_uri,
        state=state,
        code_verifier=code_verifier,
        autogenerate_code_verifier=code_verifier is None,
    )


def start_sign_in(redirect_uri: str) -> Tuple[str, str, str]:
    """Return (authorization_url, state, code_verifier) for a new sign-in."""
    flow = build_flow(redirect_uri)
    auth_url, state = flow.authorization_url(prompt="select_account")
    return auth_url, state, flow.code_verifier


def _exchange(code: str, redirect_uri: str, state: str, code_verifier: str) -> dict:
    flow = build_flow(redirect_uri, state=state, code_verifier=code_verifier)
    try:
        flow.fetch_token(code=code)
    except OAuth2Error as e:
        raise IdentityError(e.error, e.description or "")
    except RequestException as e:
        raise IdentityError("network_request_failed", str(e))

    raw_token = flow.credentials.id_token
    if not raw_token:
        raise IdentityError("invalid_id_token", "No ID token in the response")
    try:
        return id_token.verify_oauth2_token(raw_token, google_requests.Request(), settings.GOOGLE_CLIENT_ID)
    except ValueError as e:
        raise IdentityError("invalid_id_token", str(e))


async def complete_sign_in(code: str, redirect_uri: str, state: str, code_verifier: str) -> dict:
    """Exchange the authorization code and return the verified ID token claims."""
    # The Google client libraries are synchronous
    return await run_in_threadpool(_exchange, code, redirect_uri, state, code_verifier)


async def upsert_user(claims: dict) -> User:
    now = datetime.utcnow()
    users = await get_collection(Collection.USERS.value)
    await users.update_one(
        {"uid": claims["sub"]},
        {
            "$set": {
                "email": claims.get("email"),
                "display_name": claims.get("name"),
                "last_login_at": now,
            },
            "$setOnInsert": {"created_at": now},
        },
        upsert=True,
    )
    logger.info(f"User signed in: {claims.get('email')}")
    document = await users.find_one({"uid": claims["sub"]})
    document.pop("_id", None)
    return User.model_validate(document)


async def find_user(uid: str) -> Optional[User]:
    users = await get_collection(Collection.USERS.value)
    document = await users.find_one({"uid": uid})
    if document is None:
        return None
    document.pop("_id", None)
    return User.model_validate(document)
