import asyncio
from datetime import timedelta

import pytest
from fastapi import HTTPException

from challanbook.auth import create_access_token, refresh_access_token, verify_token
from challanbook.exceptions import IdentityError
from challanbook.services import identity_service
from challanbook.services.identity_service import AUTH_ERROR_MESSAGES, describe_auth_error


def test_token_round_trip():
    token = create_access_token({"sub": "google-uid-1", "email": "owner@acme.in"})
    claims = verify_token(token)
    assert claims["sub"] == "google-uid-1"
    assert claims["email"] == "owner@acme.in"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "google-uid-1"}, expires_delta=timedelta(minutes=-5))
    with pytest.raises(HTTPException) as exc_info:
        verify_token(token)
    assert exc_info.value.status_code == 401


def test_token_without_subject_is_rejected():
    with pytest.raises(HTTPException):
        verify_token(create_access_token({"email": "owner@acme.in"}))


def test_garbage_token_is_rejected():
    with pytest.raises(HTTPException):
        verify_token("not.a.token")


def test_refresh_keeps_session_claims():
    token = create_access_token({"sub": "google-uid-1", "email": "owner@acme.in", "name": "Owner"})
    claims = verify_token(refresh_access_token(token))
    assert (claims["sub"], claims["email"], claims["name"]) == ("google-uid-1", "owner@acme.in", "Owner")


@pytest.mark.parametrize("code", ["configuration_not_found", "invalid_client"])
def test_configuration_errors_explain_setup(code):
    assert "configuration" in describe_auth_error(code, "whatever")


@pytest.mark.parametrize("code", sorted(AUTH_ERROR_MESSAGES))
def test_known_codes_have_friendly_messages(code):
    assert describe_auth_error(code, "raw provider text") == AUTH_ERROR_MESSAGES[code]


def test_unknown_code_falls_back_to_code_and_message():
    assert describe_auth_error("temporarily_unavailable", "Try later") == "temporarily_unavailable: Try later"


def test_sign_in_without_credentials(monkeypatch):
    monkeypatch.setattr(identity_service.settings, "GOOGLE_CLIENT_ID", "")
    with pytest.raises(IdentityError) as exc_info:
        identity_service.start_sign_in("http://testserver/auth/google/callback")
    assert exc_info.value.code == "configuration_not_found"


async def test_upsert_user_keeps_first_sign_in_time():
    claims = {"sub": "google-uid-1", "email": "owner@acme.in", "name": "Owner"}

    first = await identity_service.upsert_user(claims)
    second = await identity_service.upsert_user({**claims, "name": "Owner Renamed"})

    assert second.created_at == first.created_at
    assert second.display_name == "Owner Renamed"
    assert (await identity_service.find_user("google-uid-1")).email == "owner@acme.in"
    assert await identity_service.find_user("nobody") is None


async def test_audit_records_sign_in(mongo):
    from challanbook.enums import AuditAction
    from challanbook.services.audit_service import AuditService

    await AuditService.log_activity("google-uid-1", "owner@acme.in", AuditAction.LOGIN, ip_address="10.0.0.1")

    entry = await mongo["audit_logs"].find_one({"user_id": "google-uid-1"})
    assert entry["action"] == "login"
    assert entry["ip_address"] == "10.0.0.1"


def test_logout_clears_session_and_is_audited(anonymous_client, mongo):
    token = create_access_token({"sub": "google-uid-1", "email": "owner@acme.in"})
    anonymous_client.cookies.set("session_token", token)

    response = anonymous_client.get("/auth/logout", headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.2"}, follow_redirects=False)

    assert response.headers["location"] == "/auth/login"
    assert "session_token=" in response.headers["set-cookie"]
    entry = asyncio.run(mongo["audit_logs"].find_one({"action": "logout"}))
    assert entry["ip_address"] == "203.0.113.7"
