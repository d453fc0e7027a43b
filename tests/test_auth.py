import asyncio
from unittest.mock import patch

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from sito.auth import get_current_user

SECRET = "test-jwt-secret"
NOT_AUTHENTICATED = "Not authenticated. Please provide a valid Bearer token in the Authorization header."


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    def test_missing_credentials_are_unauthenticated(self, db):
        with pytest.raises(HTTPException) as exc:
            asyncio.run(get_current_user(credentials=None, db=db))
        assert exc.value.status_code == 401
        assert exc.value.detail == NOT_AUTHENTICATED

    def test_malformed_token_is_rejected(self, db):
        with pytest.raises(HTTPException) as exc:
            asyncio.run(get_current_user(credentials=bearer("not-a-jwt"), db=db))
        assert exc.value.status_code == 401
        assert exc.value.detail == "Invalid token format. Expected a valid JWT token."

    def test_valid_token_resolves_profile(self, db, member):
        token = jwt.encode({"sub": member.id, "aud": "authenticated"}, SECRET, algorithm="HS256")

        with patch("sito.auth.SUPABASE_JWT_SECRET", SECRET):
            profile = asyncio.run(get_current_user(credentials=bearer(token), db=db))

        assert profile.id == member.id


class TestProtectedEndpoints:
    def test_request_without_authorization_header_gets_401(self, client):
        response = client.get("/courses/me/interests")
        assert response.status_code == 401
        assert response.json()["detail"] == NOT_AUTHENTICATED

    def test_non_bearer_scheme_gets_401(self, client):
        response = client.get("/courses/me/interests", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401
