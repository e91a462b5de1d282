from datetime import timedelta
import pytest
from jose import jwt

from config import settings
from infra.security import InvalidTokenError, create_access_token, decode_user_id

def test_token_round_trip():
    token = create_access_token(42, username="alice")
    assert decode_user_id(token) == 42

    claims = jwt.get_unverified_claims(token)
    assert claims["username"] == "alice"
    assert "exp" in claims

def test_expired_token_is_rejected():
    token = create_access_token(1, expires_delta=timedelta(seconds=-10))
    with pytest.raises(InvalidTokenError):
        decode_user_id(token)

def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"user_id": 1}, "some-other-secret", algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_user_id(token)

@pytest.mark.parametrize("claims", [{}, {"user_id": "abc"}, {"user_id": 0}, {"user_id": True}, {"user_id": None}])
def test_token_without_usable_user_id_is_rejected(claims):
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_user_id(token)

def test_string_user_id_is_accepted():
    token = jwt.encode({"user_id": "7"}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    assert decode_user_id(token) == 7

@pytest.mark.parametrize("token", [None, "", "not-a-token"])
def test_missing_or_garbage_token(token):
    with pytest.raises(InvalidTokenError):
        decode_user_id(token)

def test_app_verifies_with_its_own_secret_key(test_settings):
    from fastapi.testclient import TestClient
    from main import create_app

    app_settings = test_settings.model_copy(update={"SECRET_KEY": "operator-secret"})
    app = create_app(app_settings)

    with TestClient(app) as client:
        own = create_access_token(1, app_settings=app_settings)
        response = client.get("/api/music/list", headers={"Authorization": f"Bearer {own}"})
        assert response.status_code == 200

        # signed with the module default key, not this app's
        foreign = create_access_token(1)
        response = client.get("/api/music/list", headers={"Authorization": f"Bearer {foreign}"})
        assert response.status_code == 401

        response = client.get("/api/music/stream", params={"id": 1, "token": foreign})
        assert response.status_code == 401
